"""Read-only repository for media metadata."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stagecms.domain.entities import Media
from stagecms.infrastructure.persistence.models import MediaModel
from stagecms.infrastructure.persistence.timestamps import as_utc


class MediaRepository:
    """Lookups of uploaded file metadata by id, URL or generated file name."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    @staticmethod
    def to_entity(model: MediaModel) -> Media:
        """Convert a media model into a domain entity."""
        return Media(
            id=model.id,
            file_name=model.file_name,
            file_name_url=model.file_name_url,
            content_type=model.content_type,
            file_size=model.file_size,
            url=model.url,
            tags=list(model.tags or []),
            extension=model.extension,
            stage_id=model.stage_id,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    async def _first(self, *criteria, stage_id: str | None = None) -> Media | None:
        query = select(MediaModel).where(*criteria)
        if stage_id is not None:
            query = query.where(MediaModel.stage_id == stage_id)
        result = await self.session.execute(query.limit(1))
        model = result.scalar_one_or_none()
        return self.to_entity(model) if model is not None else None

    async def get_by_id(self, media_id: str, stage_id: str | None = None) -> Media | None:
        """Get media by ID.

        Args:
            media_id: The media ID.
            stage_id: Only match media of this stage when given.

        Returns:
            The media if found, None otherwise.
        """
        return await self._first(MediaModel.id == media_id, stage_id=stage_id)

    async def get_by_url(self, url: str, stage_id: str | None = None) -> Media | None:
        """Get media by its public URL.

        Args:
            url: The absolute URL.
            stage_id: Only match media of this stage when given.

        Returns:
            The media if found, None otherwise.
        """
        return await self._first(MediaModel.url == url, stage_id=stage_id)

    async def get_by_file_name_url(
        self, file_name_url: str, stage_id: str | None = None
    ) -> Media | None:
        """Get media by its generated storage file name.

        Args:
            file_name_url: The generated file name.
            stage_id: Only match media of this stage when given.

        Returns:
            The media if found, None otherwise.
        """
        return await self._first(MediaModel.file_name_url == file_name_url, stage_id=stage_id)

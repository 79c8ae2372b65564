"""Repository for collection operations.

Provides CRUD operations and stage-scoped lookups for the collections table.
"""

import re

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from stagecms.domain.entities import Collection, CollectionField
from stagecms.infrastructure.persistence.models import CollectionModel
from stagecms.infrastructure.persistence.timestamps import as_utc


class CollectionRepository:
    """Repository for collection database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    @staticmethod
    def to_entity(model: CollectionModel) -> Collection:
        """Convert a collection model into a domain entity."""
        return Collection(
            id=model.id,
            name=model.name,
            slug=model.slug,
            stage_id=model.stage_id,
            backing_store_name=model.backing_store_name,
            fields=[CollectionField.from_dict(f) for f in model.fields or []],
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    async def create(self, collection: CollectionModel) -> CollectionModel:
        """Create a new collection.

        Args:
            collection: The collection model to create.

        Returns:
            The created collection model.
        """
        self.session.add(collection)
        await self.session.flush()
        return collection

    async def update(self, collection: CollectionModel) -> CollectionModel:
        """Flush pending changes of a collection.

        Args:
            collection: The modified collection model.

        Returns:
            The updated collection model.
        """
        await self.session.flush()
        return collection

    async def delete(self, collection: CollectionModel) -> None:
        """Delete a collection record.

        Args:
            collection: The collection model to delete.
        """
        await self.session.delete(collection)
        await self.session.flush()

    async def get_by_id(self, collection_id: str) -> CollectionModel | None:
        """Get a collection by ID.

        Args:
            collection_id: The collection ID.

        Returns:
            The collection model if found, None otherwise.
        """
        result = await self.session.execute(
            select(CollectionModel).where(CollectionModel.id == collection_id)
        )
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str, stage_id: str) -> CollectionModel | None:
        """Get a collection by slug within a stage.

        Args:
            slug: The collection slug.
            stage_id: The stage ID.

        Returns:
            The collection model if found, None otherwise.
        """
        result = await self.session.execute(
            select(CollectionModel).where(
                CollectionModel.slug == slug,
                CollectionModel.stage_id == stage_id,
            )
        )
        return result.scalars().first()

    async def name_exists(
        self, name: str, stage_id: str, exclude_id: str | None = None
    ) -> bool:
        """Check if a collection with the given name exists in a stage.

        Args:
            name: The collection name to check.
            stage_id: The stage ID.
            exclude_id: Optional collection ID to ignore (the one being renamed).

        Returns:
            True if the name exists, False otherwise.
        """
        query = select(CollectionModel.id).where(
            CollectionModel.name == name,
            CollectionModel.stage_id == stage_id,
        )
        if exclude_id is not None:
            query = query.where(CollectionModel.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def find_slug_occupant(
        self, slug: str, stage_id: str, exclude_id: str | None = None
    ) -> str | None:
        """Find the slug occupying a candidate within a stage.

        When the candidate is taken, the numbered family ``{slug}_{n}`` is
        inspected too and the highest-numbered member is returned, so that
        collision resolution continues after the largest suffix in use.

        Args:
            slug: The candidate slug.
            stage_id: The stage ID.
            exclude_id: Optional collection ID to ignore (the one being renamed).

        Returns:
            None if the candidate is free, otherwise the occupying slug.
        """
        family_pattern = slug.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_") + "\\_%"
        query = select(CollectionModel.slug).where(
            CollectionModel.stage_id == stage_id,
            or_(
                CollectionModel.slug == slug,
                CollectionModel.slug.like(family_pattern, escape="\\"),
            ),
        )
        if exclude_id is not None:
            query = query.where(CollectionModel.id != exclude_id)

        result = await self.session.execute(query)
        slugs = set(result.scalars().all())
        if slug not in slugs:
            return None

        numbered = re.compile(rf"^{re.escape(slug)}_(\d+)$")
        family = [
            (int(match.group(1)), candidate)
            for candidate in slugs
            if (match := numbered.match(candidate))
        ]
        return max(family)[1] if family else slug

    async def backing_store_name_exists(self, name: str, stage_id: str) -> bool:
        """Check if a backing-store name is taken within a stage.

        Args:
            name: The backing-store name.
            stage_id: The stage ID.

        Returns:
            True if the name exists, False otherwise.
        """
        result = await self.session.execute(
            select(CollectionModel.id)
            .where(
                CollectionModel.backing_store_name == name,
                CollectionModel.stage_id == stage_id,
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def list_by_stage(
        self, stage_id: str, skip: int = 0, limit: int = 20
    ) -> tuple[list[CollectionModel], int]:
        """List the collections of a stage, oldest first.

        Args:
            stage_id: The stage ID.
            skip: Number of collections to skip.
            limit: Maximum number of collections to return.

        Returns:
            Tuple of (collections, total count).
        """
        count_result = await self.session.execute(
            select(func.count(CollectionModel.id)).where(CollectionModel.stage_id == stage_id)
        )
        total = count_result.scalar_one()

        result = await self.session.execute(
            select(CollectionModel)
            .where(CollectionModel.stage_id == stage_id)
            .order_by(CollectionModel.created_at.asc(), CollectionModel.id.asc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total

"""SQLAlchemy model for the media table.

Rows are written by the upload pipeline; the CMS core only reads them.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, BigInteger, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from stagecms.infrastructure.persistence.database import Base


class MediaModel(Base):
    """SQLAlchemy model for uploaded file metadata.

    Attributes:
        id: Primary key (UUID string).
        file_name: Original file name.
        file_name_url: Generated storage file name.
        content_type: MIME type.
        file_size: Size in bytes.
        url: Public URL of the stored file.
        tags: JSON list of tags.
        extension: File extension.
        stage_id: Owning stage.
    """

    __tablename__ = "media"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_name_url: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    content_type: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    url: Mapped[str] = mapped_column(String(1024), nullable=False, index=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    extension: Mapped[str | None] = mapped_column(String(32), nullable=True)
    stage_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Media(id={self.id}, file_name={self.file_name})>"

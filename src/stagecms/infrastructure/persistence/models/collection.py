"""SQLAlchemy model for the collections table.

Collections store stage-scoped schema definitions. Field definitions are
embedded as a JSON list; items live in a separate table per collection.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from stagecms.infrastructure.persistence.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CollectionModel(Base):
    """SQLAlchemy model for the collections table.

    Name, slug and backing-store name are unique per stage. Uniqueness is
    checked by the service before writing, not enforced by constraints.

    Attributes:
        id: Primary key (UUID string).
        name: Display name.
        slug: Identifier derived from the name.
        stage_id: Owning stage.
        backing_store_name: Name of the physical table holding the items.
        fields: Ordered list of serialized field definitions.
        created_at: Timestamp when the collection was created.
        updated_at: Timestamp when the collection was last updated.
    """

    __tablename__ = "collections"
    __table_args__ = (
        Index("ix_collections_stage_name", "stage_id", "name"),
        Index("ix_collections_stage_slug", "stage_id", "slug"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Collection ID (UUID)",
    )
    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Display name, unique within the stage",
    )
    slug: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Slug derived from the name, unique within the stage",
    )
    stage_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    backing_store_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Physical table holding the collection items",
    )
    fields: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    def __repr__(self) -> str:
        return f"<Collection(id={self.id}, name={self.name}, stage_id={self.stage_id})>"

"""SQLAlchemy model for the collection_item_changes table.

Append-only history of item mutations with full document snapshots.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from stagecms.infrastructure.persistence.database import Base


class CollectionItemChangeModel(Base):
    """SQLAlchemy model for collection item changes.

    Attributes:
        id: Auto-increment primary key; breaks ties between equal timestamps.
        collection_id: Collection owning the item.
        item_id: The mutated item.
        user_id: User who performed the mutation.
        change_type: 'add', 'edit' or 'delete'.
        before_data: Document before the mutation (NULL for add).
        after_data: Document after the mutation (NULL for delete).
        created_at: When the change was recorded.
    """

    __tablename__ = "collection_item_changes"
    __table_args__ = (
        Index("ix_collection_item_changes_item", "collection_id", "item_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    item_id: Mapped[str] = mapped_column(String(64), nullable=False)
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    change_type: Mapped[str] = mapped_column(String(16), nullable=False)
    before_data: Mapped[dict[str, Any] | None] = mapped_column(
        JSON(none_as_null=True), nullable=True
    )
    after_data: Mapped[dict[str, Any] | None] = mapped_column(
        JSON(none_as_null=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return (
            f"<CollectionItemChange(id={self.id}, item_id={self.item_id}, "
            f"change_type={self.change_type})>"
        )

"""Repository for collection item change records.

Change records are append-only: the repository can add and query them but
offers no update or delete.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stagecms.domain.entities import ChangeType, CollectionItemChange
from stagecms.infrastructure.persistence.models import CollectionItemChangeModel
from stagecms.infrastructure.persistence.timestamps import as_utc


class CollectionItemChangeRepository:
    """Repository for collection item change database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    @staticmethod
    def to_entity(model: CollectionItemChangeModel) -> CollectionItemChange:
        """Convert a change model into a domain entity."""
        return CollectionItemChange(
            id=model.id,
            collection_id=model.collection_id,
            item_id=model.item_id,
            user_id=model.user_id,
            change_type=ChangeType(model.change_type),
            before_data=model.before_data,
            after_data=model.after_data,
            created_at=as_utc(model.created_at),
        )

    async def add(self, change: CollectionItemChange) -> CollectionItemChangeModel:
        """Append a change record.

        Args:
            change: The change to record.

        Returns:
            The persisted change model with its generated ID.
        """
        model = CollectionItemChangeModel(
            collection_id=change.collection_id,
            item_id=change.item_id,
            user_id=change.user_id,
            change_type=change.change_type.value,
            before_data=change.before_data,
            after_data=change.after_data,
            created_at=change.created_at,
        )
        self.session.add(model)
        await self.session.flush()
        return model

    async def list_for_item(
        self, collection_id: str, item_id: str
    ) -> list[CollectionItemChangeModel]:
        """List the changes of one item in chronological order.

        Args:
            collection_id: The collection ID.
            item_id: The item ID.

        Returns:
            Change models, oldest first.
        """
        result = await self.session.execute(
            select(CollectionItemChangeModel)
            .where(
                CollectionItemChangeModel.collection_id == collection_id,
                CollectionItemChangeModel.item_id == item_id,
            )
            .order_by(
                CollectionItemChangeModel.created_at.asc(),
                CollectionItemChangeModel.id.asc(),
            )
        )
        return list(result.scalars().all())

    async def list_for_collection(
        self, collection_id: str, skip: int = 0, limit: int = 20
    ) -> tuple[list[CollectionItemChangeModel], int]:
        """List the changes of a collection, newest first.

        Args:
            collection_id: The collection ID.
            skip: Number of records to skip.
            limit: Maximum number of records to return.

        Returns:
            Tuple of (change models, total count).
        """
        count_result = await self.session.execute(
            select(func.count(CollectionItemChangeModel.id)).where(
                CollectionItemChangeModel.collection_id == collection_id
            )
        )
        total = count_result.scalar_one()

        result = await self.session.execute(
            select(CollectionItemChangeModel)
            .where(CollectionItemChangeModel.collection_id == collection_id)
            .order_by(
                CollectionItemChangeModel.created_at.desc(),
                CollectionItemChangeModel.id.desc(),
            )
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total

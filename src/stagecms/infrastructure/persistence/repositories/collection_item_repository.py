"""Repository for collection item operations.

Items live in per-collection backing-store tables that are created at
runtime, so this repository works with SQLAlchemy Core tables built by
``TableBuilder`` rather than ORM models. Items are exchanged as documents:
``{"_id": ..., <field slug>: <value>, ..., "createdAt": ..., "updatedAt": ...}``.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from stagecms.core.logging import get_logger
from stagecms.infrastructure.persistence.table_builder import TableBuilder

logger = get_logger(__name__)

ID_KEY = "_id"
CREATED_AT_KEY = "createdAt"
UPDATED_AT_KEY = "updatedAt"
SYSTEM_KEYS = frozenset({ID_KEY, CREATED_AT_KEY, UPDATED_AT_KEY})


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as a fixed-width ISO-8601 UTC string.

    Examples:
        >>> format_timestamp(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        '2024-01-02T03:04:05.000000Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _row_to_document(row: Row) -> dict[str, Any]:
    return {
        ID_KEY: row.id,
        **(row.data or {}),
        CREATED_AT_KEY: row.created_at,
        UPDATED_AT_KEY: row.updated_at,
    }


class CollectionItemRepository:
    """Repository for documents stored in collection backing stores."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def insert(
        self,
        table_name: str,
        item_id: str,
        data: dict[str, Any],
        timestamp: datetime,
    ) -> dict[str, Any]:
        """Insert a new document.

        Args:
            table_name: The backing-store name.
            item_id: The generated item ID.
            data: Field values keyed by slug, already in stored form.
            timestamp: Creation time, used for both timestamps.

        Returns:
            The inserted document including system keys.
        """
        table = TableBuilder.build_table(table_name)
        stamp = format_timestamp(timestamp)

        await self.session.execute(
            insert(table).values(id=item_id, data=data, created_at=stamp, updated_at=stamp)
        )
        logger.debug("Item inserted", table_name=table_name, item_id=item_id)

        return {ID_KEY: item_id, **data, CREATED_AT_KEY: stamp, UPDATED_AT_KEY: stamp}

    async def get_by_id(self, table_name: str, item_id: str) -> dict[str, Any] | None:
        """Get a document by ID.

        Args:
            table_name: The backing-store name.
            item_id: The item ID.

        Returns:
            The document if found, None otherwise.
        """
        table = TableBuilder.build_table(table_name)
        result = await self.session.execute(select(table).where(table.c.id == item_id))
        row = result.first()
        return _row_to_document(row) if row is not None else None

    async def set_fields(
        self,
        table_name: str,
        item_id: str,
        changes: dict[str, Any],
        timestamp: datetime,
    ) -> bool:
        """Set the given fields of a document, leaving other fields untouched.

        Args:
            table_name: The backing-store name.
            item_id: The item ID.
            changes: Field values to set, keyed by slug, already in stored form.
            timestamp: Update time.

        Returns:
            True if the document was updated, False if it does not exist.
        """
        table = TableBuilder.build_table(table_name)
        result = await self.session.execute(select(table.c.data).where(table.c.id == item_id))
        row = result.first()
        if row is None:
            return False

        merged = {**(row.data or {}), **changes}
        await self.session.execute(
            update(table)
            .where(table.c.id == item_id)
            .values(data=merged, updated_at=format_timestamp(timestamp))
        )
        logger.debug(
            "Item updated",
            table_name=table_name,
            item_id=item_id,
            fields=sorted(changes.keys()),
        )
        return True

    async def delete(self, table_name: str, item_id: str) -> bool:
        """Delete a document.

        Args:
            table_name: The backing-store name.
            item_id: The item ID.

        Returns:
            True if a document was deleted, False otherwise.
        """
        table = TableBuilder.build_table(table_name)
        result = await self.session.execute(delete(table).where(table.c.id == item_id))
        deleted = result.rowcount > 0
        logger.debug("Item deleted", table_name=table_name, item_id=item_id, deleted=deleted)
        return deleted

    async def find_page(
        self, table_name: str, skip: int = 0, limit: int = 20
    ) -> tuple[list[dict[str, Any]], int]:
        """List documents, newest first.

        Args:
            table_name: The backing-store name.
            skip: Number of documents to skip.
            limit: Maximum number of documents to return.

        Returns:
            Tuple of (documents, total count).
        """
        table = TableBuilder.build_table(table_name)

        count_result = await self.session.execute(select(func.count()).select_from(table))
        total = count_result.scalar_one()

        result = await self.session.execute(
            select(table)
            .order_by(table.c.created_at.desc(), table.c.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return [_row_to_document(row) for row in result.all()], total

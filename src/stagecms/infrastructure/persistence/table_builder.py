"""Dynamic table builder for collection backing stores.

Every collection stores its items in its own physical table. The tables
share one fixed layout: a text primary key, a JSON document holding the
field values keyed by field slug, and creation/update timestamps stored as
fixed-width ISO-8601 UTC strings so they sort chronologically as text.
"""

from functools import lru_cache

from sqlalchemy import JSON, Column, MetaData, String, Table, inspect
from sqlalchemy.ext.asyncio import AsyncSession

from stagecms.core.logging import get_logger

logger = get_logger(__name__)

# Tables owned by the system; a backing store may never take these names
SYSTEM_TABLE_NAMES = frozenset({"collections", "collection_item_changes", "media"})

TIMESTAMP_LENGTH = 32


@lru_cache(maxsize=512)
def _backing_table(table_name: str) -> Table:
    return Table(
        table_name,
        MetaData(),
        Column("id", String(64), primary_key=True),
        Column("data", JSON, nullable=False),
        Column("created_at", String(TIMESTAMP_LENGTH), nullable=False, index=True),
        Column("updated_at", String(TIMESTAMP_LENGTH), nullable=False),
    )


class TableBuilder:
    """Builds, creates and drops collection backing-store tables."""

    @classmethod
    def build_table(cls, table_name: str) -> Table:
        """Get the Core table definition for a backing store.

        Args:
            table_name: The backing-store name.

        Returns:
            The SQLAlchemy Table (not bound to any database).
        """
        return _backing_table(table_name)

    @classmethod
    def is_reserved(cls, table_name: str) -> bool:
        return table_name.lower() in SYSTEM_TABLE_NAMES

    @classmethod
    async def table_exists(cls, session: AsyncSession, table_name: str) -> bool:
        """Check if a table already exists.

        Args:
            session: SQLAlchemy async session.
            table_name: The backing-store name.

        Returns:
            True if table exists, False otherwise.
        """
        conn = await session.connection()
        return await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).has_table(table_name)
        )

    @classmethod
    async def create_table(cls, session: AsyncSession, table_name: str) -> bool:
        """Create the backing-store table if it does not exist yet.

        Args:
            session: SQLAlchemy async session.
            table_name: The backing-store name.

        Returns:
            True if the table was created, False if it already existed.
        """
        if await cls.table_exists(session, table_name):
            logger.info("Collection table already exists", table_name=table_name)
            return False

        table = cls.build_table(table_name)
        conn = await session.connection()
        await conn.run_sync(table.create)

        logger.info("Collection table created", table_name=table_name)
        return True

    @classmethod
    async def drop_table(cls, session: AsyncSession, table_name: str) -> bool:
        """Drop a backing-store table if it exists.

        Args:
            session: SQLAlchemy async session.
            table_name: The backing-store name.

        Returns:
            True if a table was dropped, False if there was nothing to drop.
        """
        if not await cls.table_exists(session, table_name):
            logger.info("Collection table not found, nothing to drop", table_name=table_name)
            return False

        table = cls.build_table(table_name)
        conn = await session.connection()
        await conn.run_sync(lambda sync_conn: table.drop(sync_conn, checkfirst=True))

        logger.info("Collection table dropped", table_name=table_name)
        return True

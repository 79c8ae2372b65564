"""Read access to the item change history of collections."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stagecms.application.commands import GetCollectionChangesCommand, GetItemChangesCommand
from stagecms.application.results import CollectionItemChangeResult, Page
from stagecms.application.services.collection_lookup import load_owned_collection
from stagecms.application.services.pagination import resolve_page
from stagecms.core.config import Settings, get_settings
from stagecms.core.logging import get_logger
from stagecms.core.notifications import Notifications
from stagecms.domain.entities import UserContext
from stagecms.infrastructure.persistence.repositories import (
    CollectionItemChangeRepository,
    CollectionRepository,
)

logger = get_logger(__name__)


class CollectionHistoryService:
    """Service for querying item change records."""

    def __init__(self, session: AsyncSession, settings: Settings | None = None) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.collections = CollectionRepository(session)
        self.changes = CollectionItemChangeRepository(session)

    async def get_item_changes(
        self,
        command: GetItemChangesCommand,
        user: UserContext,
        notifications: Notifications,
    ) -> list[CollectionItemChangeResult] | None:
        """Get the full history of one item, oldest first.

        The item itself may no longer exist; its history stays readable.

        Args:
            command: Collection ID and item ID.
            user: Caller identity.
            notifications: Accumulator for failures.

        Returns:
            The item's change records, or None on failure.
        """
        if not command.item_id:
            notifications.add_client("item_id_required", "Item ID is required", "item_id")
            return None

        try:
            collection = await load_owned_collection(
                self.collections, command.collection_id, user.stage_id, notifications
            )
            if collection is None:
                return None
            models = await self.changes.list_for_item(collection.id, command.item_id)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to read item changes",
                collection_id=command.collection_id,
                item_id=command.item_id,
                error=str(e),
                exc_info=True,
            )
            notifications.add_server("history_read_failed")
            return None

        return [
            CollectionItemChangeResult.from_entity(self.changes.to_entity(m)) for m in models
        ]

    async def get_collection_changes(
        self,
        command: GetCollectionChangesCommand,
        user: UserContext,
        notifications: Notifications,
    ) -> Page[CollectionItemChangeResult] | None:
        """Get the change records of all items of a collection, newest first."""
        paging = resolve_page(command.page, command.page_size, self.settings, notifications)
        if paging is None:
            return None
        page, page_size = paging

        try:
            collection = await load_owned_collection(
                self.collections, command.collection_id, user.stage_id, notifications
            )
            if collection is None:
                return None
            models, total = await self.changes.list_for_collection(
                collection.id, skip=(page - 1) * page_size, limit=page_size
            )
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to read collection changes",
                collection_id=command.collection_id,
                error=str(e),
                exc_info=True,
            )
            notifications.add_server("history_read_failed")
            return None

        items = [CollectionItemChangeResult.from_entity(self.changes.to_entity(m)) for m in models]
        return Page[CollectionItemChangeResult].build(items, total, page, page_size)

"""Application services: the public schema, item and history operations."""

from stagecms.application.services.collection_history_service import CollectionHistoryService
from stagecms.application.services.collection_item_service import CollectionItemService
from stagecms.application.services.collection_service import CollectionService

__all__ = ["CollectionHistoryService", "CollectionItemService", "CollectionService"]

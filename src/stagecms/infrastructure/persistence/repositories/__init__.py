"""Repositories for system tables and collection backing stores."""

from stagecms.infrastructure.persistence.repositories.collection_item_change_repository import (
    CollectionItemChangeRepository,
)
from stagecms.infrastructure.persistence.repositories.collection_item_repository import (
    CollectionItemRepository,
)
from stagecms.infrastructure.persistence.repositories.collection_repository import (
    CollectionRepository,
)
from stagecms.infrastructure.persistence.repositories.media_repository import MediaRepository

__all__ = [
    "CollectionItemChangeRepository",
    "CollectionItemRepository",
    "CollectionRepository",
    "MediaRepository",
]

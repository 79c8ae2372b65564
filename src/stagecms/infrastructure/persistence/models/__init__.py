"""SQLAlchemy models for system tables."""

from stagecms.infrastructure.persistence.models.collection import CollectionModel
from stagecms.infrastructure.persistence.models.collection_item_change import (
    CollectionItemChangeModel,
)
from stagecms.infrastructure.persistence.models.media import MediaModel

__all__ = [
    "CollectionItemChangeModel",
    "CollectionModel",
    "MediaModel",
]

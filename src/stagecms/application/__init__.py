"""Command and result objects exchanged with the CMS services."""

from stagecms.application.commands import (
    CreateCollectionCommand,
    CreateCollectionItemCommand,
    DeleteCollectionCommand,
    DeleteCollectionItemCommand,
    FieldDefinitionInput,
    GetCollectionChangesCommand,
    GetCollectionCommand,
    GetCollectionFieldsCommand,
    GetCollectionItemCommand,
    GetCollectionItemsBySlugCommand,
    GetCollectionItemsCommand,
    GetCollectionsCommand,
    GetItemChangesCommand,
    UpdateCollectionCommand,
    UpdateCollectionItemCommand,
)
from stagecms.application.results import (
    CollectionFieldResult,
    CollectionItemChangeResult,
    CollectionItemResult,
    CollectionItemsPage,
    CollectionResult,
    CollectionSummary,
    DeleteResult,
    ItemColumn,
    Page,
)

__all__ = [
    "CollectionFieldResult",
    "CollectionItemChangeResult",
    "CollectionItemResult",
    "CollectionItemsPage",
    "CollectionResult",
    "CollectionSummary",
    "CreateCollectionCommand",
    "CreateCollectionItemCommand",
    "DeleteCollectionCommand",
    "DeleteCollectionItemCommand",
    "DeleteResult",
    "FieldDefinitionInput",
    "GetCollectionChangesCommand",
    "GetCollectionCommand",
    "GetCollectionFieldsCommand",
    "GetCollectionItemCommand",
    "GetCollectionItemsBySlugCommand",
    "GetCollectionItemsCommand",
    "GetCollectionsCommand",
    "GetItemChangesCommand",
    "ItemColumn",
    "Page",
    "UpdateCollectionCommand",
    "UpdateCollectionItemCommand",
]

"""Collection item change entity for the item audit trail.

Each mutation of a collection item appends one change record holding the
document as it was before and after the mutation. Records are never
updated or deleted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ChangeType(str, Enum):
    """Kind of item mutation."""

    ADD = "add"
    EDIT = "edit"
    DELETE = "delete"


@dataclass
class CollectionItemChange:
    """Audit record for one item mutation.

    Attributes:
        id: Auto-increment identifier, None until persisted.
        collection_id: Collection owning the item.
        item_id: The mutated item.
        user_id: User who performed the mutation, if known.
        change_type: Add, Edit or Delete.
        before_data: Document snapshot before the mutation (None for Add).
        after_data: Document snapshot after the mutation (None for Delete).
        created_at: When the change was recorded (UTC).
    """

    collection_id: str
    item_id: str
    change_type: ChangeType
    user_id: str | None = None
    before_data: dict[str, Any] | None = None
    after_data: dict[str, Any] | None = None
    id: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

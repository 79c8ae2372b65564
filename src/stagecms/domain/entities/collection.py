"""Collection entity for dynamic schema definitions.

A collection is a user-authored schema scoped to a stage. Its fields are
embedded in the collection and have no identity of their own. Items are
stored in the collection's backing store, a physical table created when
the collection is defined.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from stagecms.domain.entities.field_constraints import (
    FieldConstraints,
    FieldType,
    parse_constraints,
)


def _parse_datetime(value: Any, default: datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return default


@dataclass
class CollectionField:
    """One typed, constrained attribute of a collection.

    Attributes:
        type: The field type; selects the constraint payload.
        name: Display name.
        slug: Lowercase key under which item values are stored.
        constraints: Type-specific payload.
        created_at: When the field was first defined.
        updated_at: When the field definition was last replaced.
    """

    type: FieldType
    name: str
    slug: str
    constraints: FieldConstraints
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def required(self) -> bool:
        return self.constraints.required

    def to_dict(self) -> dict[str, Any]:
        """Serialize for storage in the collection's fields column."""
        return {
            "type": self.type.value,
            "name": self.name,
            "slug": self.slug,
            "data": self.constraints.to_dict(),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CollectionField":
        """Rebuild a field from its stored form."""
        field_type = FieldType(data["type"])
        now = datetime.now(timezone.utc)
        return cls(
            type=field_type,
            name=data["name"],
            slug=data["slug"],
            constraints=parse_constraints(field_type, data.get("data")),
            created_at=_parse_datetime(data.get("createdAt"), now),
            updated_at=_parse_datetime(data.get("updatedAt"), now),
        )


@dataclass
class Collection:
    """Collection entity representing a stage-scoped dynamic schema.

    Attributes:
        id: Unique identifier (UUID string).
        name: Display name, unique within the stage.
        slug: Identifier derived from the name, unique within the stage.
        stage_id: Owning stage.
        backing_store_name: Physical table holding the items, None until provisioned.
        fields: Ordered field definitions.
        created_at: Timestamp when the collection was created.
        updated_at: Timestamp when the collection was last updated.
    """

    id: str
    name: str
    slug: str
    stage_id: str
    backing_store_name: str | None = None
    fields: list[CollectionField] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Collection ID is required")
        if not self.name:
            raise ValueError("Collection name is required")

    def fields_of_type(self, field_type: FieldType) -> list[CollectionField]:
        return [f for f in self.fields if f.type == field_type]

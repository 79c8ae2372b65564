"""Pydantic result models returned by the CMS services."""

import math
from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from stagecms.domain.entities import Collection, CollectionField, CollectionItemChange

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a listing."""

    items: list[T]
    total: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def build(
        cls, items: list[T], total: int, page: int, page_size: int, **extra: Any
    ) -> "Page[T]":
        """Build a page, deriving the page count. Subclass fields go in ``extra``."""
        return cls(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size) if total else 0,
            **extra,
        )


class CollectionFieldResult(BaseModel):
    type: str
    name: str
    slug: str
    data: dict[str, Any]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, field: CollectionField) -> "CollectionFieldResult":
        return cls(
            type=field.type.value,
            name=field.name,
            slug=field.slug,
            data=field.constraints.to_dict(),
            created_at=field.created_at,
            updated_at=field.updated_at,
        )


class CollectionResult(BaseModel):
    id: str
    name: str
    slug: str
    stage_id: str
    backing_store_name: str | None
    fields: list[CollectionFieldResult]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, collection: Collection) -> "CollectionResult":
        return cls(
            id=collection.id,
            name=collection.name,
            slug=collection.slug,
            stage_id=collection.stage_id,
            backing_store_name=collection.backing_store_name,
            fields=[CollectionFieldResult.from_entity(f) for f in collection.fields],
            created_at=collection.created_at,
            updated_at=collection.updated_at,
        )


class CollectionSummary(BaseModel):
    id: str
    name: str
    slug: str
    field_count: int
    created_at: datetime


class ItemColumn(BaseModel):
    """A schema field projected as a display column."""

    type: str
    name: str
    slug: str


class CollectionItemResult(BaseModel):
    """One item: its ID, field values keyed by slug and its timestamps."""

    id: str
    values: dict[str, Any]
    created_at: str
    updated_at: str

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "CollectionItemResult":
        values = {
            key: value
            for key, value in document.items()
            if key not in ("_id", "createdAt", "updatedAt")
        }
        return cls(
            id=document["_id"],
            values=values,
            created_at=document["createdAt"],
            updated_at=document["updatedAt"],
        )

    def to_flat_dict(self) -> dict[str, Any]:
        """Flatten into ``{"id", <slug>: value..., "createdAt", "updatedAt"}``."""
        return {
            "id": self.id,
            **self.values,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


class CollectionItemsPage(Page[CollectionItemResult]):
    """A page of items together with the collection's display columns."""

    collection_id: str
    collection_name: str
    collection_slug: str
    columns: list[ItemColumn] = Field(default_factory=list)


class CollectionItemChangeResult(BaseModel):
    id: int
    collection_id: str
    item_id: str
    user_id: str | None
    change_type: str
    before_data: dict[str, Any] | None
    after_data: dict[str, Any] | None
    created_at: datetime

    @classmethod
    def from_entity(cls, change: CollectionItemChange) -> "CollectionItemChangeResult":
        return cls(
            id=change.id,
            collection_id=change.collection_id,
            item_id=change.item_id,
            user_id=change.user_id,
            change_type=change.change_type.value,
            before_data=change.before_data,
            after_data=change.after_data,
            created_at=change.created_at,
        )


class DeleteResult(BaseModel):
    id: str
    deleted: bool = True

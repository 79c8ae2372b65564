"""Pydantic command models, one per public operation.

Commands accept snake_case or camelCase keys. Shape checks that belong to
the domain (missing names, unknown field types, bad constraint payloads)
are left to the services so they are reported as notifications rather
than raised as pydantic errors.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CommandModel(BaseModel):
    """Base for command models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class PagedCommand(CommandModel):
    """Pagination parameters; page size falls back to the configured default."""

    page: int = Field(default=1, description="1-based page number")
    page_size: int | None = Field(default=None, description="Items per page")


class FieldDefinitionInput(CommandModel):
    """A field definition submitted with a collection schema.

    The constraint payload goes in ``data``. Payloads sent under a per-type
    key (``inputData``, ``rangeData``...) are accepted too; the one matching
    ``type`` is moved into ``data``.
    """

    type: str | None = Field(default=None, description="Field type, e.g. 'text' or 'range'")
    name: str | None = Field(default=None, description="Display name of the field")
    data: dict[str, Any] | None = Field(default=None, description="Type-specific constraints")

    @model_validator(mode="before")
    @classmethod
    def lift_typed_payload(cls, values: Any) -> Any:
        """Move a per-type payload (e.g. ``textData``) into ``data``."""
        if not isinstance(values, dict) or values.get("data") is not None:
            return values
        field_type = str(values.get("type") or "").strip().lower()
        for key in (f"{field_type}Data", f"{field_type}_data"):
            if isinstance(values.get(key), dict):
                return {**values, "data": values[key]}
        return values


class CreateCollectionCommand(CommandModel):
    name: str | None = None
    fields: list[FieldDefinitionInput] | None = None


class UpdateCollectionCommand(CommandModel):
    collection_id: str | None = None
    name: str | None = None
    fields: list[FieldDefinitionInput] | None = None


class DeleteCollectionCommand(CommandModel):
    collection_id: str | None = None


class GetCollectionCommand(CommandModel):
    collection_id: str | None = None


class GetCollectionsCommand(PagedCommand):
    """List the collections of the caller's stage."""


class GetCollectionFieldsCommand(CommandModel):
    collection_id: str | None = None


class CreateCollectionItemCommand(CommandModel):
    collection_id: str | None = None
    data: dict[str, Any] = Field(default_factory=dict, description="Field slug to value")


class GetCollectionItemsCommand(PagedCommand):
    collection_id: str | None = None


class GetCollectionItemsBySlugCommand(PagedCommand):
    """Public read of a collection's items by stage and collection slug."""

    stage_id: str | None = None
    slug: str | None = None


class GetCollectionItemCommand(CommandModel):
    collection_id: str | None = None
    item_id: str | None = None


class UpdateCollectionItemCommand(CommandModel):
    collection_id: str | None = None
    item_id: str | None = None
    data: dict[str, Any] = Field(default_factory=dict, description="Field slug to new value")


class DeleteCollectionItemCommand(CommandModel):
    collection_id: str | None = None
    item_id: str | None = None


class GetItemChangesCommand(CommandModel):
    collection_id: str | None = None
    item_id: str | None = None


class GetCollectionChangesCommand(PagedCommand):
    collection_id: str | None = None

"""Collection item service: CRUD for items in collection backing stores.

Submitted values are validated against the collection's fields, normalized
into stored form and written to the collection's backing-store table. Every
successful mutation then appends a change record; that write is best-effort
and never changes the outcome of the mutation.
"""

import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stagecms.application.commands import (
    CreateCollectionItemCommand,
    DeleteCollectionItemCommand,
    GetCollectionItemCommand,
    GetCollectionItemsBySlugCommand,
    GetCollectionItemsCommand,
    UpdateCollectionItemCommand,
)
from stagecms.application.results import (
    CollectionItemResult,
    CollectionItemsPage,
    DeleteResult,
    ItemColumn,
)
from stagecms.application.services.collection_lookup import load_owned_collection
from stagecms.application.services.pagination import resolve_page
from stagecms.core.config import Settings, get_settings
from stagecms.core.logging import LoggingContext, get_logger
from stagecms.core.notifications import Notifications
from stagecms.core.side_effects import best_effort
from stagecms.domain.entities import (
    ChangeType,
    Collection,
    CollectionItemChange,
    FieldType,
    UserContext,
)
from stagecms.domain.services.document_values import to_document_value, unwrap_envelope
from stagecms.domain.services.field_value_validator import FieldValueValidator
from stagecms.domain.services.media_reference_resolver import MediaReferenceResolver
from stagecms.infrastructure.persistence.repositories import (
    CollectionItemChangeRepository,
    CollectionItemRepository,
    CollectionRepository,
    MediaRepository,
)

logger = get_logger(__name__)


class CollectionItemService:
    """Service for collection item business logic."""

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings | None = None,
        media_resolver: MediaReferenceResolver | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session. The service commits its own writes.
            settings: Optional settings instance.
            media_resolver: Optional resolver for file fields; defaults to one
                backed by the media table of the same session.
        """
        self.session = session
        self.settings = settings or get_settings()
        self.collections = CollectionRepository(session)
        self.items = CollectionItemRepository(session)
        self.changes = CollectionItemChangeRepository(session)
        self.media_resolver = media_resolver or MediaReferenceResolver(
            MediaRepository(session), self.settings.file_upload_base_url
        )

    async def create_item(
        self,
        command: CreateCollectionItemCommand,
        user: UserContext,
        notifications: Notifications,
    ) -> CollectionItemResult | None:
        """Validate and insert a new item.

        All field errors are reported together. On success an Add change is
        recorded with the stored document as its after snapshot.

        Args:
            command: Collection ID and submitted field values keyed by slug.
            user: Caller identity.
            notifications: Accumulator for failures.

        Returns:
            The created item, or None on failure.
        """
        with LoggingContext(stage_id=user.stage_id, user_id=user.user_id):
            try:
                collection = await self._load_collection(command.collection_id, user, notifications)
                if collection is None:
                    return None

                errors = FieldValueValidator.validate_item(collection.fields, command.data)
                if errors:
                    notifications.extend_client(errors)
                    return None

                item_id = str(uuid.uuid4())
                inserted = await self.items.insert(
                    collection.backing_store_name,
                    item_id,
                    self._to_stored_values(collection, command.data),
                    datetime.now(timezone.utc),
                )
                await self.session.commit()
                document = await self.items.get_by_id(collection.backing_store_name, item_id)
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(
                    "Failed to create item",
                    collection_id=command.collection_id,
                    error=str(e),
                    exc_info=True,
                )
                notifications.add_server("item_persist_failed")
                return None

            document = document or inserted
            logger.info("Item created", collection_id=collection.id, item_id=item_id)
            await self._record_change(collection.id, item_id, user, ChangeType.ADD, None, document)
            return CollectionItemResult.from_document(document)

    async def get_items(
        self,
        command: GetCollectionItemsCommand,
        user: UserContext,
        notifications: Notifications,
    ) -> CollectionItemsPage | None:
        """List the items of a collection, newest first.

        Args:
            command: Collection ID and pagination parameters.
            user: Caller identity.
            notifications: Accumulator for failures.

        Returns:
            One page of items with the collection's display columns, or None on failure.
        """
        paging = resolve_page(command.page, command.page_size, self.settings, notifications)
        if paging is None:
            return None

        try:
            collection = await self._load_collection(command.collection_id, user, notifications)
            if collection is None:
                return None
            return await self._read_page(collection, *paging)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to read items",
                collection_id=command.collection_id,
                error=str(e),
                exc_info=True,
            )
            notifications.add_server("item_read_failed")
            return None

    async def get_items_by_slug(
        self,
        command: GetCollectionItemsBySlugCommand,
        notifications: Notifications,
    ) -> CollectionItemsPage | None:
        """List the items of a collection addressed by stage and slug.

        This is the public read path: no caller identity is involved.

        Args:
            command: Stage ID, collection slug and pagination parameters.
            notifications: Accumulator for failures.

        Returns:
            One page of items, or None on failure.
        """
        if not command.stage_id:
            notifications.add_client("stage_required", "Stage is required", "stage_id")
            return None
        if not command.slug:
            notifications.add_client("slug_required", "Collection slug is required", "slug")
            return None

        paging = resolve_page(command.page, command.page_size, self.settings, notifications)
        if paging is None:
            return None

        try:
            model = await self.collections.get_by_slug(command.slug.lower(), command.stage_id)
            if model is None:
                notifications.add_client("collection_not_found", "Collection not found", "slug")
                return None
            if not model.backing_store_name:
                notifications.add_client(
                    "backing_store_missing", "The collection has no storage provisioned", "slug"
                )
                return None
            return await self._read_page(self.collections.to_entity(model), *paging)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to read items by slug",
                stage_id=command.stage_id,
                slug=command.slug,
                error=str(e),
                exc_info=True,
            )
            notifications.add_server("item_read_failed")
            return None

    async def get_item(
        self,
        command: GetCollectionItemCommand,
        user: UserContext,
        notifications: Notifications,
    ) -> CollectionItemResult | None:
        """Get one item, with its file fields resolved.

        Args:
            command: Collection ID and item ID.
            user: Caller identity.
            notifications: Accumulator for failures.

        Returns:
            The item, or None on failure.
        """
        try:
            collection = await self._load_collection(command.collection_id, user, notifications)
            if collection is None:
                return None
            document = await self._get_existing(collection, command.item_id, notifications)
            if document is None:
                return None
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to read item",
                collection_id=command.collection_id,
                item_id=command.item_id,
                error=str(e),
                exc_info=True,
            )
            notifications.add_server("item_read_failed")
            return None

        await self.media_resolver.enrich_document(
            document,
            self._file_slugs(collection),
            skip_complete=True,
            stage_id=collection.stage_id,
        )
        return CollectionItemResult.from_document(document)

    async def update_item(
        self,
        command: UpdateCollectionItemCommand,
        user: UserContext,
        notifications: Notifications,
    ) -> CollectionItemResult | None:
        """Set the submitted fields of an existing item.

        The submitted map is validated against the whole schema, exactly as
        on create. Only submitted fields are written. On success an Edit
        change is recorded with before and after snapshots.

        Args:
            command: Collection ID, item ID and field values keyed by slug.
            user: Caller identity.
            notifications: Accumulator for failures.

        Returns:
            The updated item, or None on failure.
        """
        with LoggingContext(stage_id=user.stage_id, user_id=user.user_id):
            try:
                collection = await self._load_collection(command.collection_id, user, notifications)
                if collection is None:
                    return None

                before = await self._get_existing(collection, command.item_id, notifications)
                if before is None:
                    return None

                errors = FieldValueValidator.validate_item(collection.fields, command.data)
                if errors:
                    notifications.extend_client(errors)
                    return None

                await self.items.set_fields(
                    collection.backing_store_name,
                    command.item_id,
                    self._to_stored_values(collection, command.data),
                    datetime.now(timezone.utc),
                )
                await self.session.commit()
                after = await self.items.get_by_id(collection.backing_store_name, command.item_id)
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(
                    "Failed to update item",
                    collection_id=command.collection_id,
                    item_id=command.item_id,
                    error=str(e),
                    exc_info=True,
                )
                notifications.add_server("item_persist_failed")
                return None

            if after is None:
                notifications.add_client("item_not_found", "Item not found", "item_id")
                return None

            logger.info("Item updated", collection_id=collection.id, item_id=command.item_id)
            await self._record_change(
                collection.id, command.item_id, user, ChangeType.EDIT, before, after
            )
            return CollectionItemResult.from_document(after)

    async def delete_item(
        self,
        command: DeleteCollectionItemCommand,
        user: UserContext,
        notifications: Notifications,
    ) -> DeleteResult | None:
        """Delete an existing item.

        The item is read first so its last state can be archived in the
        Delete change record. Deleting a missing item is an error.

        Args:
            command: Collection ID and item ID.
            user: Caller identity.
            notifications: Accumulator for failures.

        Returns:
            The deletion result, or None on failure.
        """
        with LoggingContext(stage_id=user.stage_id, user_id=user.user_id):
            try:
                collection = await self._load_collection(command.collection_id, user, notifications)
                if collection is None:
                    return None

                before = await self._get_existing(collection, command.item_id, notifications)
                if before is None:
                    return None

                await self.items.delete(collection.backing_store_name, command.item_id)
                await self.session.commit()
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(
                    "Failed to delete item",
                    collection_id=command.collection_id,
                    item_id=command.item_id,
                    error=str(e),
                    exc_info=True,
                )
                notifications.add_server("item_persist_failed")
                return None

            logger.info("Item deleted", collection_id=collection.id, item_id=command.item_id)
            await self._record_change(
                collection.id, command.item_id, user, ChangeType.DELETE, before, None
            )
            return DeleteResult(id=command.item_id)

    async def _load_collection(
        self, collection_id: str | None, user: UserContext, notifications: Notifications
    ) -> Collection | None:
        model = await load_owned_collection(
            self.collections,
            collection_id,
            user.stage_id,
            notifications,
            require_backing_store=True,
        )
        return self.collections.to_entity(model) if model is not None else None

    async def _get_existing(
        self, collection: Collection, item_id: str | None, notifications: Notifications
    ) -> dict[str, Any] | None:
        if not item_id:
            notifications.add_client("item_id_required", "Item ID is required", "item_id")
            return None
        document = await self.items.get_by_id(collection.backing_store_name, item_id)
        if document is None:
            notifications.add_client("item_not_found", "Item not found", "item_id")
        return document

    async def _read_page(self, collection: Collection, page: int, page_size: int) -> CollectionItemsPage:
        documents, total = await self.items.find_page(
            collection.backing_store_name, skip=(page - 1) * page_size, limit=page_size
        )
        file_slugs = self._file_slugs(collection)
        items = []
        for document in documents:
            await self.media_resolver.enrich_document(
                document, file_slugs, stage_id=collection.stage_id
            )
            items.append(CollectionItemResult.from_document(document))

        return CollectionItemsPage.build(
            items,
            total,
            page,
            page_size,
            collection_id=collection.id,
            collection_name=collection.name,
            collection_slug=collection.slug,
            columns=[
                ItemColumn(type=f.type.value, name=f.name, slug=f.slug) for f in collection.fields
            ],
        )

    def _file_slugs(self, collection: Collection) -> list[str]:
        return [f.slug for f in collection.fields_of_type(FieldType.FILE)]

    def _to_stored_values(self, collection: Collection, data: Mapping[str, Any]) -> dict[str, Any]:
        """Normalize the submitted values of schema fields; unknown keys are dropped."""
        return {
            field.slug: to_document_value(unwrap_envelope(data[field.slug]))
            for field in collection.fields
            if field.slug in data
        }

    async def _record_change(
        self,
        collection_id: str,
        item_id: str,
        user: UserContext,
        change_type: ChangeType,
        before: dict[str, Any] | None,
        after: dict[str, Any] | None,
    ) -> None:
        change = CollectionItemChange(
            collection_id=collection_id,
            item_id=item_id,
            change_type=change_type,
            user_id=user.user_id,
            before_data=before,
            after_data=after,
        )

        async def write() -> None:
            await self.changes.add(change)
            await self.session.commit()

        await best_effort(
            "item change recording",
            write,
            on_failure=self.session.rollback,
            collection_id=collection_id,
            item_id=item_id,
            change_type=change_type.value,
        )

"""Collection service: the schema manager.

Creates, updates, deletes and lists stage-scoped collections, including
slug assignment and provisioning of each collection's backing-store table.

Every public operation reports expected failures on the ``Notifications``
passed in and returns None, instead of raising.
"""

import uuid
from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stagecms.application.commands import (
    CreateCollectionCommand,
    DeleteCollectionCommand,
    FieldDefinitionInput,
    GetCollectionCommand,
    GetCollectionFieldsCommand,
    GetCollectionsCommand,
    UpdateCollectionCommand,
)
from stagecms.application.results import (
    CollectionFieldResult,
    CollectionResult,
    CollectionSummary,
    DeleteResult,
    Page,
)
from stagecms.application.services.collection_lookup import load_owned_collection
from stagecms.application.services.pagination import resolve_page
from stagecms.core.config import Settings, get_settings
from stagecms.core.logging import LoggingContext, get_logger
from stagecms.core.notifications import Notifications
from stagecms.core.side_effects import best_effort
from stagecms.domain.entities import CollectionField, FieldType, UserContext, parse_constraints
from stagecms.domain.services.field_definition_validator import (
    MAX_NAME_LENGTH,
    FieldDefinitionValidator,
)
from stagecms.domain.services.slug_collision_resolver import SlugCollisionResolver
from stagecms.domain.services.slug_generator import SlugGenerator
from stagecms.infrastructure.persistence.models import CollectionModel
from stagecms.infrastructure.persistence.repositories import CollectionRepository
from stagecms.infrastructure.persistence.table_builder import TableBuilder

logger = get_logger(__name__)


class CollectionService:
    """Service for collection schema business logic.

    Expects a session created with ``expire_on_commit=False`` (as
    ``DatabaseManager`` does), since loaded rows are read after commits.
    """

    def __init__(self, session: AsyncSession, settings: Settings | None = None) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session. The service commits its own writes.
            settings: Optional settings instance.
        """
        self.session = session
        self.settings = settings or get_settings()
        self.repository = CollectionRepository(session)

    async def create_collection(
        self,
        command: CreateCollectionCommand,
        user: UserContext,
        notifications: Notifications,
    ) -> CollectionResult | None:
        """Create a collection and provision its backing store.

        The collection row is committed first; the backing-store name is
        resolved, the table created, and the name written back afterwards.

        Args:
            command: Name and field definitions.
            user: Caller identity; the collection belongs to its stage.
            notifications: Accumulator for failures.

        Returns:
            The created collection, or None on failure.
        """
        with LoggingContext(stage_id=user.stage_id, user_id=user.user_id):
            stage_id = user.stage_id
            if not stage_id:
                notifications.add_client(
                    "stage_required", "A stage is required to manage collections", "stage_id"
                )
                return None

            name = self._validate_name(command.name, notifications)
            if name is None:
                return None

            try:
                if await self.repository.name_exists(name, stage_id):
                    notifications.add_client(
                        "name_taken",
                        f"A collection named '{name}' already exists in this stage",
                        "name",
                    )
                    return None

                if not self._validate_fields(command.fields, notifications):
                    return None

                now = datetime.now(timezone.utc)
                slug = await SlugCollisionResolver.resolve_slug(
                    SlugGenerator.generate(name),
                    lambda candidate: self.repository.find_slug_occupant(candidate, stage_id),
                )
                model = CollectionModel(
                    id=str(uuid.uuid4()),
                    name=name,
                    slug=slug,
                    stage_id=stage_id,
                    backing_store_name=None,
                    fields=[f.to_dict() for f in self._build_fields(command.fields, now)],
                    created_at=now,
                    updated_at=now,
                )
                await self.repository.create(model)
                await self.session.commit()

                backing_store_name = await SlugCollisionResolver.resolve_backing_store_name(
                    self._stage_key(user),
                    slug,
                    lambda candidate: self._backing_store_name_taken(candidate, stage_id),
                )
                if not await TableBuilder.create_table(self.session, backing_store_name):
                    logger.warning(
                        "Backing store already existed and will be reused",
                        collection_id=model.id,
                        table_name=backing_store_name,
                    )
                model.backing_store_name = backing_store_name
                await self.repository.update(model)
                await self.session.commit()
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(
                    "Failed to create collection", name=name, error=str(e), exc_info=True
                )
                notifications.add_server("collection_persist_failed")
                return None

            logger.info(
                "Collection created",
                collection_id=model.id,
                slug=slug,
                table_name=backing_store_name,
                field_count=len(model.fields),
            )
            return CollectionResult.from_entity(self.repository.to_entity(model))

    async def update_collection(
        self,
        command: UpdateCollectionCommand,
        user: UserContext,
        notifications: Notifications,
    ) -> CollectionResult | None:
        """Rename a collection and replace its field list.

        The slug is only re-resolved when the name changes. Field creation
        timestamps are carried over by slug. The backing store is untouched.

        Args:
            command: Collection ID, new name and full field list.
            user: Caller identity; must own the collection's stage.
            notifications: Accumulator for failures.

        Returns:
            The updated collection, or None on failure.
        """
        with LoggingContext(stage_id=user.stage_id, user_id=user.user_id):
            try:
                model = await load_owned_collection(
                    self.repository, command.collection_id, user.stage_id, notifications
                )
                if model is None:
                    return None

                name = self._validate_name(command.name, notifications)
                if name is None:
                    return None

                name_changed = name != model.name
                if name_changed and await self.repository.name_exists(
                    name, model.stage_id, exclude_id=model.id
                ):
                    notifications.add_client(
                        "name_taken",
                        f"A collection named '{name}' already exists in this stage",
                        "name",
                    )
                    return None

                if not self._validate_fields(command.fields, notifications):
                    return None

                now = datetime.now(timezone.utc)
                if name_changed:
                    model.slug = await SlugCollisionResolver.resolve_slug(
                        SlugGenerator.generate(name),
                        lambda candidate: self.repository.find_slug_occupant(
                            candidate, model.stage_id, exclude_id=model.id
                        ),
                    )

                previous_created = {
                    f["slug"]: CollectionField.from_dict(f).created_at for f in model.fields or []
                }
                model.name = name
                model.fields = [
                    f.to_dict() for f in self._build_fields(command.fields, now, previous_created)
                ]
                model.updated_at = now
                await self.repository.update(model)
                await self.session.commit()
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(
                    "Failed to update collection",
                    collection_id=command.collection_id,
                    error=str(e),
                    exc_info=True,
                )
                notifications.add_server("collection_persist_failed")
                return None

            logger.info(
                "Collection updated",
                collection_id=model.id,
                slug=model.slug,
                renamed=name_changed,
                field_count=len(model.fields),
            )
            return CollectionResult.from_entity(self.repository.to_entity(model))

    async def delete_collection(
        self,
        command: DeleteCollectionCommand,
        user: UserContext,
        notifications: Notifications,
    ) -> DeleteResult | None:
        """Drop a collection's backing store and delete the collection.

        Dropping the backing store is best-effort; a failure is logged and
        the collection record is deleted regardless. Change history is kept.

        Args:
            command: Collection ID.
            user: Caller identity; must own the collection's stage.
            notifications: Accumulator for failures.

        Returns:
            The deletion result, or None on failure.
        """
        with LoggingContext(stage_id=user.stage_id, user_id=user.user_id):
            try:
                model = await load_owned_collection(
                    self.repository, command.collection_id, user.stage_id, notifications
                )
                if model is None:
                    return None

                collection_id = model.id
                table_name = model.backing_store_name
                if table_name:
                    dropped = await best_effort(
                        "backing store drop",
                        lambda: TableBuilder.drop_table(self.session, table_name),
                        on_failure=self.session.rollback,
                        collection_id=collection_id,
                        table_name=table_name,
                    )
                    if dropped is None:
                        # The rollback expired the loaded row
                        model = await self.repository.get_by_id(collection_id)

                if model is not None:
                    await self.repository.delete(model)
                await self.session.commit()
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(
                    "Failed to delete collection",
                    collection_id=command.collection_id,
                    error=str(e),
                    exc_info=True,
                )
                notifications.add_server("collection_delete_failed")
                return None

            logger.info("Collection deleted", collection_id=collection_id, table_name=table_name)
            return DeleteResult(id=collection_id)

    async def get_collection(
        self,
        command: GetCollectionCommand,
        user: UserContext,
        notifications: Notifications,
    ) -> CollectionResult | None:
        """Get one collection of the caller's stage."""
        try:
            model = await load_owned_collection(
                self.repository, command.collection_id, user.stage_id, notifications
            )
        except SQLAlchemyError as e:
            logger.error("Failed to read collection", error=str(e), exc_info=True)
            notifications.add_server("collection_read_failed")
            return None
        if model is None:
            return None
        return CollectionResult.from_entity(self.repository.to_entity(model))

    async def get_collection_fields(
        self,
        command: GetCollectionFieldsCommand,
        user: UserContext,
        notifications: Notifications,
    ) -> list[CollectionFieldResult] | None:
        """Get the field definitions of one collection of the caller's stage."""
        collection = await self.get_collection(
            GetCollectionCommand(collection_id=command.collection_id), user, notifications
        )
        if collection is None:
            return None
        return collection.fields

    async def get_collections(
        self,
        command: GetCollectionsCommand,
        user: UserContext,
        notifications: Notifications,
    ) -> Page[CollectionSummary] | None:
        """List the collections of the caller's stage, oldest first.

        Args:
            command: Pagination parameters.
            user: Caller identity.
            notifications: Accumulator for failures.

        Returns:
            One page of collection summaries, or None on failure.
        """
        if not user.stage_id:
            notifications.add_client(
                "stage_required", "A stage is required to manage collections", "stage_id"
            )
            return None

        paging = resolve_page(command.page, command.page_size, self.settings, notifications)
        if paging is None:
            return None
        page, page_size = paging

        try:
            models, total = await self.repository.list_by_stage(
                user.stage_id, skip=(page - 1) * page_size, limit=page_size
            )
        except SQLAlchemyError as e:
            logger.error(
                "Failed to list collections", stage_id=user.stage_id, error=str(e), exc_info=True
            )
            notifications.add_server("collection_read_failed")
            return None

        summaries = [
            CollectionSummary(
                id=m.id,
                name=m.name,
                slug=m.slug,
                field_count=len(m.fields or []),
                created_at=m.created_at,
            )
            for m in models
        ]
        return Page[CollectionSummary].build(summaries, total, page, page_size)

    def _validate_name(self, raw_name: str | None, notifications: Notifications) -> str | None:
        name = (raw_name or "").strip()
        if not name:
            notifications.add_client("name_required", "Collection name is required", "name")
            return None
        if len(name) > MAX_NAME_LENGTH:
            notifications.add_client(
                "name_too_long",
                f"Collection name must be at most {MAX_NAME_LENGTH} characters",
                "name",
            )
            return None
        if not SlugGenerator.generate(name):
            notifications.add_client(
                "name_invalid",
                "Collection name must contain at least one letter or digit",
                "name",
            )
            return None
        return name

    def _validate_fields(
        self, fields: Sequence[FieldDefinitionInput] | None, notifications: Notifications
    ) -> bool:
        errors = FieldDefinitionValidator.validate(fields)
        if errors:
            first = errors[0]
            notifications.add_client(first.code, first.message, first.field)
            return False
        return True

    def _build_fields(
        self,
        definitions: Sequence[FieldDefinitionInput],
        now: datetime,
        previous_created: dict[str, datetime] | None = None,
    ) -> list[CollectionField]:
        fields = []
        for definition in definitions:
            field_type = FieldType.parse(definition.type)
            name = definition.name.strip()
            slug = SlugGenerator.generate(name).lower()
            fields.append(
                CollectionField(
                    type=field_type,
                    name=name,
                    slug=slug,
                    constraints=parse_constraints(field_type, definition.data),
                    created_at=(previous_created or {}).get(slug, now),
                    updated_at=now,
                )
            )
        return fields

    def _stage_key(self, user: UserContext) -> str:
        return (
            SlugGenerator.generate(user.stage_key)
            or SlugGenerator.generate(user.stage_id)
            or "stage"
        )

    async def _backing_store_name_taken(self, name: str, stage_id: str) -> bool:
        if TableBuilder.is_reserved(name):
            return True
        if await self.repository.backing_store_name_exists(name, stage_id):
            return True
        return await TableBuilder.table_exists(self.session, name)

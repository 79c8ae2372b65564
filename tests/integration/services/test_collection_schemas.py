"""Integration tests for the collection schema manager."""

import uuid
from unittest.mock import AsyncMock

import pytest

from stagecms.application.commands import (
    CreateCollectionCommand,
    DeleteCollectionCommand,
    FieldDefinitionInput,
    GetCollectionCommand,
    GetCollectionFieldsCommand,
    GetCollectionsCommand,
    UpdateCollectionCommand,
)
from stagecms.application.services import CollectionService
from stagecms.core.notifications import NotificationSeverity, Notifications
from stagecms.domain.entities import UserContext
from stagecms.infrastructure.persistence.models import CollectionModel
from stagecms.infrastructure.persistence.repositories import CollectionRepository
from stagecms.infrastructure.persistence.table_builder import TableBuilder


def title_field(**data) -> FieldDefinitionInput:
    return FieldDefinitionInput(
        type="text", name="Title", data={"required": True, "maxLength": 100, **data}
    )


@pytest.fixture
def service(db_session, settings):
    return CollectionService(db_session, settings)


async def create(service, user, name="Posts", fields=None, notifications=None):
    notifications = notifications if notifications is not None else Notifications()
    result = await service.create_collection(
        CreateCollectionCommand(name=name, fields=fields or [title_field()]),
        user,
        notifications,
    )
    assert result is not None, notifications.codes()
    return result


class TestCreateCollection:
    @pytest.mark.asyncio
    async def test_create_provisions_backing_store(self, service, db_session, user, notifications):
        result = await service.create_collection(
            CreateCollectionCommand(
                name="Blog Posts",
                fields=[
                    title_field(),
                    FieldDefinitionInput(type="Range", name="Reading Time", data={"min": 1, "max": 60}),
                ],
            ),
            user,
            notifications,
        )

        assert not notifications
        assert result.slug == "blog_posts"
        assert result.stage_id == "stage-1"
        assert result.backing_store_name == "acme_blog_posts"
        assert [(f.type, f.slug) for f in result.fields] == [
            ("text", "title"),
            ("range", "reading_time"),
        ]
        assert result.fields[0].data["maxLength"] == 100
        assert await TableBuilder.table_exists(db_session, "acme_blog_posts") is True

        stored = await CollectionRepository(db_session).get_by_id(result.id)
        assert stored.backing_store_name == "acme_blog_posts"

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected_within_stage_only(
        self, service, user, other_stage_user, notifications
    ):
        await create(service, user)

        duplicate = await service.create_collection(
            CreateCollectionCommand(name="Posts", fields=[title_field()]), user, notifications
        )
        assert duplicate is None
        assert notifications.codes() == ["name_taken"]
        assert list(notifications)[0].severity is NotificationSeverity.CLIENT

        elsewhere = await create(service, other_stage_user)
        assert elsewhere.slug == "posts"
        assert elsewhere.backing_store_name == "globex_posts"

    @pytest.mark.asyncio
    async def test_slug_continues_after_highest_suffix(self, service, db_session, user):
        for slug in ("posts", "posts_1", "posts_3"):
            db_session.add(
                CollectionModel(
                    id=str(uuid.uuid4()),
                    name=f"Existing {slug}",
                    slug=slug,
                    stage_id=user.stage_id,
                    fields=[],
                )
            )
        await db_session.commit()

        result = await create(service, user, name="Posts")

        assert result.slug == "posts_4"
        assert result.backing_store_name == "acme_posts_4"

    @pytest.mark.asyncio
    async def test_backing_store_name_gets_letter_suffix(self, service, user):
        original = await create(service, user, name="Posts")
        await service.update_collection(
            UpdateCollectionCommand(
                collection_id=original.id, name="Articles", fields=[title_field()]
            ),
            user,
            Notifications(),
        )

        second = await create(service, user, name="Posts")
        renamed = await create(service, user, name="Posts!")

        assert second.slug == "posts"
        assert second.backing_store_name == "acme_postsa"
        assert renamed.slug == "posts_1"
        assert renamed.backing_store_name == "acme_posts_1"

    @pytest.mark.asyncio
    async def test_stage_key_falls_back_to_stage_id(self, service):
        keyless = UserContext(user_id="u", stage_id="Stage 9")
        result = await create(service, keyless, name="Notes")
        assert result.backing_store_name == "stage_9_notes"

    @pytest.mark.parametrize(
        "name, code",
        [(None, "name_required"), ("   ", "name_required"), ("!!!", "name_invalid"), ("x" * 201, "name_too_long")],
    )
    @pytest.mark.asyncio
    async def test_invalid_names(self, service, user, notifications, name, code):
        result = await service.create_collection(
            CreateCollectionCommand(name=name, fields=[title_field()]), user, notifications
        )
        assert result is None
        assert notifications.codes() == [code]

    @pytest.mark.asyncio
    async def test_field_errors_stop_at_first_and_persist_nothing(
        self, service, db_session, user, notifications
    ):
        result = await service.create_collection(
            CreateCollectionCommand(
                name="Posts",
                fields=[
                    FieldDefinitionInput(type="range", name="Score", data={"min": 5, "max": 1}),
                    FieldDefinitionInput(type="wat", name="Other"),
                ],
            ),
            user,
            notifications,
        )

        assert result is None
        assert notifications.codes() == ["field_range_invalid"]
        assert list(notifications)[0].field == "fields[0].data.max"
        _, total = await CollectionRepository(db_session).list_by_stage(user.stage_id)
        assert total == 0

    @pytest.mark.asyncio
    async def test_duplicate_field_names_rejected(self, service, user, notifications):
        result = await service.create_collection(
            CreateCollectionCommand(name="Posts", fields=[title_field(), title_field()]),
            user,
            notifications,
        )
        assert result is None
        assert notifications.codes() == ["duplicate_field_name"]

    @pytest.mark.asyncio
    async def test_stage_required(self, service, notifications):
        result = await service.create_collection(
            CreateCollectionCommand(name="Posts", fields=[title_field()]),
            UserContext(user_id="u"),
            notifications,
        )
        assert result is None
        assert notifications.codes() == ["stage_required"]


class TestUpdateCollection:
    @pytest.mark.asyncio
    async def test_same_name_keeps_slug_and_replaces_fields(self, service, user, notifications):
        created = await create(service, user)

        updated = await service.update_collection(
            UpdateCollectionCommand(
                collection_id=created.id,
                name="Posts",
                fields=[
                    title_field(maxLength=50),
                    FieldDefinitionInput(type="bool", name="Published"),
                ],
            ),
            user,
            notifications,
        )

        assert not notifications
        assert updated.slug == "posts"
        assert updated.backing_store_name == created.backing_store_name
        assert [f.slug for f in updated.fields] == ["title", "published"]
        assert updated.fields[0].data["maxLength"] == 50
        assert updated.fields[0].created_at == created.fields[0].created_at
        assert updated.fields[0].updated_at > created.fields[0].updated_at

    @pytest.mark.asyncio
    async def test_rename_rederives_slug(self, service, user, notifications):
        created = await create(service, user)

        updated = await service.update_collection(
            UpdateCollectionCommand(collection_id=created.id, name="News Items", fields=[title_field()]),
            user,
            notifications,
        )

        assert updated.slug == "news_items"
        assert updated.backing_store_name == "acme_posts"

    @pytest.mark.asyncio
    async def test_rename_to_taken_name(self, service, user, notifications):
        await create(service, user, name="Pages")
        posts = await create(service, user, name="Posts")

        result = await service.update_collection(
            UpdateCollectionCommand(collection_id=posts.id, name="Pages", fields=[title_field()]),
            user,
            notifications,
        )

        assert result is None
        assert notifications.codes() == ["name_taken"]

    @pytest.mark.asyncio
    async def test_unknown_collection(self, service, user, notifications):
        result = await service.update_collection(
            UpdateCollectionCommand(collection_id="missing", name="Posts", fields=[title_field()]),
            user,
            notifications,
        )
        assert result is None
        assert notifications.codes() == ["collection_not_found"]

    @pytest.mark.asyncio
    async def test_other_stage_cannot_update(self, service, user, other_stage_user, notifications):
        created = await create(service, user)

        result = await service.update_collection(
            UpdateCollectionCommand(collection_id=created.id, name="Mine", fields=[title_field()]),
            other_stage_user,
            notifications,
        )

        assert result is None
        assert notifications.codes() == ["collection_stage_mismatch"]


class TestDeleteCollection:
    @pytest.mark.asyncio
    async def test_delete_drops_backing_store(self, service, db_session, user, notifications):
        created = await create(service, user)

        result = await service.delete_collection(
            DeleteCollectionCommand(collection_id=created.id), user, notifications
        )

        assert result.id == created.id
        assert result.deleted is True
        assert await TableBuilder.table_exists(db_session, "acme_posts") is False

        missing = await service.get_collection(
            GetCollectionCommand(collection_id=created.id), user, notifications
        )
        assert missing is None
        assert notifications.codes() == ["collection_not_found"]

    @pytest.mark.asyncio
    async def test_drop_failure_does_not_block_delete(
        self, service, db_session, user, notifications, monkeypatch
    ):
        created = await create(service, user)
        monkeypatch.setattr(
            TableBuilder, "drop_table", AsyncMock(side_effect=RuntimeError("locked"))
        )

        result = await service.delete_collection(
            DeleteCollectionCommand(collection_id=created.id), user, notifications
        )

        assert result is not None
        assert not notifications
        assert await CollectionRepository(db_session).get_by_id(created.id) is None

    @pytest.mark.asyncio
    async def test_drop_failure_rolls_back_and_still_deletes(
        self, service, db_session, user, notifications, monkeypatch
    ):
        created = await create(service, user)
        other = await create(service, user, name="Pages")
        rollback = AsyncMock(wraps=db_session.rollback)
        monkeypatch.setattr(db_session, "rollback", rollback)
        monkeypatch.setattr(
            TableBuilder, "drop_table", AsyncMock(side_effect=RuntimeError("locked"))
        )

        result = await service.delete_collection(
            DeleteCollectionCommand(collection_id=created.id), user, notifications
        )

        assert result.id == created.id
        assert result.deleted is True
        assert not notifications
        rollback.assert_awaited_once()
        repository = CollectionRepository(db_session)
        assert await repository.get_by_id(created.id) is None
        assert await repository.get_by_id(other.id) is not None
        assert await TableBuilder.table_exists(db_session, created.backing_store_name) is True

    @pytest.mark.asyncio
    async def test_collection_without_backing_store(self, service, db_session, user, notifications):
        db_session.add(
            CollectionModel(id="c-1", name="Draft", slug="draft", stage_id="stage-1", fields=[])
        )
        await db_session.commit()

        result = await service.delete_collection(
            DeleteCollectionCommand(collection_id="c-1"), user, notifications
        )

        assert result.id == "c-1"


class TestReadCollections:
    @pytest.mark.asyncio
    async def test_get_collection_and_fields(self, service, user, notifications):
        created = await create(service, user)

        collection = await service.get_collection(
            GetCollectionCommand(collection_id=created.id), user, notifications
        )
        fields = await service.get_collection_fields(
            GetCollectionFieldsCommand(collection_id=created.id), user, notifications
        )

        assert collection == created
        assert [f.name for f in fields] == ["Title"]

    @pytest.mark.asyncio
    async def test_get_collection_requires_id(self, service, user, notifications):
        result = await service.get_collection(GetCollectionCommand(), user, notifications)
        assert result is None
        assert notifications.codes() == ["collection_id_required"]

    @pytest.mark.asyncio
    async def test_list_is_stage_scoped_and_paged(
        self, service, user, other_stage_user, notifications
    ):
        for name in ("Posts", "Pages", "Authors"):
            await create(service, user, name=name)
        await create(service, other_stage_user, name="Secret")

        page = await service.get_collections(
            GetCollectionsCommand(page=1, page_size=2), user, notifications
        )

        assert page.total == 3
        assert page.total_pages == 2
        assert len(page.items) == 2
        assert all(item.field_count == 1 for item in page.items)

        rest = await service.get_collections(
            GetCollectionsCommand(page=2, page_size=2), user, notifications
        )
        names = {item.name for item in page.items + rest.items}
        assert names == {"Posts", "Pages", "Authors"}

    @pytest.mark.asyncio
    async def test_list_rejects_bad_page(self, service, user, notifications):
        result = await service.get_collections(
            GetCollectionsCommand(page=0), user, notifications
        )
        assert result is None
        assert notifications.codes() == ["invalid_pagination"]

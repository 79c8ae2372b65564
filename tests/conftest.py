"""Pytest configuration for all tests."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from stagecms.core.config import Settings
from stagecms.core.notifications import Notifications
from stagecms.domain.entities import UserContext
from stagecms.infrastructure.persistence.database import Base
from stagecms.infrastructure.persistence.models import (  # noqa: F401
    CollectionItemChangeModel,
    CollectionModel,
    MediaModel,
)


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        environment="testing",
        database_url="sqlite+aiosqlite:///:memory:",
        file_upload_base_url="http://files.test/v1/files/upload/",
        default_page_size=20,
        max_page_size=100,
    )


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing. Backing-store tables
    created by a test live in the same database and vanish with it.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
def user() -> UserContext:
    return UserContext(
        user_id="user-1",
        email="editor@example.com",
        stage_id="stage-1",
        stage_key="acme",
        stage_label="Acme",
    )


@pytest.fixture
def other_stage_user() -> UserContext:
    return UserContext(
        user_id="user-2",
        email="other@example.com",
        stage_id="stage-2",
        stage_key="globex",
        stage_label="Globex",
    )


@pytest.fixture
def notifications() -> Notifications:
    return Notifications()

"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file by default, created from the
model metadata. Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

import src.marketplace.models  # noqa: F401 - register tables on the metadata
from src.marketplace.api.dependencies.db import get_db_session
from src.marketplace.core.background import background_tasks
from src.marketplace.core.db import configure_sqlite, get_session_factory, is_sqlite_url
from src.marketplace.main import create_app
from src.marketplace.models import DesignerProfile, HomeownerProfile, Project
from tests.factories import DesignerProfileFactory, HomeownerProfileFactory
from tests.helpers import Workflow


@pytest.fixture(autouse=True)
async def _drain_background_tasks() -> AsyncGenerator[None]:
    """Let notification and indexing tasks finish before the loop closes."""
    yield
    await background_tasks.wait_for_drain(timeout=5)


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """A fresh SQLite file per test. Modules may override this fixture."""
    return f"sqlite+aiosqlite:///{tmp_path / 'marketplace.db'}"


@pytest.fixture(scope="function")
async def engine(database_url: str) -> AsyncGenerator[AsyncEngine]:
    """Create an engine for `database_url` with every table in place.

    Server databases are shared between tests, so their tables are dropped
    before and after each test.
    """
    test_engine = create_async_engine(database_url, poolclass=NullPool)
    configure_sqlite(test_engine)
    server = not is_sqlite_url(database_url)

    async with test_engine.begin() as conn:
        if server:
            await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    if server:
        async with test_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return get_session_factory(engine)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for seeding and assertions.

    The session does NOT auto-commit. Tests must explicitly call
    `await session.commit()` to persist changes.
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
def workflow(session_factory: async_sessionmaker[AsyncSession]) -> Workflow:
    """Run service commands on fresh sessions, one per command."""
    return Workflow(session_factory)


@pytest.fixture
async def homeowner(db_session: AsyncSession) -> HomeownerProfile:
    profile = HomeownerProfileFactory.build()
    db_session.add(profile)
    await db_session.commit()
    return profile


@pytest.fixture
async def other_homeowner(db_session: AsyncSession) -> HomeownerProfile:
    profile = HomeownerProfileFactory.build()
    db_session.add(profile)
    await db_session.commit()
    return profile


@pytest.fixture
async def designers(db_session: AsyncSession) -> list[DesignerProfile]:
    """Three verified designers."""
    profiles = [DesignerProfileFactory.build() for _ in range(3)]
    db_session.add_all(profiles)
    await db_session.commit()
    return profiles


@pytest.fixture
async def unverified_designer(db_session: AsyncSession) -> DesignerProfile:
    profile = DesignerProfileFactory.unverified()
    db_session.add(profile)
    await db_session.commit()
    return profile


@pytest.fixture
async def draft_project(workflow: Workflow, homeowner: HomeownerProfile) -> Project:
    return await workflow.create_project(homeowner)


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient]:
    """HTTP client against the app, with sessions bound to the test database."""
    app = create_app()

    async def _override_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()

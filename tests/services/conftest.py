"""Service test fixtures — async SQLite DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - The app receives a DatabaseSessionManager bound to that database (no lifespan run)
    - Schema name is None: SQLite has no "social" schema, tables stay unqualified

Design Decisions:
    - SQLite in-memory with StaticPool: every session sees the same database
    - Session manager injected through create_app(), not patched into a module global
"""

import pytest
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from social_posts.config import Settings
from social_posts.db.base import Base
from social_posts.infrastructure.database import DatabaseSessionManager
from social_posts.main import create_app
from social_posts.models.post import posts_table


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_settings():
    return Settings(database_schema=None, log_format="text")


@pytest.fixture
def session_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
async def client(test_settings, session_manager):
    """FastAPI test client with the test session manager injected."""
    app = create_app(settings=test_settings, session_manager=session_manager)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def insert_post(test_engine):
    """Insert a row directly, bypassing the API. Returns the new id."""
    async def _insert(content="seeded post", likes=0, removed=False):
        async with test_engine.begin() as conn:
            result = await conn.execute(
                insert(posts_table).values(
                    content=content, likes=likes, removed=removed,
                ),
            )
            return result.inserted_primary_key[0]
    return _insert


@pytest.fixture
def read_post(test_engine):
    """Read a full row (removed included) directly from the table."""
    async def _read(post_id):
        async with test_engine.connect() as conn:
            result = await conn.execute(
                posts_table.select().where(posts_table.c.id == post_id),
            )
            row = result.mappings().first()
            return dict(row) if row is not None else None
    return _read

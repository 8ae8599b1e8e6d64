"""Database Session Manager & Schema handle — against in-memory SQLite.

Tests cover:
    - session() yields a working session and maps SQLAlchemy errors to DatabaseError
    - health_check() true on a live engine
    - Schema.execute() applies the schema translate map
    - Schema.table() resolves tables from metadata
"""

import pytest
from sqlalchemy import insert, select, text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from social_posts.core.errors import DatabaseError
from social_posts.db.base import Base
from social_posts.infrastructure.database import (
    DatabaseSessionManager, resolve_schema,
)
from social_posts.models.post import posts_table


@pytest.fixture
async def manager():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    manager = DatabaseSessionManager.from_engine(engine)
    yield manager
    await manager.dispose()


async def test_health_check(manager):
    assert await manager.health_check() is True


async def test_sqlalchemy_errors_become_database_errors(manager):
    with pytest.raises(DatabaseError) as exc_info:
        async with manager.session() as session:
            await session.execute(text("SELECT * FROM no_such_table"))
    assert exc_info.value.http_status == 500


async def test_schema_table_lookup(manager):
    async with manager.session() as session:
        db = await resolve_schema(session, None)
        assert db.table("posts") is posts_table


async def test_schema_execute_and_commit(manager):
    async with manager.session() as session:
        db = await resolve_schema(session, None)
        await db.execute(insert(posts_table).values(content="x"))
        await db.commit()

    async with manager.session() as session:
        db = await resolve_schema(session, None)
        result = await db.execute(select(posts_table.c.content, posts_table.c.likes))
        assert result.all() == [("x", 0)]


async def test_schema_name_is_applied_to_statements(manager):
    async with manager.session() as session:
        db = await resolve_schema(session, "social")
        with pytest.raises(Exception) as exc_info:
            await db.execute(select(posts_table.c.id))
    # SQLite has no "social" schema: the qualified name reached the database
    assert "social" in str(exc_info.value)


async def test_uncommitted_changes_are_discarded_on_close(manager):
    async with manager.session() as session:
        db = await resolve_schema(session, None)
        await db.execute(insert(posts_table).values(content="draft"))

    async with manager.session() as session:
        db = await resolve_schema(session, None)
        result = await db.execute(select(posts_table.c.id))
        assert result.all() == []

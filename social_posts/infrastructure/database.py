"""Database Session Manager — per-request async sessions with guaranteed release.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Every session is closed on exit; a failing close is logged as
      ResourceReleaseError and never propagates
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py)
    - Statements run through a Schema handle resolve unqualified tables inside that schema

Design Decisions:
    - Manager constructed explicitly and injected into the dispatcher: no module-level
      singleton, tests hand in a manager bound to SQLite
    - schema_translate_map over schema-qualified models: the same Post table runs
      against PostgreSQL schema "social" and against SQLite in tests
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import Table, text
from sqlalchemy.engine import Result
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.sql import Executable

from social_posts.core.errors import DatabaseError, ResourceReleaseError
from social_posts.db.base import Base
# Import all models so Base.metadata has them
import social_posts.models  # noqa: F401

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Owns the engine and hands out one scoped session per request."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 5,
        max_overflow: int = 5,
        **engine_kwargs: Any,
    ):
        if database_url.startswith("sqlite"):
            engine = create_async_engine(database_url, **engine_kwargs)
        else:
            engine = create_async_engine(
                database_url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
                **engine_kwargs,
            )
        self._init_from_engine(engine)

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "DatabaseSessionManager":
        """Wrap an existing engine (test fixtures, scripts)."""
        manager = cls.__new__(cls)
        manager._init_from_engine(engine)
        return manager

    def _init_from_engine(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception and guaranteed close."""
        try:
            session = self._session_factory()
        except SQLAlchemyError as e:
            logger.error(f"DB session acquisition failed: {e}")
            raise DatabaseError("Could not open session", "connect")
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown")
        finally:
            await _close_quietly(session)

    async def health_check(self) -> bool:
        """Check database connectivity."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


async def _close_quietly(session: AsyncSession) -> None:
    """Close the session; a failure here is logged, never raised."""
    try:
        await session.close()
    except Exception as e:
        err = ResourceReleaseError(str(e))
        logger.error(err.message, extra={"error_code": err.code}, exc_info=True)


class Schema:
    """Handle to one named schema, bound to one request's session."""

    def __init__(self, session: AsyncSession, name: str | None):
        self.session = session
        self.name = name
        self._execution_options = {"schema_translate_map": {None: name}}

    def table(self, name: str) -> Table:
        return Base.metadata.tables[name]

    async def execute(self, statement: Executable) -> Result:
        return await self.session.execute(
            statement, execution_options=self._execution_options,
        )

    async def commit(self) -> None:
        await self.session.commit()


async def resolve_schema(session: AsyncSession, name: str | None) -> Schema:
    """Acquire the session's connection and bind the schema name to it."""
    try:
        await session.connection()
    except SQLAlchemyError as e:
        logger.error(f"DB schema resolution failed: {e}")
        raise DatabaseError(f"Could not resolve schema '{name}'", "connect")
    return Schema(session, name)

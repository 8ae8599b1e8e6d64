"""Social Posts API — FastAPI application entry point.

Invariants:
    - One method-agnostic catch-all route; every request goes through SessionScopedDispatcher
    - The endpoint registry is built once per app and never mutated
    - The session manager is either injected (tests) or built from settings on startup
      and disposed on shutdown
    - CORS configured from settings (not hardcoded)

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app() factory: the database client is an explicit dependency instead of
      a process-wide singleton
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from social_posts.api.dispatcher import SessionScopedDispatcher
from social_posts.config import Settings, get_settings
from social_posts.infrastructure.database import DatabaseSessionManager
from social_posts.infrastructure.observability import setup_logging
from social_posts.services.handle_posts import build_post_registry

logger = logging.getLogger(__name__)

HTTP_METHODS = [
    "GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE", "CONNECT",
]


def create_app(
    settings: Settings | None = None,
    session_manager: DatabaseSessionManager | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    registry = build_post_registry()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        owned_manager = None
        if app.state.dispatcher is None:
            owned_manager = DatabaseSessionManager(
                settings.database_url,
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
            )
            app.state.dispatcher = SessionScopedDispatcher(
                registry, owned_manager, settings.database_schema,
            )
        logger.info(f"Social Posts API started on port {settings.port}")
        yield
        logger.info("Social Posts API shutting down")
        if owned_manager is not None:
            await owned_manager.dispose()
            app.state.dispatcher = None

    app = FastAPI(
        title="Social Posts API", version="1.0.0", lifespan=lifespan,
        docs_url=None, redoc_url=None, openapi_url=None,
    )
    app.state.dispatcher = (
        SessionScopedDispatcher(registry, session_manager, settings.database_schema)
        if session_manager is not None else None
    )

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.api_route("/{pathname:path}", methods=HTTP_METHODS, include_in_schema=False)
    async def dispatch(request: Request):
        """Hand every request to the session-scoped dispatcher."""
        return await request.app.state.dispatcher.dispatch(request)

    return app


app = create_app()

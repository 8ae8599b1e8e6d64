"""Session-Scoped Dispatcher — runs one request end-to-end against a short-lived DB session.

Invariants:
    - Unknown path -> 404 with empty body, and no session is opened
    - At most one session per request, opened after routing succeeds
    - The session is always released if it was acquired (DatabaseSessionManager.session)
    - Exactly one response per request: a failure after the handler already
      responded is logged and the sent response stands
    - Any error from session open, schema resolution or the handler -> 500 envelope

Design Decisions:
    - Registry and session manager injected at construction: no global client handle
    - Handlers write through ResponseWriter instead of returning responses, so the
      dispatcher can tell "responded then failed" from "failed before responding"
    - 500 bodies are sanitized envelopes: PostsError.to_response() for known errors,
      a generic envelope for everything else
"""

import logging
from dataclasses import dataclass

from starlette.datastructures import QueryParams
from starlette.requests import Request
from starlette.responses import Response

from social_posts.core.endpoint_registry import EndpointRegistry
from social_posts.core.errors import PostsError, internal_error_response
from social_posts.core.response_writer import ResponseWriter
from social_posts.infrastructure.database import (
    DatabaseSessionManager, Schema, resolve_schema,
)

logger = logging.getLogger(__name__)

STATUS_NOT_FOUND = 404
STATUS_INTERNAL_SERVER_ERROR = 500


@dataclass
class RequestContext:
    """Everything a handler receives for one request."""
    request: Request
    response: ResponseWriter
    pathname: str
    search_params: QueryParams
    db: Schema


class SessionScopedDispatcher:
    """Routes a request to its handler inside one scoped database session."""

    def __init__(
        self,
        registry: EndpointRegistry,
        session_manager: DatabaseSessionManager,
        schema_name: str | None,
    ):
        self._registry = registry
        self._session_manager = session_manager
        self._schema_name = schema_name

    async def dispatch(self, request: Request) -> Response:
        pathname = request.url.path
        search_params = request.query_params
        writer = ResponseWriter()

        handler = self._registry.resolve(pathname)
        if handler is None:
            writer.send(status=STATUS_NOT_FOUND)
            return self._finish(writer, pathname)

        try:
            async with self._session_manager.session() as session:
                db = await resolve_schema(session, self._schema_name)
                await handler(RequestContext(
                    request=request,
                    response=writer,
                    pathname=pathname,
                    search_params=search_params,
                    db=db,
                ))
        except Exception as exc:
            self._respond_to_failure(writer, exc, pathname)

        if not writer.sent:
            logger.error(
                f"Handler for {pathname} returned without responding",
                extra={"path": pathname},
            )
            writer.send_json(
                internal_error_response(), status=STATUS_INTERNAL_SERVER_ERROR,
            )
        return self._finish(writer, pathname)

    def _respond_to_failure(
        self, writer: ResponseWriter, exc: Exception, pathname: str,
    ) -> None:
        error_code = exc.code if isinstance(exc, PostsError) else "INTERNAL_ERROR"
        logger.error(
            f"Request to {pathname} failed: {exc}",
            extra={"path": pathname, "error_code": error_code},
            exc_info=exc,
        )
        if writer.sent:
            # the first response stands
            return
        body = (
            exc.to_response() if isinstance(exc, PostsError)
            else internal_error_response()
        )
        writer.send_json(body, status=STATUS_INTERNAL_SERVER_ERROR)

    def _finish(self, writer: ResponseWriter, pathname: str) -> Response:
        response = writer.response
        logger.info(
            f"{pathname} -> {response.status_code}",
            extra={"path": pathname, "status_code": response.status_code},
        )
        return response

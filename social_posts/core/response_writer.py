"""Response Writer — the per-request response sink, written exactly once.

Invariants:
    - At most one send*() per request; a second call raises ResponseAlreadySentError
      and leaves the first response untouched
    - send_json() always sets Content-Type: application/json
    - Status defaults to 200, headers to empty, body to empty

Design Decisions:
    - Wraps Starlette Response objects: the dispatcher returns writer.response to the ASGI app
    - jsonable_encoder before JSONResponse: datetimes from the driver render as ISO-8601
"""

from typing import Any, Mapping

from fastapi.encoders import jsonable_encoder
from starlette.responses import JSONResponse, Response

from social_posts.core.errors import PostsError, ResponseAlreadySentError


class ResponseWriter:
    """Collects exactly one response for one request."""

    def __init__(self):
        self._response: Response | None = None

    @property
    def sent(self) -> bool:
        return self._response is not None

    @property
    def response(self) -> Response:
        if self._response is None:
            raise RuntimeError("No response has been sent")
        return self._response

    def send(
        self,
        status: int = 200,
        headers: Mapping[str, str] | None = None,
        body: str | bytes | None = None,
    ) -> None:
        """Set headers, status and body, then finalize."""
        self._claim()
        response = Response(content=body if body is not None else b"", status_code=status)
        for key, value in (headers or {}).items():
            response.headers[key] = value
        self._response = response

    def send_json(self, value: Any, status: int = 200) -> None:
        self._claim()
        self._response = JSONResponse(
            content=jsonable_encoder(value), status_code=status,
        )

    def send_error(self, error: PostsError) -> None:
        """Send the error's REST envelope with its HTTP status."""
        self.send_json(error.to_response(), status=error.http_status)

    def _claim(self) -> None:
        if self._response is not None:
            raise ResponseAlreadySentError()

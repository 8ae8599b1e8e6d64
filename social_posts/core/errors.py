"""Error Hierarchy — typed, categorized exceptions for every failure mode of the posts API.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400/404) are answered by handlers; infrastructure errors (500) by the dispatcher
    - to_response() produces the REST envelope — kind plus message, never a raw exception dump
    - ResourceReleaseError is logged, never sent to a client

Design Decisions:
    - Single hierarchy with PostsError base: the dispatcher catches all of it in one place
    - ErrorContext as dataclass: timestamp without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """When the error was raised."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class PostsError(Exception):
    """Base exception for all posts API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class InvalidParameterError(PostsError):
    """Query parameter missing or malformed."""
    def __init__(self, parameter: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Parameter '{parameter}' {reason}",
            "INVALID_PARAMETER", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.parameter = parameter


class PostNotFoundError(PostsError):
    """Post does not exist or is excluded by the removed filter."""
    def __init__(self, post_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Post '{post_id}' not found",
            "POST_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.post_id = post_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(PostsError):
    """Session acquisition, schema resolution or statement execution failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class ResourceReleaseError(PostsError):
    """Session close failed. Logged only."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Session release failed: {message}",
            "RESOURCE_RELEASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.WARNING, context, 500,
        )


class ResponseAlreadySentError(PostsError):
    """A handler tried to write a second response for the same request."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Response already sent for this request",
            "RESPONSE_ALREADY_SENT", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


def internal_error_response() -> dict:
    """Envelope for errors outside the hierarchy — never leaks internal details."""
    return {
        "error": {
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "category": ErrorCategory.INTERNAL.value,
            "severity": ErrorSeverity.CRITICAL.value,
        },
    }

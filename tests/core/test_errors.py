"""Error Hierarchy — status codes and REST envelopes.

Tests:
    - Each error maps to the documented HTTP status
    - Envelopes carry code, message, category, severity, timestamp
    - The generic envelope carries no exception detail
"""

from social_posts.core.errors import (
    DatabaseError, InvalidParameterError, PostNotFoundError, PostsError,
    ResourceReleaseError, ErrorCategory, internal_error_response,
)


def test_invalid_parameter_is_400():
    err = InvalidParameterError("id", "must be an integer")
    assert err.http_status == 400
    assert err.parameter == "id"
    assert "id" in err.message


def test_post_not_found_is_404():
    err = PostNotFoundError(12)
    assert err.http_status == 404
    assert err.category == ErrorCategory.RESOURCE_NOT_FOUND
    assert err.post_id == 12


def test_database_error_is_500():
    err = DatabaseError("Connection refused", "connect")
    assert err.http_status == 500
    assert err.operation == "connect"
    assert err.message == "Database connect failed: Connection refused"


def test_all_errors_share_base():
    assert isinstance(ResourceReleaseError("x"), PostsError)


def test_envelope_shape():
    envelope = PostNotFoundError(3).to_response()
    assert set(envelope["error"]) == {
        "code", "message", "category", "severity", "timestamp",
    }
    assert envelope["error"]["category"] == "resource_not_found"


def test_internal_envelope_is_generic():
    envelope = internal_error_response()
    assert envelope["error"]["code"] == "INTERNAL_ERROR"
    assert envelope["error"]["message"] == "An unexpected error occurred"

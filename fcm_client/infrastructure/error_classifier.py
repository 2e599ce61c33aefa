"""
Maps raw transport failures onto the client's error taxonomy.

Classification looks only at the failure itself: the HTTP status bucket,
or whether a response was received at all. It never depends on retry
state.
"""

import httpx
from firebase_admin import exceptions as firebase_exceptions

from ..domain.errors import (
    ClientError,
    FCMConnectionError,
    FCMError,
    HTTPStatusError,
    ServerError,
)

# SDK error codes raised when no HTTP response was received.
_SDK_CONNECTION_CODES = frozenset({
    firebase_exceptions.UNAVAILABLE,
    firebase_exceptions.DEADLINE_EXCEEDED,
    firebase_exceptions.UNKNOWN,
})


def classify_status(status_code: int, reason: str = "") -> HTTPStatusError:
    """Classify a non-200 HTTP status."""
    detail = f"{status_code} error: {reason}".rstrip(": ")
    if status_code >= 500:
        return ServerError(detail, status_code=status_code)
    return ClientError(detail, status_code=status_code)


def classify_transport_error(exc: httpx.RequestError) -> FCMError:
    """Classify an httpx failure raised before a response arrived."""
    if isinstance(exc, httpx.TransportError):
        return FCMConnectionError(f"request failed: {exc!r}")
    return ClientError(f"request failed: {exc!r}")


def classify_deadline(timeout: float) -> FCMConnectionError:
    """An attempt ran out of its time budget before a response arrived."""
    return FCMConnectionError(f"attempt timed out after {timeout}s")


def classify_firebase_error(exc: firebase_exceptions.FirebaseError) -> FCMError:
    """Classify an error raised by the firebase_admin messaging SDK."""
    http_response = exc.http_response
    if http_response is not None:
        status_code = http_response.status_code
        if status_code >= 500:
            return ServerError(str(exc), status_code=status_code)
        return ClientError(str(exc), status_code=status_code)
    if exc.code in _SDK_CONNECTION_CODES:
        return FCMConnectionError(str(exc))
    return ClientError(str(exc))


def is_retry_eligible(exc: BaseException) -> bool:
    """Whether the retry policy may start another attempt after exc."""
    return isinstance(exc, FCMError) and exc.retryable

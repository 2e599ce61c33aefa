"""
Error taxonomy for the push client.

Every failure raised by the client derives from FCMError. The
`retryable` class attribute tells the retry policy whether another
attempt is allowed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .response import Response


class FCMError(Exception):
    """Base exception for push client errors."""

    retryable: bool = False

    def __init__(self, message: str, *, response: Response | None = None) -> None:
        super().__init__(message)
        self.response = response


class MessageValidationError(FCMError):
    """Raised when a message is malformed. Never retried."""

    pass


class FCMConnectionError(FCMError):
    """Raised when the request never reached the server."""

    retryable = True


class HTTPStatusError(FCMError):
    """Base for errors built from a non-200 HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response: Response | None = None,
    ) -> None:
        super().__init__(message, response=response)
        self.status_code = status_code


class ServerError(HTTPStatusError):
    """Raised for 5xx-class responses."""

    retryable = True


class ClientError(HTTPStatusError):
    """Raised for any other non-2xx status or an undecodable response."""

    pass


class ConstructionError(FCMError):
    """Raised when a client cannot be built from its configuration."""

    pass


class InvalidAPIKeyError(ConstructionError):
    def __init__(self) -> None:
        super().__init__("client API key is invalid")


class InvalidCredentialsPathError(ConstructionError):
    def __init__(self) -> None:
        super().__init__("credentials path is invalid")


class InvalidEndpointError(ConstructionError):
    def __init__(self) -> None:
        super().__init__("endpoint URL is invalid")


class InvalidTimeoutError(ConstructionError):
    def __init__(self, timeout: float) -> None:
        super().__init__(f"timeout must be positive, got {timeout}")


class RetryNotSupportedError(FCMError):
    """Raised when retries are requested on a transport that cannot retry."""

    def __init__(self, transport: str) -> None:
        super().__init__(f"retries are not supported by the {transport} transport")

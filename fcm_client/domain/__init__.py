from .errors import (
    ClientError,
    ConstructionError,
    FCMConnectionError,
    FCMError,
    HTTPStatusError,
    InvalidAPIKeyError,
    InvalidCredentialsPathError,
    InvalidEndpointError,
    InvalidTimeoutError,
    MessageValidationError,
    RetryNotSupportedError,
    ServerError,
)
from .message import Message, Notification, validate
from .response import Response, Result, ResultError

__all__ = [
    "ClientError",
    "ConstructionError",
    "FCMConnectionError",
    "FCMError",
    "HTTPStatusError",
    "InvalidAPIKeyError",
    "InvalidCredentialsPathError",
    "InvalidEndpointError",
    "InvalidTimeoutError",
    "Message",
    "MessageValidationError",
    "Notification",
    "Response",
    "Result",
    "ResultError",
    "RetryNotSupportedError",
    "ServerError",
    "validate",
]

from .client import Client
from .config import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT, Settings, get_settings
from .domain import (
    ClientError,
    ConstructionError,
    FCMConnectionError,
    FCMError,
    InvalidAPIKeyError,
    InvalidCredentialsPathError,
    InvalidEndpointError,
    InvalidTimeoutError,
    Message,
    MessageValidationError,
    Notification,
    Response,
    Result,
    ResultError,
    RetryNotSupportedError,
    ServerError,
)
from .domain.ports import TransportType
from .infrastructure.logging import configure_logging

__all__ = [
    "Client",
    "ClientError",
    "ConstructionError",
    "DEFAULT_ENDPOINT",
    "DEFAULT_TIMEOUT",
    "FCMConnectionError",
    "FCMError",
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
    "Settings",
    "TransportType",
    "configure_logging",
    "get_settings",
]

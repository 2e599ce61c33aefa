"""
Factory for creating sender instances.

This factory creates the appropriate sender implementation based on the
authentication mode. It encapsulates the creation logic and the checks
that must fail before any send is attempted.
"""

import httpx

from ...config import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT, Settings
from ...domain.errors import (
    ConstructionError,
    InvalidAPIKeyError,
    InvalidCredentialsPathError,
    InvalidEndpointError,
    InvalidTimeoutError,
)
from ...domain.ports import Sender
from .firebase_sender import FirebaseSender
from .http_sender import HttpSender


class SenderFactory:
    """
    Factory for creating sender instances.

    The transport is chosen once here and stays fixed for the lifetime of
    the client that owns the sender.
    """

    @classmethod
    def from_api_key(
        cls,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> HttpSender:
        """
        Create a direct HTTP sender.

        Raises:
            InvalidAPIKeyError: If api_key is empty
            InvalidEndpointError: If endpoint is empty
            InvalidTimeoutError: If timeout is not positive
        """
        if not api_key:
            raise InvalidAPIKeyError()
        cls._check_options(endpoint, timeout)
        return HttpSender(
            api_key=api_key,
            endpoint=endpoint,
            timeout=timeout,
            http_client=http_client,
        )

    @classmethod
    def from_credentials(cls, path: str, timeout: float = DEFAULT_TIMEOUT) -> FirebaseSender:
        """
        Create an SDK sender from a service account file.

        Raises:
            InvalidCredentialsPathError: If path is empty
            InvalidTimeoutError: If timeout is not positive
        """
        if not path:
            raise InvalidCredentialsPathError()
        cls._check_options(DEFAULT_ENDPOINT, timeout)
        return FirebaseSender.from_credentials_file(path)

    @classmethod
    def from_settings(cls, settings: Settings) -> Sender:
        """
        Create the sender described by settings.

        A credentials path selects the SDK transport, otherwise the API key
        selects the direct HTTP transport.

        Raises:
            ConstructionError: If neither is configured, or a value is invalid
        """
        if settings.credentials_path:
            return cls.from_credentials(settings.credentials_path, timeout=settings.timeout)
        if settings.api_key:
            return cls.from_api_key(
                settings.api_key,
                endpoint=settings.endpoint,
                timeout=settings.timeout,
            )
        raise ConstructionError("either FCM_API_KEY or FCM_CREDENTIALS_PATH must be set")

    @staticmethod
    def _check_options(endpoint: str, timeout: float) -> None:
        if not endpoint:
            raise InvalidEndpointError()
        if timeout <= 0:
            raise InvalidTimeoutError(timeout)

"""
Push notification client.

The client validates a message, hands it to the sender chosen at
construction (direct HTTP or Firebase Admin SDK) and returns the
normalized Response. Only the direct HTTP transport supports retries.
"""

from collections.abc import Awaitable, Callable
from types import TracebackType
from uuid import uuid4

import httpx
import structlog

from .config import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT, Settings, get_settings
from .domain.errors import InvalidTimeoutError, RetryNotSupportedError
from .domain.message import Message, validate
from .domain.ports import RetryableSender, Sender, TransportType
from .domain.response import Response
from .infrastructure.adapters import SenderFactory
from .infrastructure.logging import Timer
from .infrastructure.retry import (
    DEFAULT_MAX_BACKOFF,
    DEFAULT_MIN_BACKOFF,
    RetryPolicy,
    run_with_deadline,
)

logger = structlog.get_logger()


class Client:
    """
    Sends messages to FCM through one fixed transport.

    Build it with `with_api_key` for the legacy HTTP API or with
    `with_credentials` for the Firebase Admin SDK, or let
    `from_settings` pick from configuration. Sends may run concurrently
    on one client.
    """

    def __init__(
        self,
        sender: Sender,
        timeout: float = DEFAULT_TIMEOUT,
        min_backoff: float = DEFAULT_MIN_BACKOFF,
        max_backoff: float = DEFAULT_MAX_BACKOFF,
    ) -> None:
        """
        Args:
            sender: Transport used for every send
            timeout: Time budget of each attempt, in seconds
            min_backoff: Base delay between retry attempts, in seconds
            max_backoff: Cap on the delay between retry attempts
        """
        if timeout <= 0:
            raise InvalidTimeoutError(timeout)
        self._sender = sender
        self._timeout = timeout
        self._min_backoff = min_backoff
        self._max_backoff = max_backoff

    @classmethod
    def with_api_key(
        cls,
        api_key: str,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
        min_backoff: float = DEFAULT_MIN_BACKOFF,
        max_backoff: float = DEFAULT_MAX_BACKOFF,
    ) -> "Client":
        """Create a client for the legacy HTTP API authenticated by server key."""
        sender = SenderFactory.from_api_key(
            api_key,
            endpoint=endpoint,
            timeout=timeout,
            http_client=http_client,
        )
        return cls(sender, timeout=timeout, min_backoff=min_backoff, max_backoff=max_backoff)

    @classmethod
    def with_credentials(
        cls,
        path: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> "Client":
        """Create a client for the Firebase Admin SDK from a service account file."""
        sender = SenderFactory.from_credentials(path, timeout=timeout)
        return cls(sender, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "Client":
        """Create a client from environment-driven settings."""
        settings = settings or get_settings()
        sender = SenderFactory.from_settings(settings)
        return cls(
            sender,
            timeout=settings.timeout,
            min_backoff=settings.retry_min_backoff,
            max_backoff=settings.retry_max_backoff,
        )

    @property
    def transport(self) -> TransportType:
        return self._sender.transport

    @property
    def timeout(self) -> float:
        return self._timeout

    async def aclose(self) -> None:
        await self._sender.close()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def send(self, message: Message) -> Response:
        """
        Send a message once, bounded by the client timeout.

        Raises:
            MessageValidationError: Before any I/O if the message is malformed
            FCMError: Classified transport failure
        """
        validate(message)
        return await self._dispatch(
            message,
            lambda: run_with_deadline(lambda: self._sender.send(message), self._timeout),
        )

    async def send_with_context(self, message: Message) -> Response:
        """
        Send a message once, without a client-imposed deadline.

        Deadlines and cancellation come from the caller, e.g. an enclosing
        `asyncio.timeout()` block or cancelling the calling task.
        """
        validate(message)
        return await self._dispatch(message, lambda: self._sender.send(message))

    async def send_with_retry(self, message: Message, retry_attempts: int) -> Response:
        """
        Send a message, retrying transient failures up to retry_attempts times in total.

        Raises:
            RetryNotSupportedError: If the client uses the SDK transport
            FCMError: The first non-retryable error or the last error seen
        """
        return await self.send_with_retry_with_context(message, retry_attempts)

    async def send_with_retry_with_context(self, message: Message, retry_attempts: int) -> Response:
        """
        Like send_with_retry, inside the caller's cancellation scope.

        Each attempt still gets its own deadline from the client timeout.
        Cancelling the caller aborts the attempt in flight and no further
        attempt starts.
        """
        validate(message)
        sender = self._sender
        if not isinstance(sender, RetryableSender):
            raise RetryNotSupportedError(sender.transport.value)

        payload = sender.encode(message)
        policy = RetryPolicy(
            max_attempts=retry_attempts,
            attempt_timeout=self._timeout,
            min_backoff=self._min_backoff,
            max_backoff=self._max_backoff,
        )
        return await self._dispatch(message, lambda: policy.run(lambda: sender.post(payload)))

    async def _dispatch(
        self,
        message: Message,
        operation: Callable[[], Awaitable[Response]],
    ) -> Response:
        with structlog.contextvars.bound_contextvars(
            send_id=uuid4().hex,
            transport=self.transport.value,
        ):
            with Timer() as t:
                response = await operation()
            logger.info(
                "Send completed",
                recipients=message.recipient_count,
                success=response.success,
                failure=response.failure,
                duration_ms=t.duration_ms,
            )
            return response

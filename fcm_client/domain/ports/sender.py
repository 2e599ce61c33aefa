"""
Outbound port for push delivery.

The client depends on this interface and never on a concrete transport.
Infrastructure adapters implement it.
"""

from abc import ABC, abstractmethod
from enum import Enum

from ..message import Message
from ..response import Response


class TransportType(str, Enum):
    """Supported delivery transports."""

    HTTP = "http"
    SDK = "sdk"


class Sender(ABC):
    """
    Outbound port for sending one validated message.

    Implementations normalize their provider's native result into a
    Response, so callers never branch on the transport.
    """

    @property
    @abstractmethod
    def transport(self) -> TransportType:
        """Return the transport this sender uses."""
        ...

    @abstractmethod
    async def send(self, message: Message) -> Response:
        """
        Deliver a message that has already passed validation.

        Args:
            message: The validated message

        Returns:
            Normalized Response

        Raises:
            FCMError: Classified transport failure
        """
        ...

    async def close(self) -> None:
        """Release resources owned by the sender."""
        return None


class RetryableSender(Sender):
    """
    Sender whose wire payload can be encoded once and posted many times.

    Only senders of this kind may be wrapped by the retry policy.
    """

    @abstractmethod
    def encode(self, message: Message) -> bytes:
        """Encode a validated message into its wire payload."""
        ...

    @abstractmethod
    async def post(self, payload: bytes) -> Response:
        """Deliver an already encoded payload in a single attempt."""
        ...

    async def send(self, message: Message) -> Response:
        return await self.post(self.encode(message))

import httpx
import structlog
from pydantic import ValidationError

from ...config import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT
from ...domain.errors import ClientError
from ...domain.message import Message
from ...domain.ports import RetryableSender, TransportType
from ...domain.response import Response
from ..error_classifier import classify_status, classify_transport_error

logger = structlog.get_logger()


class HttpSender(RetryableSender):
    """FCM legacy HTTP API sender authenticated by server key."""

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._endpoint = endpoint
        self._timeout = timeout
        self._http_client = http_client

    @property
    def transport(self) -> TransportType:
        return TransportType.HTTP

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def encode(self, message: Message) -> bytes:
        return message.to_json()

    async def post(self, payload: bytes) -> Response:
        """POST an encoded message and decode the provider response."""
        headers = {
            "Authorization": f"key={self._api_key}",
            "Content-Type": "application/json",
        }

        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    self._endpoint, headers=headers, content=payload
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self._endpoint, headers=headers, content=payload)
        except httpx.RequestError as e:
            error = classify_transport_error(e)
            logger.error("FCM request failed", endpoint=self._endpoint, error=str(error))
            raise error from e

        if response.status_code != httpx.codes.OK:
            error = classify_status(response.status_code, response.reason_phrase)
            logger.error(
                "FCM API error",
                status_code=response.status_code,
                retryable=error.retryable,
            )
            raise error

        try:
            return Response.model_validate_json(response.content)
        except ValidationError as e:
            logger.error("FCM response body could not be decoded", error=str(e))
            raise ClientError(
                f"malformed response body: {e.error_count()} error(s)",
                status_code=response.status_code,
            ) from e

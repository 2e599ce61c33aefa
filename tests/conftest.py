from collections.abc import Callable

import httpx
import pytest

from fcm_client.domain import Message, Notification


@pytest.fixture
def single_message() -> Message:
    return Message(
        registration_ids=["token-1"],
        notification=Notification(title="Hello", body="World"),
        data={"order_id": "42"},
    )


@pytest.fixture
def multicast_message() -> Message:
    return Message(
        registration_ids=["token-1", "token-2", "token-3"],
        notification=Notification(title="Hello", body="World"),
        data={"order_id": "42"},
    )


@pytest.fixture
def make_http_client() -> Callable[..., httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by handler."""

    def factory(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory

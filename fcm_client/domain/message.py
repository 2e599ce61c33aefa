"""
Outbound push message.

Field names follow the FCM legacy HTTP JSON format so a message encodes
straight onto the wire.
"""

import json
from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic_core import PydanticSerializationError

from .errors import MessageValidationError

MAX_REGISTRATION_IDS = 1000
MAX_TIME_TO_LIVE = 2419200  # four weeks, in seconds
MAX_CONDITION_OPERATORS = 2


class Notification(BaseModel):
    """User-visible notification payload."""

    title: str | None = None
    body: str | None = None
    image: str | None = None
    icon: str | None = None
    sound: str | None = None
    badge: str | None = None
    tag: str | None = None
    color: str | None = None
    click_action: str | None = None
    android_channel_id: str | None = None
    body_loc_key: str | None = None
    body_loc_args: list[str] | None = None
    title_loc_key: str | None = None
    title_loc_args: list[str] | None = None


class Message(BaseModel):
    """A push message addressed to tokens, a topic or a condition."""

    to: str | None = None
    registration_ids: list[str] = Field(default_factory=list)
    condition: str | None = None
    collapse_key: str | None = None
    priority: Literal["normal", "high"] | None = None
    content_available: bool | None = None
    mutable_content: bool | None = None
    delay_while_idle: bool | None = None
    time_to_live: int | None = Field(default=None, ge=0)
    delivery_receipt_requested: bool | None = None
    dry_run: bool | None = None
    restricted_package_name: str | None = None
    notification: Notification | None = None
    data: dict[str, Any] | None = None

    @property
    def recipient_count(self) -> int:
        return len(self.registration_ids)

    def has_target(self) -> bool:
        """Whether the message carries any usable addressing information."""
        if self.to or self.registration_ids:
            return True
        if not self.condition:
            return False
        operators = self.condition.count("&&") + self.condition.count("||")
        return operators <= MAX_CONDITION_OPERATORS

    def string_data(self) -> dict[str, str]:
        """
        Return the data payload with every value as a string.

        Strings pass through, numbers and booleans are stringified.

        Raises:
            MessageValidationError: If a value has no string form
        """
        result: dict[str, str] = {}
        for key, value in (self.data or {}).items():
            if isinstance(value, str):
                result[key] = value
            elif isinstance(value, bool):
                result[key] = "true" if value else "false"
            elif isinstance(value, (int, float)):
                result[key] = str(value)
            else:
                raise MessageValidationError(
                    f"data value for {key!r} must be a string, got {type(value).__name__}"
                )
        return result

    def to_json(self) -> bytes:
        """
        Encode the message for the HTTP API, omitting unset fields.

        Raises:
            MessageValidationError: If the data payload holds a value with no JSON form
        """
        try:
            payload = self.model_dump(mode="json", exclude_none=True)
        except PydanticSerializationError as e:
            raise MessageValidationError(f"message cannot be encoded: {e}") from e
        if not payload.get("registration_ids"):
            payload.pop("registration_ids", None)
        return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def validate(message: Message | None) -> None:
    """
    Check a message can be delivered before any encoding or network I/O.

    Raises:
        MessageValidationError: If the message is missing, has no target,
            has too many registration ids or an out-of-range time to live
    """
    if message is None:
        raise MessageValidationError("message is invalid")
    if not message.has_target():
        raise MessageValidationError("message has no valid target")
    if len(message.registration_ids) > MAX_REGISTRATION_IDS:
        raise MessageValidationError(
            f"message cannot target more than {MAX_REGISTRATION_IDS} registration ids"
        )
    if message.time_to_live is not None and message.time_to_live > MAX_TIME_TO_LIVE:
        raise MessageValidationError(f"time_to_live cannot exceed {MAX_TIME_TO_LIVE} seconds")

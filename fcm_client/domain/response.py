"""
Uniform send result.

Both transports return a Response. The direct HTTP transport decodes the
provider body straight into it; the SDK transport builds one from the
SDK's native results.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

# Error codes returned by the FCM legacy HTTP API.
ERROR_DESCRIPTIONS: dict[str, str] = {
    "MissingRegistration": "missing registration token",
    "InvalidRegistration": "invalid registration token",
    "NotRegistered": "unregistered device",
    "InvalidPackageName": "invalid package name",
    "MismatchSenderId": "mismatched sender id",
    "MessageTooBig": "message is too big",
    "InvalidDataKey": "invalid data key",
    "InvalidTtl": "invalid time to live",
    "Unavailable": "timeout",
    "InternalServerError": "internal server error",
    "DeviceMessageRateExceeded": "device message rate exceeded",
    "TopicsMessageRateExceeded": "topics message rate exceeded",
    "InvalidParameters": "invalid parameters",
    "InvalidApnsCredential": "invalid APNs credential",
}

UNREGISTERED_CODES = frozenset({
    "MissingRegistration",
    "InvalidRegistration",
    "NotRegistered",
    "MismatchSenderId",
    "NOT_FOUND",
    "SENDER_ID_MISMATCH",
})

RETRYABLE_CODES = frozenset({
    "Unavailable",
    "InternalServerError",
    "UNAVAILABLE",
    "INTERNAL",
})


class ResultError(BaseModel):
    """Structured error kind and message for a failed delivery."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str = ""

    @classmethod
    def from_code(cls, code: str) -> ResultError:
        return cls(code=code, message=ERROR_DESCRIPTIONS.get(code, code))

    @classmethod
    def from_exception(cls, exc: BaseException) -> ResultError:
        code = getattr(exc, "code", None) or type(exc).__name__
        return cls(code=str(code), message=str(exc))

    @property
    def unregistered(self) -> bool:
        """The token is no longer valid and should be dropped."""
        return self.code in UNREGISTERED_CODES

    @property
    def retryable(self) -> bool:
        return self.code in RETRYABLE_CODES


def _coerce_error(value: Any) -> Any:
    if isinstance(value, str):
        return ResultError.from_code(value) if value else None
    return value


def _coerce_message_id(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


ErrorField = Annotated[ResultError | None, BeforeValidator(_coerce_error)]
MessageID = Annotated[str | None, BeforeValidator(_coerce_message_id)]


class Result(BaseModel):
    """Outcome for one recipient of a multicast send."""

    model_config = ConfigDict(extra="ignore")

    message_id: MessageID = None
    registration_id: str | None = None
    error: ErrorField = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> Result:
        if (self.message_id is None) == (self.error is None):
            raise ValueError("result must carry exactly one of message_id or error")
        return self

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def unregistered(self) -> bool:
        return self.error is not None and self.error.unregistered


class Response(BaseModel):
    """Aggregate result of one send call."""

    model_config = ConfigDict(extra="ignore")

    multicast_id: int | None = None
    success: int = Field(default=0, ge=0)
    failure: int = Field(default=0, ge=0)
    canonical_ids: int = Field(default=0, ge=0)
    results: list[Result] = Field(default_factory=list)
    failed_registration_ids: list[str] = Field(default_factory=list)
    message_id: MessageID = None
    error: ErrorField = None

    @classmethod
    def single_success(cls, message_id: str) -> Response:
        return cls(success=1, failure=0, message_id=message_id)

    @classmethod
    def single_failure(cls, error: ResultError) -> Response:
        return cls(success=0, failure=1, error=error)

    @classmethod
    def call_failure(cls, recipients: int, error: ResultError) -> Response:
        """Every recipient failed because the call itself failed."""
        return cls(success=0, failure=recipients, error=error)

    def unregistered_tokens(self, tokens: list[str]) -> list[str]:
        """Return the sent tokens whose result says they should be dropped."""
        return [token for token, result in zip(tokens, self.results) if result.unregistered]

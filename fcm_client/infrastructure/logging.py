"""
Structured logging for the push client.

The library itself only calls structlog.get_logger(); applications that
want the JSON pipeline call configure_logging() once at startup. Device
tokens and server keys never reach a log line unmasked.
"""

import logging
import sys
import time

import structlog

# Event keys whose values are credentials or device tokens.
SENSITIVE_KEYS = frozenset({"api_key", "authorization", "token", "tokens", "registration_ids"})


def configure_logging(service_name: str, level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        service_name: Added to every event as "service"
        level: Standard logging level name, case-insensitive
        json_logs: Render JSON lines; otherwise use the console renderer
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            _service_name_adder(service_name),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def _service_name_adder(service_name: str):
    def add_service_name(logger, method_name, event_dict):
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service_name


def redact_secrets(logger, method_name, event_dict):
    """Mask credential and token values bound under a sensitive key."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, (list, tuple)):
            event_dict[key] = [sanitize_for_logging(v) for v in value]
        elif isinstance(value, str):
            event_dict[key] = sanitize_for_logging(value)
    return event_dict


class Timer:
    """
    Wall-clock timer used as a context manager.

    duration_ms can be read inside the block; it then reports the time
    elapsed so far.
    """

    def __init__(self) -> None:
        self._start_ns: int | None = None
        self._end_ns: int | None = None

    def __enter__(self) -> "Timer":
        self._start_ns = time.perf_counter_ns()
        self._end_ns = None
        return self

    def __exit__(self, *args) -> None:
        self._end_ns = time.perf_counter_ns()

    @property
    def duration_ms(self) -> float:
        if self._start_ns is None:
            return 0.0
        end = self._end_ns if self._end_ns is not None else time.perf_counter_ns()
        return round((end - self._start_ns) / 1_000_000, 2)


def sanitize_for_logging(value: str | None, visible_chars: int = 8) -> str:
    """Keep a short prefix of a token and note how long the original was."""
    if not value:
        return ""
    if len(value) <= visible_chars:
        return value
    return f"{value[:visible_chars]}...({len(value)})"

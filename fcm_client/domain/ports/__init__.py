from .sender import RetryableSender, Sender, TransportType

__all__ = [
    "RetryableSender",
    "Sender",
    "TransportType",
]

from .firebase_sender import FirebaseMessaging, FirebaseSender, MessagingHandle
from .http_sender import HttpSender
from .sender_factory import SenderFactory

__all__ = [
    "FirebaseMessaging",
    "FirebaseSender",
    "HttpSender",
    "MessagingHandle",
    "SenderFactory",
]

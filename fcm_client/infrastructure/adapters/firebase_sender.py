"""
Firebase Admin SDK sender.

Delegates delivery to firebase_admin.messaging using a credential-based
app. The SDK is blocking, so its calls run in a worker thread.
"""

import asyncio
from collections.abc import Callable
from typing import Any, Protocol
from uuid import uuid4

import firebase_admin
import structlog
from firebase_admin import credentials, messaging
from firebase_admin import exceptions as firebase_exceptions

from ...domain.errors import MessageValidationError
from ...domain.message import Message
from ...domain.ports import Sender, TransportType
from ...domain.response import Response, Result, ResultError
from ..error_classifier import classify_firebase_error
from ..logging import Timer, sanitize_for_logging

logger = structlog.get_logger()

TOPIC_PREFIX = "/topics/"
MAX_MULTICAST_TOKENS = 500  # per send_each_for_multicast call


class MessagingHandle(Protocol):
    """The subset of the messaging SDK the sender relies on."""

    def send(self, message: messaging.Message, dry_run: bool = False) -> str: ...

    def send_each_for_multicast(
        self,
        multicast_message: messaging.MulticastMessage,
        dry_run: bool = False,
    ) -> messaging.BatchResponse: ...


class FirebaseMessaging:
    """Messaging handle bound to one firebase_admin app."""

    def __init__(self, app: firebase_admin.App) -> None:
        if not app.project_id:
            raise ValueError(
                "Project ID is required to access Cloud Messaging service. "
                "Use a service account credential or set the projectId option."
            )
        self._app = app

    def send(self, message: messaging.Message, dry_run: bool = False) -> str:
        return messaging.send(message, dry_run=dry_run, app=self._app)

    def send_each_for_multicast(
        self,
        multicast_message: messaging.MulticastMessage,
        dry_run: bool = False,
    ) -> messaging.BatchResponse:
        return messaging.send_each_for_multicast(
            multicast_message, dry_run=dry_run, app=self._app
        )


class FirebaseSender(Sender):
    """
    Sender backed by the Firebase Admin SDK.

    One registration id (or a topic/condition target) is sent as a single
    message; two or more go out as multicast calls of at most
    MAX_MULTICAST_TOKENS tokens each, merged into one Response. The messaging
    handle is created on first use and cached for the sender's lifetime.
    """

    def __init__(
        self,
        app: firebase_admin.App,
        messaging_factory: Callable[[firebase_admin.App], MessagingHandle] = FirebaseMessaging,
        owns_app: bool = False,
    ) -> None:
        self._app = app
        self._messaging_factory = messaging_factory
        self._owns_app = owns_app
        self._handle: MessagingHandle | None = None
        self._handle_lock = asyncio.Lock()

    @classmethod
    def from_credentials_file(
        cls,
        path: str,
        messaging_factory: Callable[[firebase_admin.App], MessagingHandle] = FirebaseMessaging,
    ) -> "FirebaseSender":
        """
        Initialize a dedicated firebase_admin app from a service account file.

        Errors from loading the credentials or initializing the app
        propagate unchanged.
        """
        credential = credentials.Certificate(path)
        app = firebase_admin.initialize_app(credential, name=f"fcm-client-{uuid4().hex}")
        logger.info("Firebase app initialized", app_name=app.name)
        return cls(app, messaging_factory=messaging_factory, owns_app=True)

    @property
    def transport(self) -> TransportType:
        return TransportType.SDK

    async def close(self) -> None:
        if self._owns_app:
            firebase_admin.delete_app(self._app)
            self._owns_app = False

    async def messaging_handle(self) -> MessagingHandle:
        """Return the cached messaging handle, creating it once on first use."""
        if self._handle is not None:
            return self._handle
        async with self._handle_lock:
            if self._handle is None:
                self._handle = await asyncio.to_thread(self._messaging_factory, self._app)
                logger.info("Messaging handle created", app_name=self._app.name)
        return self._handle

    async def send(self, message: Message) -> Response:
        data = message.string_data()
        notification = _build_notification(message)
        android = _build_android_config(message)
        apns = _build_apns_config(message)

        # Without registration ids the message targets a token, topic or condition via `to`/`condition`.
        if message.recipient_count <= 1:
            try:
                single = messaging.Message(
                    data=data,
                    notification=notification,
                    android=android,
                    apns=apns,
                    **_single_target(message),
                )
            except ValueError as e:
                raise MessageValidationError(str(e)) from e
            return await self._send_single(single, bool(message.dry_run))

        tokens = list(message.registration_ids)
        try:
            batches = [
                messaging.MulticastMessage(
                    tokens=tokens[start:start + MAX_MULTICAST_TOKENS],
                    data=data,
                    notification=notification,
                    android=android,
                    apns=apns,
                )
                for start in range(0, len(tokens), MAX_MULTICAST_TOKENS)
            ]
        except ValueError as e:
            raise MessageValidationError(str(e)) from e
        return await self._send_multicast(batches, tokens, bool(message.dry_run))

    async def _send_single(self, fcm_message: messaging.Message, dry_run: bool) -> Response:
        handle = await self.messaging_handle()
        target = fcm_message.token or fcm_message.topic or fcm_message.condition
        try:
            with Timer() as t:
                message_id = await asyncio.to_thread(handle.send, fcm_message, dry_run)
        except firebase_exceptions.FirebaseError as e:
            error = classify_firebase_error(e)
            error.response = Response.single_failure(ResultError.from_exception(e))
            logger.error(
                "Push send failed",
                target=sanitize_for_logging(target),
                code=e.code,
                retryable=error.retryable,
            )
            raise error from e
        except ValueError as e:
            raise MessageValidationError(str(e)) from e

        logger.info(
            "Push sent",
            target=sanitize_for_logging(target),
            message_id=message_id,
            duration_ms=t.duration_ms,
        )
        return Response.single_success(message_id)

    async def _send_multicast(
        self,
        batches: list[messaging.MulticastMessage],
        tokens: list[str],
        dry_run: bool,
    ) -> Response:
        """
        Send the batches in order and merge their outcomes.

        If a call fails after earlier batches went out, the raised error's
        response keeps the delivered results and marks every remaining
        token as failed with the call error.
        """
        handle = await self.messaging_handle()
        results: list[Result] = []
        success = 0
        with Timer() as t:
            for batch in batches:
                try:
                    batch_response = await asyncio.to_thread(
                        handle.send_each_for_multicast, batch, dry_run
                    )
                except firebase_exceptions.FirebaseError as e:
                    error = classify_firebase_error(e)
                    error.response = _interrupted(results, success, len(tokens), ResultError.from_exception(e))
                    logger.error(
                        "Multicast send failed",
                        recipients=len(tokens),
                        delivered=len(results),
                        code=e.code,
                        retryable=error.retryable,
                    )
                    raise error from e
                except ValueError as e:
                    raise MessageValidationError(str(e)) from e
                results.extend(_results_of(batch_response))
                success += batch_response.success_count

        response = Response(success=success, failure=len(results) - success, results=results)
        logger.info(
            "Multicast sent",
            recipients=len(tokens),
            calls=len(batches),
            success=response.success,
            failure=response.failure,
            duration_ms=t.duration_ms,
        )
        return response


def _results_of(batch_response: messaging.BatchResponse) -> list[Result]:
    results = []
    for item in batch_response.responses:
        if item.success:
            results.append(Result(message_id=item.message_id))
        else:
            results.append(Result(error=ResultError.from_exception(item.exception)))
    return results


def _interrupted(delivered: list[Result], success: int, recipients: int, error: ResultError) -> Response:
    if not delivered:
        return Response.call_failure(recipients, error)
    undelivered = [Result(error=error) for _ in range(recipients - len(delivered))]
    return Response(
        success=success,
        failure=recipients - success,
        results=delivered + undelivered,
        error=error,
    )


def _single_target(message: Message) -> dict[str, Any]:
    if message.registration_ids:
        return {"token": message.registration_ids[0]}
    if message.to and message.to.startswith(TOPIC_PREFIX):
        return {"topic": message.to[len(TOPIC_PREFIX):]}
    if message.to:
        return {"token": message.to}
    return {"condition": message.condition}


def _build_notification(message: Message) -> messaging.Notification | None:
    if message.notification is None:
        return None
    n = message.notification
    return messaging.Notification(title=n.title, body=n.body, image=n.image)


def _build_android_config(message: Message) -> messaging.AndroidConfig | None:
    n = message.notification
    android_notification = None
    if n is not None and any((
        n.icon, n.color, n.sound, n.tag, n.click_action, n.android_channel_id,
        n.body_loc_key, n.body_loc_args, n.title_loc_key, n.title_loc_args,
    )):
        android_notification = messaging.AndroidNotification(
            icon=n.icon,
            color=n.color,
            sound=n.sound,
            tag=n.tag,
            click_action=n.click_action,
            channel_id=n.android_channel_id,
            body_loc_key=n.body_loc_key,
            body_loc_args=n.body_loc_args,
            title_loc_key=n.title_loc_key,
            title_loc_args=n.title_loc_args,
        )

    options = {
        "collapse_key": message.collapse_key,
        "priority": message.priority,
        "ttl": message.time_to_live,
        "restricted_package_name": message.restricted_package_name,
    }
    if android_notification is None and all(v is None for v in options.values()):
        return None
    return messaging.AndroidConfig(notification=android_notification, **options)


def _build_apns_config(message: Message) -> messaging.APNSConfig | None:
    n = message.notification
    badge = int(n.badge) if n is not None and n.badge and n.badge.isdigit() else None
    sound = n.sound if n is not None else None
    if badge is None and sound is None and not message.content_available and not message.mutable_content:
        return None
    aps = messaging.Aps(
        badge=badge,
        sound=sound,
        content_available=message.content_available or None,
        mutable_content=message.mutable_content or None,
    )
    return messaging.APNSConfig(payload=messaging.APNSPayload(aps=aps))

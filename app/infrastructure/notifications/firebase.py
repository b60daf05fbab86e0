"""Firebase Cloud Messaging transport for push batches."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import lru_cache, partial

import anyio
import firebase_admin
from firebase_admin import credentials, exceptions, messaging

from app.config import get_settings
from app.domain.entities import ComposedMessage, DeliveryOutcome

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "howler-relay"
_TOKEN_URI = "https://oauth2.googleapis.com/token"

# Most specific classes first: UnregisteredError is a NotFoundError.
_ERROR_CODES: tuple[tuple[type[Exception], str], ...] = (
    (messaging.UnregisteredError, "messaging/registration-token-not-registered"),
    (messaging.SenderIdMismatchError, "messaging/mismatched-credential"),
    (messaging.QuotaExceededError, "messaging/message-rate-exceeded"),
    (messaging.ThirdPartyAuthError, "messaging/third-party-auth-error"),
    (exceptions.InvalidArgumentError, "messaging/invalid-argument"),
    (exceptions.NotFoundError, "messaging/invalid-recipient"),
    (exceptions.UnavailableError, "messaging/server-unavailable"),
    (exceptions.InternalError, "messaging/internal-error"),
)


@lru_cache
def get_firebase_app() -> firebase_admin.App:
    """Initialize the Firebase app from the service account settings."""

    settings = get_settings()
    if not settings.firebase_configured:
        msg = "Firebase service account is not configured"
        raise RuntimeError(msg)
    certificate = credentials.Certificate(
        {
            "type": "service_account",
            "project_id": settings.firebase_project_id,
            "client_email": settings.firebase_client_email,
            "private_key": (settings.firebase_private_key or "").replace("\\n", "\n"),
            "token_uri": _TOKEN_URI,
        }
    )
    return firebase_admin.initialize_app(certificate, name=FIREBASE_APP_NAME)


def shutdown_firebase_app() -> None:
    """Delete the Firebase app if it was ever initialized."""

    if get_firebase_app.cache_info().currsize == 0:
        return
    firebase_admin.delete_app(get_firebase_app())
    get_firebase_app.cache_clear()


def error_code_for(exc: Exception | None) -> str | None:
    """Translate a per-message exception into a ``messaging/*`` error code."""

    if exc is None:
        return None
    for error_type, code in _ERROR_CODES:
        if isinstance(exc, error_type):
            return code
    if isinstance(exc, exceptions.FirebaseError) and exc.code:
        return "messaging/" + str(exc.code).lower().replace("_", "-")
    return None


def build_fcm_message(message: ComposedMessage, *, icon: str | None = None) -> messaging.Message:
    """Convert ``message`` into the SDK representation.

    Only ``notification`` is rendered the same way on every platform; the
    platform blocks add the link, the icon and the collapse hints.
    """

    android = None
    apns = None
    if message.collapse_key:
        android = messaging.AndroidConfig(
            collapse_key=message.collapse_key,
            notification=messaging.AndroidNotification(tag=message.collapse_key),
        )
        apns = messaging.APNSConfig(
            headers={"apns-collapse-id": message.collapse_key},
            payload=messaging.APNSPayload(
                aps=messaging.Aps(thread_id=message.collapse_key)
            ),
        )

    return messaging.Message(
        token=message.token,
        notification=messaging.Notification(
            title=message.title,
            body=message.body,
            image=message.image_url,
        ),
        data={"s": message.payload},
        webpush=messaging.WebpushConfig(
            notification=messaging.WebpushNotification(
                icon=icon,
                tag=message.collapse_key,
                renotify=True if message.collapse_key else None,
            ),
            fcm_options=messaging.WebpushFCMOptions(link=message.link_url),
        ),
        android=android,
        apns=apns,
    )


class FirebaseDeliveryGateway:
    """Send a batch of composed messages with ``messaging.send_each``."""

    def __init__(self, app: firebase_admin.App | None = None, *, icon: str | None = None) -> None:
        self._app = app
        self._icon = icon if icon is not None else get_settings().push_icon_path

    @property
    def app(self) -> firebase_admin.App:
        if self._app is None:
            self._app = get_firebase_app()
        return self._app

    async def send_batch(
        self, messages: Sequence[ComposedMessage]
    ) -> list[DeliveryOutcome]:
        """Send ``messages`` in one call and return one outcome per message, in order.

        Exceptions raised by the call itself (authentication, network) are
        propagated; per-message failures become unsuccessful outcomes.
        """

        if not messages:
            return []

        fcm_messages = [build_fcm_message(message, icon=self._icon) for message in messages]
        batch = await anyio.to_thread.run_sync(
            partial(messaging.send_each, fcm_messages, app=self.app)
        )
        responses = list(batch.responses)
        if len(responses) != len(messages):
            logger.error(
                "Firebase returned %d responses for %d messages",
                len(responses),
                len(messages),
            )

        outcomes: list[DeliveryOutcome] = []
        for message, response in zip(messages, responses):
            outcomes.append(
                DeliveryOutcome(
                    success=response.success,
                    error_code=error_code_for(response.exception),
                    token=message.token,
                )
            )
        logger.debug(
            "Firebase batch finished: %d sent, %d failed",
            batch.success_count,
            batch.failure_count,
        )
        return outcomes


__all__ = [
    "FirebaseDeliveryGateway",
    "build_fcm_message",
    "error_code_for",
    "get_firebase_app",
    "shutdown_firebase_app",
]

"""Build one push message per destination device."""

from __future__ import annotations

from app.config import get_settings
from app.domain.entities import ChatMessage, ComposedMessage, NotificationMessage, PushEvent
from app.utils import hashid_from_id

from .payload import dumps_push_event

DEFAULT_CHAT_TITLE = "New message"


def event_links(event_id: int) -> tuple[str, str]:
    """Return the absolute and the in-app link to ``event_id``."""

    relative_link_url = f"/event/{hashid_from_id(event_id)}"
    base_url = get_settings().link_base_url.rstrip("/")
    return f"{base_url}{relative_link_url}", relative_link_url


def chat_collapse_key(event_id: int) -> str:
    """Key grouping pending chat notifications of the same event on a device."""

    return f"chat-{event_id}"


def compose_message(event: PushEvent, token: str) -> ComposedMessage:
    """Return the push message delivering ``event`` to ``token``."""

    payload = dumps_push_event(event)
    if isinstance(event, NotificationMessage):
        return ComposedMessage(
            token=token,
            title=event.title,
            body=event.body,
            link_url=event.link_url,
            relative_link_url=event.relative_link_url,
            payload=payload,
            image_url=event.image_url,
        )
    if isinstance(event, ChatMessage):
        link_url, relative_link_url = event_links(event.event_id)
        return ComposedMessage(
            token=token,
            title=event.title or DEFAULT_CHAT_TITLE,
            body=event.text,
            link_url=link_url,
            relative_link_url=relative_link_url,
            payload=payload,
            collapse_key=chat_collapse_key(event.event_id),
        )
    raise TypeError(f"Unsupported push event: {type(event).__name__}")


__all__ = ["DEFAULT_CHAT_TITLE", "chat_collapse_key", "compose_message", "event_links"]

"""Value objects flowing through a push delivery pass."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal, Union


@dataclass(frozen=True)
class NotificationMessage:
    """Generic notification with display fields chosen by the sender."""

    id: int
    title: str
    body: str
    link_url: str
    relative_link_url: str
    image_url: str | None = None
    created_at: datetime | None = None
    type: Literal["notification"] = "notification"


@dataclass(frozen=True)
class ChatMessage:
    """Message posted to the chat of an event."""

    id: int
    created_at: datetime
    text: str
    event_id: int
    user_id: int
    title: str | None = None
    type: Literal["chat"] = "chat"


PushEvent = Union[NotificationMessage, ChatMessage]


@dataclass(frozen=True)
class ComposedMessage:
    """One push message addressed to a single device token."""

    token: str
    title: str
    body: str
    link_url: str
    relative_link_url: str
    payload: str
    image_url: str | None = None
    collapse_key: str | None = None


@dataclass(frozen=True)
class DeliveryOutcome:
    """Transport result for the message at the same position in the batch."""

    success: bool
    error_code: str | None = None
    token: str | None = None


class OutcomeClass(str, Enum):
    """How a failed delivery should be handled."""

    IGNORABLE = "ignorable"
    PAYLOAD_DEFECT = "payload_defect"
    STALE_TOKEN = "stale_token"


@dataclass
class DeliveryReport:
    """Summary of one delivery pass, meant for logs."""

    sent: int = 0
    delivered: int = 0
    stale_tokens: int = 0
    deleted_tokens: int = 0
    recorded: int = 0
    unrecognized_codes: Counter[str] = field(default_factory=Counter)


__all__ = [
    "NotificationMessage",
    "ChatMessage",
    "PushEvent",
    "ComposedMessage",
    "DeliveryOutcome",
    "OutcomeClass",
    "DeliveryReport",
]

"""Domain entities exposed by the application."""

from .device_token import DeviceToken
from .event import Event
from .notification import NotificationRecord
from .push import (
    ChatMessage,
    ComposedMessage,
    DeliveryOutcome,
    DeliveryReport,
    NotificationMessage,
    OutcomeClass,
    PushEvent,
)

__all__ = [
    "DeviceToken",
    "Event",
    "NotificationRecord",
    "ChatMessage",
    "ComposedMessage",
    "DeliveryOutcome",
    "DeliveryReport",
    "NotificationMessage",
    "OutcomeClass",
    "PushEvent",
]

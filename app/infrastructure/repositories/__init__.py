"""Repository implementations for infrastructure layer."""

from .event_repository import EventRepository
from .fcm_token_repository import FcmTokenRepository
from .notification_repository import NotificationRepository
from .user_repository import UserRepository

__all__ = [
    "EventRepository",
    "FcmTokenRepository",
    "NotificationRepository",
    "UserRepository",
]

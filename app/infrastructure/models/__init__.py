"""ORM models used by the application infrastructure."""

from .event import EventChatMessageModel, EventModel, user_event_pivot_table
from .fcm_token import FcmTokenModel
from .notification import NotificationModel, NotificationRecordModel
from .user import UserModel, user_user_pivot_table

__all__ = [
    "EventModel",
    "EventChatMessageModel",
    "user_event_pivot_table",
    "FcmTokenModel",
    "NotificationModel",
    "NotificationRecordModel",
    "UserModel",
    "user_user_pivot_table",
]

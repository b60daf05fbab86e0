"""Domain entity representing a delivered notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class NotificationRecord:
    """History entry stored for a user after a successful push delivery.

    ``data`` is the serialized push payload exactly as the device received it.
    """

    id: int | None
    user_id: int
    data: str
    created_at: datetime | None = None


__all__ = ["NotificationRecord"]

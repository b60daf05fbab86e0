"""Domain entity describing a user created event."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Event:
    """An event (a "howl") together with the name of its creator."""

    id: int
    creator_id: int
    what: str
    creator_name: str | None = None
    created_at: datetime | None = None


__all__ = ["Event"]

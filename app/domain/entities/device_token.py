"""Domain entity representing a registered push device."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DeviceToken:
    """Push address of one installed client, owned by a single user."""

    id: str
    user_id: int


__all__ = ["DeviceToken"]

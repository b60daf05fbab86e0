"""Collaborators a delivery pass depends on."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from app.domain.entities import (
    ChatMessage,
    ComposedMessage,
    DeliveryOutcome,
    DeviceToken,
    Event,
    NotificationMessage,
    NotificationRecord,
)


class PushDatastore(Protocol):
    """Datastore operations used by the push fan-out."""

    async def get_event(self, event_id: int) -> Event | None: ...

    async def select_follower_ids(self, user_id: int) -> Sequence[int]: ...

    async def select_participant_ids(self, event_id: int) -> Sequence[int]: ...

    async def select_device_tokens_for_users(
        self, user_ids: Sequence[int]
    ) -> Sequence[DeviceToken]: ...

    async def delete_device_token(self, token_id: str) -> int: ...

    async def insert_notification_records(
        self, records: Sequence[NotificationRecord]
    ) -> int: ...

    async def create_chat_message(
        self, *, event_id: int, user_id: int, text: str
    ) -> ChatMessage: ...

    async def create_notification(
        self,
        *,
        title: str,
        body: str,
        link_url: str,
        relative_link_url: str,
        image_url: str | None = None,
    ) -> NotificationMessage: ...


class DeliveryGateway(Protocol):
    """Push transport sending a whole batch in one call."""

    async def send_batch(
        self, messages: Sequence[ComposedMessage]
    ) -> Sequence[DeliveryOutcome]: ...


__all__ = ["PushDatastore", "DeliveryGateway"]

"""Persist the delivery history of a push pass."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from app.domain.entities import ComposedMessage, DeliveryOutcome, NotificationRecord
from app.utils import now_in_app_timezone

from .ports import PushDatastore

logger = logging.getLogger(__name__)


def select_deliveries(
    messages: Sequence[ComposedMessage],
    outcomes: Sequence[DeliveryOutcome],
    recipient_of: Callable[[ComposedMessage], int],
) -> list[tuple[int, ComposedMessage]]:
    """Return ``(user_id, message)`` for the first delivered message of each user."""

    seen: set[int] = set()
    selected: list[tuple[int, ComposedMessage]] = []
    for message, outcome in zip(messages, outcomes):
        if not outcome.success:
            continue
        user_id = recipient_of(message)
        if user_id in seen:
            continue
        seen.add(user_id)
        selected.append((user_id, message))
    return selected


async def record_deliveries(
    datastore: PushDatastore,
    messages: Sequence[ComposedMessage],
    outcomes: Sequence[DeliveryOutcome],
    recipient_of: Callable[[ComposedMessage], int],
) -> int:
    """Store one notification record per user that received the pass.

    Nothing is written when no message was delivered. A failing insert is
    raised as is.
    """

    selected = select_deliveries(messages, outcomes, recipient_of)
    if not selected:
        return 0

    created_at = now_in_app_timezone()
    records = [
        NotificationRecord(id=None, user_id=user_id, data=message.payload, created_at=created_at)
        for user_id, message in selected
    ]
    inserted = await datastore.insert_notification_records(records)
    logger.info("Recorded %d delivered notifications", inserted)
    return inserted


__all__ = ["record_deliveries", "select_deliveries"]

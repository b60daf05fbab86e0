"""Resolve who should be notified about an event and on which devices."""

from __future__ import annotations

from collections.abc import Iterable

from app.domain.entities import DeviceToken, Event

from .ports import PushDatastore


async def resolve_event_followers(datastore: PushDatastore, event: Event) -> set[int]:
    """Return the followers of the creator of ``event``."""

    follower_ids = await datastore.select_follower_ids(event.creator_id)
    return {follower_id for follower_id in follower_ids if follower_id}


async def resolve_chat_participants(
    datastore: PushDatastore, *, event_id: int, author_id: int
) -> set[int]:
    """Return the chat participants of ``event_id`` except the message author."""

    participant_ids = await datastore.select_participant_ids(event_id)
    return {
        participant_id
        for participant_id in participant_ids
        if participant_id and participant_id != author_id
    }


async def resolve_tokens(
    datastore: PushDatastore, user_ids: Iterable[int]
) -> list[DeviceToken]:
    """Return every device token owned by ``user_ids``."""

    ids = sorted(set(user_ids))
    if not ids:
        return []
    return list(await datastore.select_device_tokens_for_users(ids))


__all__ = ["resolve_chat_participants", "resolve_event_followers", "resolve_tokens"]

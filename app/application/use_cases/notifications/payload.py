"""Serialization of push events embedded in every push message.

Display fields of a push message are a lossy projection. Clients rebuild the
original event from the ``s`` data field, so the encoding has to carry the
variant tag and restore timestamps as timestamps.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, TypeAdapter

from app.domain.entities import PushEvent

_push_event_adapter: TypeAdapter[PushEvent] = TypeAdapter(
    Annotated[PushEvent, Field(discriminator="type")]
)


def dumps_push_event(event: PushEvent) -> str:
    """Return the JSON document describing ``event``."""

    return _push_event_adapter.dump_json(event).decode("utf-8")


def loads_push_event(payload: str | bytes) -> PushEvent:
    """Rebuild the event serialized by :func:`dumps_push_event`."""

    return _push_event_adapter.validate_json(payload)


__all__ = ["dumps_push_event", "loads_push_event"]

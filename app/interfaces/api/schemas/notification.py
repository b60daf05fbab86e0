"""Pydantic models describing requests that trigger push deliveries."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ChatMessageCreate(BaseModel):
    """Chat message posted by ``userId`` to the chat of ``eventId``."""

    model_config = ConfigDict(populate_by_name=True)

    event_id: int = Field(..., alias="eventId", description="Event whose chat receives the message")
    user_id: int = Field(..., alias="userId", description="Author of the message")
    text: str = Field(..., description="Message text")


class EventCreatedNotify(BaseModel):
    """Request to notify the followers of an event creator."""

    model_config = ConfigDict(populate_by_name=True)

    event_id: int = Field(..., alias="eventId", description="Newly created event")


__all__ = ["ChatMessageCreate", "EventCreatedNotify"]

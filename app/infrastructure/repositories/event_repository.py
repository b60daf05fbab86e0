"""Persistence helpers for events and their chat."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.entities import ChatMessage, Event
from app.infrastructure.models import (
    EventChatMessageModel,
    EventModel,
    user_event_pivot_table,
)
from app.utils import ensure_app_timezone


class EventRepository:
    """Read events and write messages to their chat."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, event_id: int) -> Event | None:
        model = self.session.get(EventModel, event_id)
        return self._to_entity(model) if model else None

    def list_participant_ids(self, event_id: int) -> Sequence[int]:
        """Return the users taking part in the chat of ``event_id``."""

        statement = (
            select(user_event_pivot_table.c.user_id)
            .where(user_event_pivot_table.c.event_id == event_id)
            .order_by(user_event_pivot_table.c.user_id)
        )
        return list(self.session.scalars(statement))

    def create_chat_message(self, *, event_id: int, user_id: int, text: str) -> ChatMessage:
        model = EventChatMessageModel(event_id=event_id, user_id=user_id, text=text)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return ChatMessage(
            id=model.id,
            created_at=ensure_app_timezone(model.created_at),
            text=model.text,
            event_id=model.event_id,
            user_id=model.user_id,
        )

    @staticmethod
    def _to_entity(model: EventModel) -> Event:
        return Event(
            id=model.id,
            creator_id=model.creator_id,
            what=model.what,
            creator_name=model.creator.name if model.creator else None,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["EventRepository"]

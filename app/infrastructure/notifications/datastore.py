"""Async datastore facade used by the push fan-out."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from functools import partial
from typing import TypeVar

import anyio
from sqlalchemy.orm import Session, sessionmaker

from app.domain.entities import (
    ChatMessage,
    DeviceToken,
    Event,
    NotificationMessage,
    NotificationRecord,
)
from app.infrastructure.repositories import (
    EventRepository,
    FcmTokenRepository,
    NotificationRepository,
    UserRepository,
)

T = TypeVar("T")


class SqlPushDatastore:
    """Run repository calls in worker threads, one short-lived session per call.

    Separate sessions let token deletions of the same pass run concurrently.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    async def _run(self, operation: Callable[[Session], T]) -> T:
        return await anyio.to_thread.run_sync(partial(self._call, operation))

    def _call(self, operation: Callable[[Session], T]) -> T:
        with self._session_factory() as session:
            try:
                return operation(session)
            except Exception:
                session.rollback()
                raise

    async def get_event(self, event_id: int) -> Event | None:
        return await self._run(lambda session: EventRepository(session).get(event_id))

    async def select_follower_ids(self, user_id: int) -> Sequence[int]:
        return await self._run(
            lambda session: UserRepository(session).list_follower_ids(user_id)
        )

    async def select_participant_ids(self, event_id: int) -> Sequence[int]:
        return await self._run(
            lambda session: EventRepository(session).list_participant_ids(event_id)
        )

    async def select_device_tokens_for_users(
        self, user_ids: Sequence[int]
    ) -> Sequence[DeviceToken]:
        return await self._run(
            lambda session: FcmTokenRepository(session).list_for_users(user_ids)
        )

    async def delete_device_token(self, token_id: str) -> int:
        return await self._run(lambda session: FcmTokenRepository(session).delete(token_id))

    async def insert_notification_records(
        self, records: Sequence[NotificationRecord]
    ) -> int:
        return await self._run(
            lambda session: NotificationRepository(session).insert_records(records)
        )

    async def create_chat_message(
        self, *, event_id: int, user_id: int, text: str
    ) -> ChatMessage:
        return await self._run(
            lambda session: EventRepository(session).create_chat_message(
                event_id=event_id, user_id=user_id, text=text
            )
        )

    async def create_notification(
        self,
        *,
        title: str,
        body: str,
        link_url: str,
        relative_link_url: str,
        image_url: str | None = None,
    ) -> NotificationMessage:
        return await self._run(
            lambda session: NotificationRepository(session).create(
                title=title,
                body=body,
                link_url=link_url,
                relative_link_url=relative_link_url,
                image_url=image_url,
            )
        )


__all__ = ["SqlPushDatastore"]

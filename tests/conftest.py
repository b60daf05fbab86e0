"""Shared fixtures: test settings and in-memory push collaborators."""

from __future__ import annotations

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

TEST_DB_PATH = Path(tempfile.gettempdir()) / "howler_relay_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["AUTH_SECRET"] = "test-secret"
os.environ["LINK_BASE_URL"] = "https://howler.test"
os.environ["HASHID_SALT"] = "test-salt"
os.environ["APP_TIMEZONE"] = "UTC"

from app.config import get_settings  # noqa: E402

get_settings.cache_clear()

from app.domain.entities import (  # noqa: E402
    ChatMessage,
    DeliveryOutcome,
    DeviceToken,
    Event,
    NotificationMessage,
    NotificationRecord,
)

FIXED_NOW = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


class InMemoryPushDatastore:
    """Datastore double keeping everything in dictionaries."""

    def __init__(self) -> None:
        self.events: dict[int, Event] = {}
        self.followers: dict[int, list[int]] = {}
        self.participants: dict[int, list[int]] = {}
        self.tokens: dict[str, int] = {}
        self.records: list[NotificationRecord] = []
        self.chat_messages: list[ChatMessage] = []
        self.notifications: list[NotificationMessage] = []
        self.delete_calls: list[str] = []
        self.insert_calls = 0
        self.failing_deletes: set[str] = set()
        self.fail_insert = False

    def add_token(self, token_id: str, user_id: int) -> None:
        self.tokens[token_id] = user_id

    async def get_event(self, event_id: int) -> Event | None:
        return self.events.get(event_id)

    async def select_follower_ids(self, user_id: int) -> list[int]:
        return list(self.followers.get(user_id, []))

    async def select_participant_ids(self, event_id: int) -> list[int]:
        return list(self.participants.get(event_id, []))

    async def select_device_tokens_for_users(self, user_ids) -> list[DeviceToken]:
        wanted = set(user_ids)
        return [
            DeviceToken(id=token_id, user_id=user_id)
            for token_id, user_id in self.tokens.items()
            if user_id in wanted
        ]

    async def delete_device_token(self, token_id: str) -> int:
        self.delete_calls.append(token_id)
        if token_id in self.failing_deletes:
            raise RuntimeError(f"cannot delete {token_id}")
        return 1 if self.tokens.pop(token_id, None) is not None else 0

    async def insert_notification_records(self, records) -> int:
        self.insert_calls += 1
        if self.fail_insert:
            raise RuntimeError("insert failed")
        self.records.extend(records)
        return len(records)

    async def create_chat_message(self, *, event_id: int, user_id: int, text: str) -> ChatMessage:
        message = ChatMessage(
            id=len(self.chat_messages) + 1,
            created_at=FIXED_NOW,
            text=text,
            event_id=event_id,
            user_id=user_id,
        )
        self.chat_messages.append(message)
        return message

    async def create_notification(
        self,
        *,
        title: str,
        body: str,
        link_url: str,
        relative_link_url: str,
        image_url: str | None = None,
    ) -> NotificationMessage:
        notification = NotificationMessage(
            id=len(self.notifications) + 1,
            title=title,
            body=body,
            link_url=link_url,
            relative_link_url=relative_link_url,
            image_url=image_url,
            created_at=FIXED_NOW,
        )
        self.notifications.append(notification)
        return notification


class ScriptedGateway:
    """Gateway double: every token succeeds unless listed in ``failures``."""

    def __init__(self) -> None:
        self.failures: dict[str, str | None] = {}
        self.batches: list[list] = []
        self.error: Exception | None = None
        self.reverse_outcomes = False
        self.drop_last = False
        self.omit_tokens = False

    async def send_batch(self, messages) -> list[DeliveryOutcome]:
        self.batches.append(list(messages))
        if self.error is not None:
            raise self.error
        outcomes = [
            DeliveryOutcome(
                success=message.token not in self.failures,
                error_code=self.failures.get(message.token),
                token=None if self.omit_tokens else message.token,
            )
            for message in messages
        ]
        if self.reverse_outcomes:
            outcomes.reverse()
        if self.drop_last:
            outcomes = outcomes[:-1]
        return outcomes


@pytest.fixture()
def datastore() -> InMemoryPushDatastore:
    return InMemoryPushDatastore()


@pytest.fixture()
def gateway() -> ScriptedGateway:
    return ScriptedGateway()

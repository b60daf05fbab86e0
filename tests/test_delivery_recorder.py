"""Tests for the notification history written after a delivery."""

from __future__ import annotations

from functools import partial

import anyio
import pytest

from app.application.use_cases.notifications import record_deliveries
from app.domain.entities import ComposedMessage, DeliveryOutcome

OWNERS = {"t1": 1, "t2": 1, "t3": 1, "u2": 2}


def _message(token: str, payload: str) -> ComposedMessage:
    return ComposedMessage(
        token=token,
        title="title",
        body="body",
        link_url="https://howler.test/event/x",
        relative_link_url="/event/x",
        payload=payload,
    )


def _owner(message: ComposedMessage) -> int:
    return OWNERS[message.token]


def _record(datastore, messages, outcomes) -> int:
    return anyio.run(partial(record_deliveries, datastore, messages, outcomes, _owner))


def test_first_successful_message_per_user_is_recorded(datastore) -> None:
    messages = [
        _message("t1", "failed"),
        _message("t2", "first-success"),
        _message("t3", "second-success"),
    ]
    outcomes = [
        DeliveryOutcome(success=False, error_code="messaging/internal-error"),
        DeliveryOutcome(success=True),
        DeliveryOutcome(success=True),
    ]

    inserted = _record(datastore, messages, outcomes)

    assert inserted == 1
    assert datastore.insert_calls == 1
    assert [(record.user_id, record.data) for record in datastore.records] == [
        (1, "first-success")
    ]


def test_records_follow_input_order_across_users(datastore) -> None:
    messages = [_message("u2", "for-two"), _message("t1", "for-one")]
    outcomes = [DeliveryOutcome(success=True), DeliveryOutcome(success=True)]

    _record(datastore, messages, outcomes)

    assert [record.user_id for record in datastore.records] == [2, 1]
    assert all(record.id is None for record in datastore.records)
    assert all(record.created_at is not None for record in datastore.records)


def test_no_insert_when_nothing_was_delivered(datastore) -> None:
    messages = [_message("t1", "a"), _message("u2", "b")]
    outcomes = [
        DeliveryOutcome(success=False, error_code="messaging/invalid-recipient"),
        DeliveryOutcome(success=False),
    ]

    assert _record(datastore, messages, outcomes) == 0
    assert datastore.insert_calls == 0


def test_no_insert_for_empty_batch(datastore) -> None:
    assert _record(datastore, [], []) == 0
    assert datastore.insert_calls == 0


def test_insert_failure_is_raised(datastore) -> None:
    datastore.fail_insert = True

    with pytest.raises(RuntimeError, match="insert failed"):
        _record(datastore, [_message("t1", "a")], [DeliveryOutcome(success=True)])

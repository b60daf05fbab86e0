"""Push fan-out: one domain event delivered to every recipient device."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import AsyncIterator, Iterable, Sequence
from contextlib import asynccontextmanager

import anyio

from app.domain.entities import (
    ChatMessage,
    ComposedMessage,
    DeliveryOutcome,
    DeliveryReport,
    OutcomeClass,
    PushEvent,
)

from .classify import classify_outcomes
from .compose import compose_message, event_links
from .ports import DeliveryGateway, PushDatastore
from .reconcile import reconcile_stale_tokens
from .recipients import resolve_chat_participants, resolve_event_followers, resolve_tokens
from .record import record_deliveries

logger = logging.getLogger(__name__)


class DeliveryContractError(RuntimeError):
    """The gateway returned outcomes that cannot be matched to the batch sent."""


class DeliveryPassTracker:
    """Count in-flight delivery passes so shutdown can wait for them."""

    def __init__(self) -> None:
        self._in_flight = 0
        self._idle: anyio.Event | None = None

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @asynccontextmanager
    async def track(self) -> AsyncIterator[None]:
        if self._in_flight == 0:
            self._idle = anyio.Event()
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1
            if self._in_flight == 0 and self._idle is not None:
                self._idle.set()

    async def drain(self) -> None:
        """Return once no delivery pass is running."""

        if self._in_flight and self._idle is not None:
            await self._idle.wait()


delivery_pass_tracker = DeliveryPassTracker()


def ensure_aligned(
    messages: Sequence[ComposedMessage], outcomes: Sequence[DeliveryOutcome]
) -> None:
    """Raise :class:`DeliveryContractError` unless ``outcomes[i]`` belongs to ``messages[i]``.

    Gateways must echo the token of each message in its outcome; an outcome
    without a token cannot be tied back and is rejected.
    """

    if len(outcomes) != len(messages):
        raise DeliveryContractError(
            f"Gateway returned {len(outcomes)} outcomes for {len(messages)} messages"
        )
    for index, (message, outcome) in enumerate(zip(messages, outcomes)):
        if outcome.token is None:
            raise DeliveryContractError(f"Outcome {index} does not name its token")
        if outcome.token != message.token:
            raise DeliveryContractError(
                f"Outcome {index} does not belong to the message sent at that position"
            )


class PushDeliveryService:
    """Run delivery passes against injected datastore and transport."""

    def __init__(
        self,
        datastore: PushDatastore,
        gateway: DeliveryGateway,
        *,
        tracker: DeliveryPassTracker | None = None,
    ) -> None:
        self._datastore = datastore
        self._gateway = gateway
        self._tracker = tracker or delivery_pass_tracker

    async def notify_event_created(self, event_id: int) -> DeliveryReport:
        """Tell the followers of the event creator that ``event_id`` exists."""

        event = await self._datastore.get_event(event_id)
        if event is None:
            raise LookupError(f"Event {event_id} not found")

        recipients = await resolve_event_followers(self._datastore, event)
        if not recipients:
            logger.info("Event %s has no followers to notify", event_id)
            return DeliveryReport()

        link_url, relative_link_url = event_links(event.id)
        notification = await self._datastore.create_notification(
            title=f"howl by {event.creator_name or 'someone'}",
            body=f"what: {event.what}",
            link_url=link_url,
            relative_link_url=relative_link_url,
        )
        return await self.deliver(notification, recipients)

    async def send_chat_message(
        self, *, event_id: int, user_id: int, text: str
    ) -> DeliveryReport:
        """Store a chat message and push it to the other participants."""

        event = await self._datastore.get_event(event_id)
        if event is None:
            raise LookupError(f"Event {event_id} not found")

        saved = await self._datastore.create_chat_message(
            event_id=event_id, user_id=user_id, text=text
        )
        message: ChatMessage = dataclasses.replace(saved, title=event.what)
        recipients = await resolve_chat_participants(
            self._datastore, event_id=event_id, author_id=user_id
        )
        return await self.deliver(message, recipients)

    async def deliver(self, event: PushEvent, recipients: Iterable[int]) -> DeliveryReport:
        """Run one delivery pass of ``event`` to the devices of ``recipients``."""

        async with self._tracker.track():
            return await self._run_pass(event, recipients)

    async def _run_pass(self, event: PushEvent, recipients: Iterable[int]) -> DeliveryReport:
        report = DeliveryReport()
        tokens = await resolve_tokens(self._datastore, recipients)
        if not tokens:
            logger.info("No device tokens for %s %s", event.type, event.id)
            return report

        messages = [compose_message(event, token.id) for token in tokens]
        owners = {token.id: token.user_id for token in tokens}

        outcomes = list(await self._gateway.send_batch(messages))
        ensure_aligned(messages, outcomes)
        report.sent = len(messages)
        report.delivered = sum(1 for outcome in outcomes if outcome.success)

        classes, report.unrecognized_codes = classify_outcomes(outcomes)
        report.stale_tokens = sum(
            1 for outcome_class in classes if outcome_class is OutcomeClass.STALE_TOKEN
        )

        record_error: Exception | None = None

        async def _reconcile() -> None:
            report.deleted_tokens = await reconcile_stale_tokens(
                self._datastore, tokens, classes
            )

        async def _record() -> None:
            nonlocal record_error
            try:
                report.recorded = await record_deliveries(
                    self._datastore,
                    messages,
                    outcomes,
                    lambda message: owners[message.token],
                )
            except Exception as exc:
                logger.exception("Could not record delivered notifications")
                record_error = exc

        async with anyio.create_task_group() as task_group:
            task_group.start_soon(_reconcile)
            task_group.start_soon(_record)

        logger.info(
            "Delivered %s %s to %d of %d devices (stale: %d, deleted: %d, recorded: %d)",
            event.type,
            event.id,
            report.delivered,
            report.sent,
            report.stale_tokens,
            report.deleted_tokens,
            report.recorded,
        )
        if record_error is not None:
            raise record_error
        return report


__all__ = [
    "DeliveryContractError",
    "DeliveryPassTracker",
    "PushDeliveryService",
    "delivery_pass_tracker",
    "ensure_aligned",
]

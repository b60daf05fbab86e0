"""Push notification fan-out and delivery reconciliation."""

from .classify import classify_outcome, classify_outcomes
from .compose import compose_message, event_links
from .delivery import (
    DeliveryContractError,
    DeliveryPassTracker,
    PushDeliveryService,
    delivery_pass_tracker,
    ensure_aligned,
)
from .payload import dumps_push_event, loads_push_event
from .ports import DeliveryGateway, PushDatastore
from .reconcile import reconcile_stale_tokens
from .recipients import resolve_chat_participants, resolve_event_followers, resolve_tokens
from .record import record_deliveries

__all__ = [
    "classify_outcome",
    "classify_outcomes",
    "compose_message",
    "event_links",
    "DeliveryContractError",
    "DeliveryPassTracker",
    "PushDeliveryService",
    "delivery_pass_tracker",
    "ensure_aligned",
    "dumps_push_event",
    "loads_push_event",
    "DeliveryGateway",
    "PushDatastore",
    "reconcile_stale_tokens",
    "resolve_chat_participants",
    "resolve_event_followers",
    "resolve_tokens",
    "record_deliveries",
]

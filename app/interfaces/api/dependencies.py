"""FastAPI dependency utilities."""

import secrets

from fastapi import Depends

from app.application.use_cases.notifications import (
    DeliveryGateway,
    PushDatastore,
    PushDeliveryService,
    delivery_pass_tracker,
)
from app.config import get_settings
from app.infrastructure.database import SessionLocal
from app.infrastructure.notifications import FirebaseDeliveryGateway, SqlPushDatastore


def shared_secret_matches(authorization: str | None) -> bool:
    """Return whether ``authorization`` equals the configured secret."""

    if authorization is None:
        return False
    expected = get_settings().auth_secret
    return secrets.compare_digest(authorization.encode(), expected.encode())


def get_push_datastore() -> PushDatastore:
    """Return the datastore adapter bound to the application session factory."""

    return SqlPushDatastore(SessionLocal)


def get_delivery_gateway() -> DeliveryGateway:
    """Return the Firebase gateway. The SDK app is initialized on first send."""

    return FirebaseDeliveryGateway()


def get_push_delivery_service(
    datastore: PushDatastore = Depends(get_push_datastore),
    gateway: DeliveryGateway = Depends(get_delivery_gateway),
) -> PushDeliveryService:
    """Return a :class:`PushDeliveryService` wired to the process-wide tracker."""

    return PushDeliveryService(datastore, gateway, tracker=delivery_pass_tracker)

"""Push notification transport and datastore adapters."""

from .datastore import SqlPushDatastore
from .firebase import (
    FirebaseDeliveryGateway,
    build_fcm_message,
    error_code_for,
    get_firebase_app,
    shutdown_firebase_app,
)

__all__ = [
    "SqlPushDatastore",
    "FirebaseDeliveryGateway",
    "build_fcm_message",
    "error_code_for",
    "get_firebase_app",
    "shutdown_firebase_app",
]

"""Aggregate application use cases."""

from .notifications import PushDeliveryService

__all__ = ["PushDeliveryService"]

"""Pydantic schemas exposed by the HTTP interface."""

from .notification import ChatMessageCreate, EventCreatedNotify
from .storage import SignedUrlRead, SignedUrlRequest

__all__ = [
    "ChatMessageCreate",
    "EventCreatedNotify",
    "SignedUrlRead",
    "SignedUrlRequest",
]

"""Reversible short codes for numeric identifiers used in public links."""

from __future__ import annotations

from functools import lru_cache

from hashids import Hashids

from app.config import get_settings


@lru_cache(maxsize=1)
def _get_hashids() -> Hashids:
    settings = get_settings()
    return Hashids(salt=settings.hashid_salt, min_length=settings.hashid_min_length)


def hashid_from_id(value: int) -> str:
    """Encode a non-negative ``value`` into its short code."""

    if value < 0:
        raise ValueError("Only non-negative identifiers can be encoded")
    return _get_hashids().encode(value)


def id_from_hashid(hashid: str) -> int | None:
    """Decode ``hashid`` back into an identifier, ``None`` when it is not valid."""

    decoded = _get_hashids().decode(hashid)
    if len(decoded) != 1:
        return None
    return decoded[0]

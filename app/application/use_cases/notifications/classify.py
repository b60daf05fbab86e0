"""Interpretation of per-message delivery outcomes."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from typing import Final

from app.domain.entities import DeliveryOutcome, OutcomeClass

logger = logging.getLogger(__name__)

_CODE_NAMESPACE: Final[str] = "messaging/"

INVALID_ARGUMENT: Final[str] = "messaging/invalid-argument"
INVALID_PAYLOAD: Final[str] = "messaging/invalid-payload"
REGISTRATION_TOKEN_NOT_REGISTERED: Final[str] = (
    "messaging/registration-token-not-registered"
)
INVALID_RECIPIENT: Final[str] = "messaging/invalid-recipient"


def normalize_error_code(code: str) -> str:
    """Strip the ``messaging/`` namespace so bare and prefixed codes compare equal."""

    code = code.strip().lower()
    if code.startswith(_CODE_NAMESPACE):
        return code[len(_CODE_NAMESPACE) :]
    return code


# Payload defect codes are checked before stale token codes.
PAYLOAD_DEFECT_CODES: Final[frozenset[str]] = frozenset(
    normalize_error_code(code) for code in (INVALID_ARGUMENT, INVALID_PAYLOAD)
)
STALE_TOKEN_CODES: Final[frozenset[str]] = frozenset(
    normalize_error_code(code)
    for code in (REGISTRATION_TOKEN_NOT_REGISTERED, INVALID_RECIPIENT)
)


def classify_outcome(outcome: DeliveryOutcome) -> OutcomeClass | None:
    """Return how ``outcome`` must be handled, ``None`` for a delivered message."""

    if outcome.success:
        return None
    if not outcome.error_code:
        return OutcomeClass.IGNORABLE
    code = normalize_error_code(outcome.error_code)
    if code in PAYLOAD_DEFECT_CODES:
        return OutcomeClass.PAYLOAD_DEFECT
    if code in STALE_TOKEN_CODES:
        return OutcomeClass.STALE_TOKEN
    return OutcomeClass.IGNORABLE


def classify_outcomes(
    outcomes: Sequence[DeliveryOutcome],
) -> tuple[list[OutcomeClass | None], Counter[str]]:
    """Classify every outcome and log the failures.

    Returns the classes in batch order together with a count of the error
    codes nothing handles explicitly, so they can be reported for triage.
    """

    classes: list[OutcomeClass | None] = []
    unrecognized: Counter[str] = Counter()
    for index, outcome in enumerate(outcomes):
        outcome_class = classify_outcome(outcome)
        classes.append(outcome_class)
        if outcome_class is None:
            continue

        code = outcome.error_code
        if outcome_class is OutcomeClass.PAYLOAD_DEFECT:
            logger.error(
                "Push message %d was rejected as malformed (code %s); the token is kept",
                index,
                code,
            )
        elif outcome_class is OutcomeClass.STALE_TOKEN:
            logger.info("Push message %d targeted a stale token (code %s)", index, code)
        elif not code:
            logger.warning("Push message %d failed without an error code", index)
        else:
            unrecognized[code] += 1
            logger.warning(
                "Push message %d failed with unhandled code %s", index, code
            )
    return classes, unrecognized


__all__ = [
    "INVALID_ARGUMENT",
    "INVALID_PAYLOAD",
    "INVALID_RECIPIENT",
    "REGISTRATION_TOKEN_NOT_REGISTERED",
    "PAYLOAD_DEFECT_CODES",
    "STALE_TOKEN_CODES",
    "classify_outcome",
    "classify_outcomes",
    "normalize_error_code",
]

"""Remove device tokens the push transport reported as permanently invalid."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import anyio

from app.domain.entities import DeviceToken, OutcomeClass

from .ports import PushDatastore

logger = logging.getLogger(__name__)


def stale_tokens(
    tokens: Sequence[DeviceToken], classes: Sequence[OutcomeClass | None]
) -> list[DeviceToken]:
    """Return the tokens whose outcome at the same position is ``STALE_TOKEN``."""

    return [
        token
        for token, outcome_class in zip(tokens, classes)
        if outcome_class is OutcomeClass.STALE_TOKEN
    ]


async def reconcile_stale_tokens(
    datastore: PushDatastore,
    tokens: Sequence[DeviceToken],
    classes: Sequence[OutcomeClass | None],
) -> int:
    """Delete every stale token and return how many rows were removed.

    Deletions run concurrently and independently. A failed deletion is logged
    and never prevents the remaining ones.
    """

    targets = {token.id: token for token in stale_tokens(tokens, classes)}
    if not targets:
        return 0

    deleted = 0

    async def _delete(token: DeviceToken) -> None:
        nonlocal deleted
        try:
            removed = await datastore.delete_device_token(token.id)
        except Exception:
            logger.exception(
                "Could not delete stale device token of user %s", token.user_id
            )
            return
        deleted += removed
        logger.info(
            "Deleted stale device token of user %s (rows: %d)", token.user_id, removed
        )

    async with anyio.create_task_group() as task_group:
        for token in targets.values():
            task_group.start_soon(_delete, token)
    return deleted


__all__ = ["reconcile_stale_tokens", "stale_tokens"]

"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.infrastructure.models import user_user_pivot_table


class UserRepository:
    """Queries over users and the follower relation."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_follower_ids(self, user_id: int) -> Sequence[int]:
        """Return the identifiers of every user following ``user_id``."""

        statement = (
            select(user_user_pivot_table.c.follower_id)
            .where(user_user_pivot_table.c.user_id == user_id)
            .order_by(user_user_pivot_table.c.follower_id)
        )
        return list(self.session.scalars(statement))


__all__ = ["UserRepository"]

"""Persistence helpers for push device tokens."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.domain.entities import DeviceToken
from app.infrastructure.models import FcmTokenModel


class FcmTokenRepository:
    """Read and delete device tokens. Registration happens elsewhere."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_users(self, user_ids: Iterable[int]) -> Sequence[DeviceToken]:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return []
        statement = (
            select(FcmTokenModel)
            .where(FcmTokenModel.user_id.in_(ids))
            .order_by(
                FcmTokenModel.user_id,
                FcmTokenModel.created_at,
                FcmTokenModel.id,
            )
        )
        return [
            DeviceToken(id=model.id, user_id=model.user_id)
            for model in self.session.scalars(statement)
        ]

    def delete(self, token_id: str) -> int:
        """Delete ``token_id`` and return the number of removed rows.

        A token that no longer exists yields ``0``.
        """

        result = self.session.execute(
            delete(FcmTokenModel).where(FcmTokenModel.id == token_id)
        )
        self.session.commit()
        return result.rowcount or 0


__all__ = ["FcmTokenRepository"]

"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import insert
from sqlalchemy.orm import Session

from app.domain.entities import NotificationMessage, NotificationRecord
from app.infrastructure.models import NotificationModel, NotificationRecordModel
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Store notification contents and the per-user delivery history."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(
        self,
        *,
        title: str,
        body: str,
        link_url: str,
        relative_link_url: str,
        image_url: str | None = None,
    ) -> NotificationMessage:
        model = NotificationModel(
            title=title,
            body=body,
            link_url=link_url,
            relative_link_url=relative_link_url,
            image_url=image_url,
            created_at=ensure_app_naive_datetime(now_in_app_timezone()),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return NotificationMessage(
            id=model.id,
            title=model.title,
            body=model.body,
            link_url=model.link_url,
            relative_link_url=model.relative_link_url,
            image_url=model.image_url,
            created_at=ensure_app_timezone(model.created_at),
        )

    def insert_records(self, records: Sequence[NotificationRecord]) -> int:
        """Insert ``records`` with a single statement and return how many were written."""

        if not records:
            return 0
        rows = [
            {
                "user_id": record.user_id,
                "data": record.data,
                "created_at": ensure_app_naive_datetime(
                    record.created_at or now_in_app_timezone()
                ),
            }
            for record in records
        ]
        self.session.execute(insert(NotificationRecordModel), rows)
        self.session.commit()
        return len(rows)


__all__ = ["NotificationRepository"]

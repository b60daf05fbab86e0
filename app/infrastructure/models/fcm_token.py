"""SQLAlchemy model for push device tokens."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class FcmTokenModel(Base):
    """Registration token issued by Firebase Cloud Messaging to one client."""

    __tablename__ = "fcm_token"

    id = Column(String(255), primary_key=True)
    user_id = Column(
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = ["FcmTokenModel"]

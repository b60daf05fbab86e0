"""SQLAlchemy models for notifications and their delivery history."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Content of a generic notification shared by all its recipients."""

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    image_url = Column(String(512), nullable=True)
    link_url = Column(String(512), nullable=False)
    relative_link_url = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


class NotificationRecordModel(Base):
    """A push payload successfully delivered to a user."""

    __tablename__ = "notification_record"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    data = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)

    user = relationship("UserModel", lazy="select")


__all__ = ["NotificationModel", "NotificationRecordModel"]

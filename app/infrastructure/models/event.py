"""SQLAlchemy models for events, their participants and chat messages."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class EventModel(Base):
    """Database representation of an event created by a user."""

    __tablename__ = "event"

    id = Column(Integer, primary_key=True, index=True)
    creator_id = Column(
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    what = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)

    creator = relationship("UserModel", lazy="joined")


user_event_pivot_table = Table(
    "user_event_pivot",
    Base.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "event_id",
        Integer,
        ForeignKey("event.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class EventChatMessageModel(Base):
    """Message written to the chat of an event."""

    __tablename__ = "event_chat_message"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(
        Integer,
        ForeignKey("event.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = ["EventModel", "EventChatMessageModel", "user_event_pivot_table"]

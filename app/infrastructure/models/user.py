"""SQLAlchemy models for users and the follower relation."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class UserModel(Base):
    """Database representation of an application user."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


# ``follower_id`` follows ``user_id``.
user_user_pivot_table = Table(
    "user_user_pivot",
    Base.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "follower_id",
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


__all__ = ["UserModel", "user_user_pivot_table"]

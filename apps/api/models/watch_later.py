"""Watch later model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.sql import func

from database import Base


class WatchLater(Base):
    """Video saved by a user for later viewing."""

    __tablename__ = "watch_later"
    __table_args__ = (
        UniqueConstraint("user_id", "video_id", name="uq_watch_later_user_video"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    video_id = Column(Integer, ForeignKey("videos.id"), nullable=False)
    added_at = Column(DateTime(timezone=True), server_default=func.now())

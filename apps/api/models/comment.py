"""Comment model."""

from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Text
from sqlalchemy.sql import func

from database import Base


class Comment(Base):
    """Viewer comment on a video; parent_id points at the top-level comment for replies."""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    video_id = Column(Integer, ForeignKey("videos.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    likes = Column(Integer, nullable=False, default=0)
    parent_id = Column(Integer, ForeignKey("comments.id"), nullable=True)
    status = Column(String, nullable=False, default="active", index=True)  # active, flagged, removed
    created_at = Column(DateTime(timezone=True), server_default=func.now())

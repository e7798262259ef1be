"""Video model for the catalog."""

from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Text, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database import Base


class Video(Base):
    """Catalog entry owned by a creator."""

    __tablename__ = "videos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    url = Column(String, nullable=False)
    embed_type = Column(String, nullable=False, default="youtube")  # youtube, vimeo, upload
    thumbnail = Column(String, nullable=True)
    duration = Column(String, nullable=True)  # H:MM:SS or M:SS
    category = Column(String, nullable=False, index=True)
    difficulty = Column(String, nullable=False)  # beginner, intermediate, advanced
    tags = Column(JSON, nullable=False, default=list)
    views = Column(Integer, nullable=False, default=0)
    likes = Column(Integer, nullable=False, default=0)
    dislikes = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default="active", index=True)  # active, pending, removed
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Case-folded copies for the tag and search filters, rewritten on every save
    title_folded = Column(Text, nullable=True)
    description_folded = Column(Text, nullable=True)
    tags_folded = Column(Text, nullable=True)

    # Relationships
    creator = relationship("User", back_populates="videos")

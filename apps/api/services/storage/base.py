"""Storage capability shared by the in-memory and relational backends."""

from __future__ import annotations

import abc
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from models.comment import Comment
from models.user import User
from models.video import Video
from models.watch_history import WatchHistory
from models.watch_later import WatchLater


VIDEO_STATUSES = ("active", "pending", "removed")
COMMENT_STATUSES = ("active", "flagged", "removed")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def fold(value: Any) -> str:
    """Case-insensitive comparison key, identical for both backends."""
    return str(value or "").casefold()


def fold_tags(tags: Optional[List[str]]) -> str:
    """JSON text of the folded tags, one quoted element per tag."""
    return json.dumps([fold(tag) for tag in tags or []], ensure_ascii=False)


@dataclass
class VideoQuery:
    """Filter set for catalog listings.

    Filters are ANDed; ``search`` matches title OR description. ``status=None``
    means any status. Results are newest first, then paginated.
    """

    category: Optional[str] = None
    difficulty: Optional[str] = None
    tag: Optional[str] = None
    search: Optional[str] = None
    status: Optional[str] = "active"
    creator_id: Optional[int] = None
    limit: Optional[int] = None
    offset: int = 0

    def __post_init__(self) -> None:
        self.category = _clean(self.category)
        self.difficulty = _clean(self.difficulty)
        self.tag = _clean(self.tag)
        self.search = _clean(self.search)
        self.status = _clean(self.status)
        self.offset = max(int(self.offset or 0), 0)

    def matches(self, video: Video) -> bool:
        """Evaluate the filters against a single video in Python."""
        if self.creator_id is not None and video.creator_id != self.creator_id:
            return False
        if self.status and video.status != self.status:
            return False
        if self.category and video.category != self.category:
            return False
        if self.difficulty and video.difficulty != self.difficulty:
            return False
        if self.tag:
            wanted = fold(self.tag)
            if not any(fold(tag) == wanted for tag in (video.tags or [])):
                return False
        if self.search:
            needle = fold(self.search)
            title = fold(video.title)
            description = fold(video.description)
            if needle not in title and needle not in description:
                return False
        return True


class Storage(abc.ABC):
    """Data access for users, videos, comments and per-user watch lists.

    Lookups return ``None`` (or ``False`` for deletions) when the target row is
    absent; existence and permission rules live in the service layer.
    """

    backend_name = "abstract"

    # Users

    @abc.abstractmethod
    async def get_user(self, user_id: int) -> Optional[User]: ...

    @abc.abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abc.abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]: ...

    # Raises ConflictError when the username or email is already taken.
    @abc.abstractmethod
    async def create_user(self, *, username: str, email: str, password_hash: str, role: str) -> User: ...

    # Videos

    @abc.abstractmethod
    async def list_videos(self, query: VideoQuery) -> List[Video]: ...

    @abc.abstractmethod
    async def get_video(self, video_id: int) -> Optional[Video]: ...

    @abc.abstractmethod
    async def create_video(self, *, creator_id: int, status: str, fields: Dict[str, Any]) -> Video: ...

    @abc.abstractmethod
    async def update_video(self, video_id: int, fields: Dict[str, Any]) -> Optional[Video]: ...

    @abc.abstractmethod
    async def delete_video(self, video_id: int) -> bool: ...

    @abc.abstractmethod
    async def increment_views(self, video_id: int) -> bool: ...

    @abc.abstractmethod
    async def record_reaction(self, video_id: int, is_like: bool) -> Optional[Video]: ...

    # Comments

    @abc.abstractmethod
    async def list_comments(self, video_id: int, status: Optional[str] = "active") -> List[Comment]: ...

    @abc.abstractmethod
    async def list_comments_by_status(self, status: Optional[str] = None) -> List[Comment]: ...

    @abc.abstractmethod
    async def get_comment(self, comment_id: int) -> Optional[Comment]: ...

    @abc.abstractmethod
    async def create_comment(
        self,
        *,
        video_id: int,
        user_id: int,
        content: str,
        parent_id: Optional[int] = None,
    ) -> Comment: ...

    @abc.abstractmethod
    async def update_comment_status(self, comment_id: int, status: str) -> Optional[Comment]: ...

    @abc.abstractmethod
    async def like_comment(self, comment_id: int) -> Optional[Comment]: ...

    # Watch history

    @abc.abstractmethod
    async def list_watch_history(self, user_id: int) -> List[WatchHistory]: ...

    @abc.abstractmethod
    async def upsert_watch_history(
        self,
        *,
        user_id: int,
        video_id: int,
        progress: int,
        completed: bool,
    ) -> WatchHistory: ...

    @abc.abstractmethod
    async def clear_watch_history(self, user_id: int) -> int: ...

    # Watch later

    @abc.abstractmethod
    async def list_watch_later(self, user_id: int) -> List[WatchLater]: ...

    @abc.abstractmethod
    async def add_watch_later(self, *, user_id: int, video_id: int) -> WatchLater: ...

    @abc.abstractmethod
    async def remove_watch_later(self, user_id: int, video_id: int) -> bool: ...

    async def ping(self) -> None:
        """Raise when the backend cannot serve requests."""
        return None

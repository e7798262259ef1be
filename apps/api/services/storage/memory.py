"""Dict-backed storage for local development and tests.

One instance is created per process; handlers reach it through ``app.state``.
Mutations never await between read and write, so each one completes within a
single event-loop step.
"""

from __future__ import annotations

import itertools
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from models.comment import Comment
from models.user import User
from models.video import Video
from models.watch_history import WatchHistory
from models.watch_later import WatchLater
from services.errors import ConflictError
from services.storage.base import Storage, VideoQuery


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _newest_first(rows, attr: str):
    return sorted(rows, key=lambda row: (getattr(row, attr), row.id), reverse=True)


class MemoryStorage(Storage):
    backend_name = "memory"

    def __init__(self) -> None:
        self._users: Dict[int, User] = {}
        self._videos: Dict[int, Video] = {}
        self._comments: Dict[int, Comment] = {}
        self._watch_history: Dict[int, WatchHistory] = {}
        self._watch_later: Dict[int, WatchLater] = {}
        self._user_ids = itertools.count(1)
        self._video_ids = itertools.count(1)
        self._comment_ids = itertools.count(1)
        self._watch_history_ids = itertools.count(1)
        self._watch_later_ids = itertools.count(1)

    # Users

    async def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return next((user for user in self._users.values() if user.username == username), None)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return next((user for user in self._users.values() if user.email == email), None)

    async def create_user(self, *, username: str, email: str, password_hash: str, role: str) -> User:
        taken = any(user.username == username or user.email == email for user in self._users.values())
        if taken:
            raise ConflictError("Username or email already exists")
        user = User(
            id=next(self._user_ids),
            username=username,
            email=email,
            password_hash=password_hash,
            role=role,
            created_at=_now(),
        )
        self._users[user.id] = user
        return user

    # Videos

    async def list_videos(self, query: VideoQuery) -> List[Video]:
        rows = _newest_first([video for video in self._videos.values() if query.matches(video)], "created_at")
        start = query.offset
        end = start + query.limit if query.limit is not None else None
        return rows[start:end]

    async def get_video(self, video_id: int) -> Optional[Video]:
        return self._videos.get(video_id)

    async def create_video(self, *, creator_id: int, status: str, fields: Dict[str, Any]) -> Video:
        video = Video(
            id=next(self._video_ids),
            creator_id=creator_id,
            title=fields["title"],
            description=fields["description"],
            url=fields["url"],
            embed_type=fields.get("embed_type") or "youtube",
            thumbnail=fields.get("thumbnail"),
            duration=fields.get("duration"),
            category=fields["category"],
            difficulty=fields["difficulty"],
            tags=list(fields.get("tags") or []),
            views=0,
            likes=0,
            dislikes=0,
            status=status,
            created_at=_now(),
        )
        self._videos[video.id] = video
        return video

    async def update_video(self, video_id: int, fields: Dict[str, Any]) -> Optional[Video]:
        video = self._videos.get(video_id)
        if video is None:
            return None
        for key, value in fields.items():
            setattr(video, key, list(value) if key == "tags" else value)
        return video

    async def delete_video(self, video_id: int) -> bool:
        if self._videos.pop(video_id, None) is None:
            return False
        for store in (self._comments, self._watch_history, self._watch_later):
            for row_id in [row_id for row_id, row in store.items() if row.video_id == video_id]:
                del store[row_id]
        return True

    async def increment_views(self, video_id: int) -> bool:
        video = self._videos.get(video_id)
        if video is None:
            return False
        video.views += 1
        return True

    async def record_reaction(self, video_id: int, is_like: bool) -> Optional[Video]:
        video = self._videos.get(video_id)
        if video is None:
            return None
        if is_like:
            video.likes += 1
        else:
            video.dislikes += 1
        return video

    # Comments

    async def list_comments(self, video_id: int, status: Optional[str] = "active") -> List[Comment]:
        rows = [
            comment
            for comment in self._comments.values()
            if comment.video_id == video_id and (status is None or comment.status == status)
        ]
        return _newest_first(rows, "created_at")

    async def list_comments_by_status(self, status: Optional[str] = None) -> List[Comment]:
        rows = [comment for comment in self._comments.values() if status is None or comment.status == status]
        return _newest_first(rows, "created_at")

    async def get_comment(self, comment_id: int) -> Optional[Comment]:
        return self._comments.get(comment_id)

    async def create_comment(
        self,
        *,
        video_id: int,
        user_id: int,
        content: str,
        parent_id: Optional[int] = None,
    ) -> Comment:
        comment = Comment(
            id=next(self._comment_ids),
            video_id=video_id,
            user_id=user_id,
            content=content,
            likes=0,
            parent_id=parent_id,
            status="active",
            created_at=_now(),
        )
        self._comments[comment.id] = comment
        return comment

    async def update_comment_status(self, comment_id: int, status: str) -> Optional[Comment]:
        comment = self._comments.get(comment_id)
        if comment is None:
            return None
        comment.status = status
        return comment

    async def like_comment(self, comment_id: int) -> Optional[Comment]:
        comment = self._comments.get(comment_id)
        if comment is None:
            return None
        comment.likes += 1
        return comment

    # Watch history

    async def list_watch_history(self, user_id: int) -> List[WatchHistory]:
        rows = [entry for entry in self._watch_history.values() if entry.user_id == user_id]
        return _newest_first(rows, "updated_at")

    async def upsert_watch_history(
        self,
        *,
        user_id: int,
        video_id: int,
        progress: int,
        completed: bool,
    ) -> WatchHistory:
        existing = next(
            (
                entry
                for entry in self._watch_history.values()
                if entry.user_id == user_id and entry.video_id == video_id
            ),
            None,
        )
        if existing is not None:
            existing.progress = progress
            existing.completed = completed
            existing.updated_at = _now()
            return existing

        entry = WatchHistory(
            id=next(self._watch_history_ids),
            user_id=user_id,
            video_id=video_id,
            progress=progress,
            completed=completed,
            updated_at=_now(),
        )
        self._watch_history[entry.id] = entry
        return entry

    async def clear_watch_history(self, user_id: int) -> int:
        doomed = [entry_id for entry_id, entry in self._watch_history.items() if entry.user_id == user_id]
        for entry_id in doomed:
            del self._watch_history[entry_id]
        return len(doomed)

    # Watch later

    async def list_watch_later(self, user_id: int) -> List[WatchLater]:
        rows = [entry for entry in self._watch_later.values() if entry.user_id == user_id]
        return _newest_first(rows, "added_at")

    async def add_watch_later(self, *, user_id: int, video_id: int) -> WatchLater:
        for entry in self._watch_later.values():
            if entry.user_id == user_id and entry.video_id == video_id:
                return entry
        entry = WatchLater(
            id=next(self._watch_later_ids),
            user_id=user_id,
            video_id=video_id,
            added_at=_now(),
        )
        self._watch_later[entry.id] = entry
        return entry

    async def remove_watch_later(self, user_id: int, video_id: int) -> bool:
        for entry_id, entry in list(self._watch_later.items()):
            if entry.user_id == user_id and entry.video_id == video_id:
                del self._watch_later[entry_id]
                return True
        return False

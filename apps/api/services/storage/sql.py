"""Relational storage on top of the async SQLAlchemy session factory."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, or_, text, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.future import select

from models.comment import Comment
from models.user import User
from models.video import Video
from models.watch_history import WatchHistory
from models.watch_later import WatchLater
from services.errors import ConflictError
from services.storage.base import Storage, VideoQuery, fold, fold_tags

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def _escape_like(value: str) -> str:
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _refold(video: Video) -> None:
    video.title_folded = fold(video.title)
    video.description_folded = fold(video.description)
    video.tags_folded = fold_tags(video.tags)


class SqlStorage(Storage):
    backend_name = "database"

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def ping(self) -> None:
        async with self._session_maker() as db:
            await db.execute(text("SELECT 1"))

    # Users

    async def get_user(self, user_id: int) -> Optional[User]:
        async with self._session_maker() as db:
            return await db.get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        async with self._session_maker() as db:
            result = await db.execute(select(User).where(User.username == username))
            return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        async with self._session_maker() as db:
            result = await db.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def create_user(self, *, username: str, email: str, password_hash: str, role: str) -> User:
        async with self._session_maker() as db:
            user = User(username=username, email=email, password_hash=password_hash, role=role)
            db.add(user)
            try:
                await db.commit()
            except IntegrityError as exc:
                await db.rollback()
                raise ConflictError("Username or email already exists") from exc
            await db.refresh(user)
            return user

    # Videos

    def _video_statement(self, query: VideoQuery):
        stmt = select(Video)
        if query.creator_id is not None:
            stmt = stmt.where(Video.creator_id == query.creator_id)
        if query.status:
            stmt = stmt.where(Video.status == query.status)
        if query.category:
            stmt = stmt.where(Video.category == query.category)
        if query.difficulty:
            stmt = stmt.where(Video.difficulty == query.difficulty)
        if query.tag:
            # tags_folded is a JSON array; match one quoted element of it.
            needle = _escape_like(fold_tags([query.tag])[1:-1])
            stmt = stmt.where(Video.tags_folded.like(f"%{needle}%", escape=LIKE_ESCAPE))
        if query.search:
            pattern = f"%{_escape_like(fold(query.search))}%"
            stmt = stmt.where(
                or_(
                    Video.title_folded.like(pattern, escape=LIKE_ESCAPE),
                    Video.description_folded.like(pattern, escape=LIKE_ESCAPE),
                )
            )
        stmt = stmt.order_by(Video.created_at.desc(), Video.id.desc())
        if query.offset:
            stmt = stmt.offset(query.offset)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)
        return stmt

    async def list_videos(self, query: VideoQuery) -> List[Video]:
        async with self._session_maker() as db:
            result = await db.execute(self._video_statement(query))
            return list(result.scalars().all())

    async def get_video(self, video_id: int) -> Optional[Video]:
        async with self._session_maker() as db:
            return await db.get(Video, video_id)

    async def create_video(self, *, creator_id: int, status: str, fields: Dict[str, Any]) -> Video:
        async with self._session_maker() as db:
            video = Video(
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
            )
            _refold(video)
            db.add(video)
            await db.commit()
            await db.refresh(video)
            return video

    async def update_video(self, video_id: int, fields: Dict[str, Any]) -> Optional[Video]:
        async with self._session_maker() as db:
            video = await db.get(Video, video_id)
            if video is None:
                return None
            for key, value in fields.items():
                setattr(video, key, list(value) if key == "tags" else value)
            _refold(video)
            await db.commit()
            await db.refresh(video)
            return video

    async def delete_video(self, video_id: int) -> bool:
        async with self._session_maker() as db:
            await db.execute(delete(WatchLater).where(WatchLater.video_id == video_id))
            await db.execute(delete(WatchHistory).where(WatchHistory.video_id == video_id))
            await db.execute(
                update(Comment).where(Comment.video_id == video_id).values(parent_id=None)
            )
            await db.execute(delete(Comment).where(Comment.video_id == video_id))
            result = await db.execute(delete(Video).where(Video.id == video_id))
            await db.commit()
            return (result.rowcount or 0) > 0

    async def increment_views(self, video_id: int) -> bool:
        async with self._session_maker() as db:
            result = await db.execute(
                update(Video).where(Video.id == video_id).values(views=Video.views + 1)
            )
            await db.commit()
            return (result.rowcount or 0) > 0

    async def record_reaction(self, video_id: int, is_like: bool) -> Optional[Video]:
        counter = Video.likes if is_like else Video.dislikes
        async with self._session_maker() as db:
            result = await db.execute(
                update(Video).where(Video.id == video_id).values({counter: counter + 1})
            )
            await db.commit()
            if not result.rowcount:
                return None
            return await db.get(Video, video_id, populate_existing=True)

    # Comments

    async def list_comments(self, video_id: int, status: Optional[str] = "active") -> List[Comment]:
        stmt = select(Comment).where(Comment.video_id == video_id)
        if status:
            stmt = stmt.where(Comment.status == status)
        stmt = stmt.order_by(Comment.created_at.desc(), Comment.id.desc())
        async with self._session_maker() as db:
            result = await db.execute(stmt)
            return list(result.scalars().all())

    async def list_comments_by_status(self, status: Optional[str] = None) -> List[Comment]:
        stmt = select(Comment)
        if status:
            stmt = stmt.where(Comment.status == status)
        stmt = stmt.order_by(Comment.created_at.desc(), Comment.id.desc())
        async with self._session_maker() as db:
            result = await db.execute(stmt)
            return list(result.scalars().all())

    async def get_comment(self, comment_id: int) -> Optional[Comment]:
        async with self._session_maker() as db:
            return await db.get(Comment, comment_id)

    async def create_comment(
        self,
        *,
        video_id: int,
        user_id: int,
        content: str,
        parent_id: Optional[int] = None,
    ) -> Comment:
        async with self._session_maker() as db:
            comment = Comment(
                video_id=video_id,
                user_id=user_id,
                content=content,
                parent_id=parent_id,
                likes=0,
                status="active",
            )
            db.add(comment)
            await db.commit()
            await db.refresh(comment)
            return comment

    async def update_comment_status(self, comment_id: int, status: str) -> Optional[Comment]:
        async with self._session_maker() as db:
            comment = await db.get(Comment, comment_id)
            if comment is None:
                return None
            comment.status = status
            await db.commit()
            await db.refresh(comment)
            return comment

    async def like_comment(self, comment_id: int) -> Optional[Comment]:
        async with self._session_maker() as db:
            result = await db.execute(
                update(Comment).where(Comment.id == comment_id).values(likes=Comment.likes + 1)
            )
            await db.commit()
            if not result.rowcount:
                return None
            return await db.get(Comment, comment_id, populate_existing=True)

    # Watch history

    async def list_watch_history(self, user_id: int) -> List[WatchHistory]:
        stmt = (
            select(WatchHistory)
            .where(WatchHistory.user_id == user_id)
            .order_by(WatchHistory.updated_at.desc(), WatchHistory.id.desc())
        )
        async with self._session_maker() as db:
            result = await db.execute(stmt)
            return list(result.scalars().all())

    @staticmethod
    async def _find_history(db: AsyncSession, user_id: int, video_id: int) -> Optional[WatchHistory]:
        result = await db.execute(
            select(WatchHistory).where(
                WatchHistory.user_id == user_id,
                WatchHistory.video_id == video_id,
            )
        )
        return result.scalar_one_or_none()

    async def upsert_watch_history(
        self,
        *,
        user_id: int,
        video_id: int,
        progress: int,
        completed: bool,
    ) -> WatchHistory:
        async with self._session_maker() as db:
            entry = await self._find_history(db, user_id, video_id)
            if entry is None:
                entry = WatchHistory(
                    user_id=user_id,
                    video_id=video_id,
                    progress=progress,
                    completed=completed,
                    updated_at=_now(),
                )
                db.add(entry)
                try:
                    await db.commit()
                    await db.refresh(entry)
                    return entry
                except IntegrityError:
                    await db.rollback()
                    logger.info("Concurrent watch history insert user=%s video=%s; updating", user_id, video_id)
                    entry = await self._find_history(db, user_id, video_id)
                    if entry is None:
                        raise

            entry.progress = progress
            entry.completed = completed
            entry.updated_at = _now()
            await db.commit()
            await db.refresh(entry)
            return entry

    async def clear_watch_history(self, user_id: int) -> int:
        async with self._session_maker() as db:
            result = await db.execute(delete(WatchHistory).where(WatchHistory.user_id == user_id))
            await db.commit()
            return int(result.rowcount or 0)

    # Watch later

    async def list_watch_later(self, user_id: int) -> List[WatchLater]:
        stmt = (
            select(WatchLater)
            .where(WatchLater.user_id == user_id)
            .order_by(WatchLater.added_at.desc(), WatchLater.id.desc())
        )
        async with self._session_maker() as db:
            result = await db.execute(stmt)
            return list(result.scalars().all())

    @staticmethod
    async def _find_watch_later(db: AsyncSession, user_id: int, video_id: int) -> Optional[WatchLater]:
        result = await db.execute(
            select(WatchLater).where(
                WatchLater.user_id == user_id,
                WatchLater.video_id == video_id,
            )
        )
        return result.scalar_one_or_none()

    async def add_watch_later(self, *, user_id: int, video_id: int) -> WatchLater:
        async with self._session_maker() as db:
            existing = await self._find_watch_later(db, user_id, video_id)
            if existing is not None:
                return existing

            entry = WatchLater(user_id=user_id, video_id=video_id, added_at=_now())
            db.add(entry)
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                existing = await self._find_watch_later(db, user_id, video_id)
                if existing is None:
                    raise
                return existing
            await db.refresh(entry)
            return entry

    async def remove_watch_later(self, user_id: int, video_id: int) -> bool:
        async with self._session_maker() as db:
            result = await db.execute(
                delete(WatchLater).where(
                    WatchLater.user_id == user_id,
                    WatchLater.video_id == video_id,
                )
            )
            await db.commit()
            return (result.rowcount or 0) > 0

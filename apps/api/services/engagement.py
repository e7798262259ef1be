"""Viewer engagement: comments, watch history and watch later."""

from __future__ import annotations

import logging
from typing import Optional

from models.comment import Comment
from models.watch_history import WatchHistory
from models.watch_later import WatchLater
from services.catalog import get_video_or_404
from services.errors import InvalidInputError, NotFoundError
from services.storage import Storage

logger = logging.getLogger(__name__)


async def add_comment(
    storage: Storage,
    *,
    video_id: int,
    user_id: int,
    content: str,
    parent_id: Optional[int] = None,
) -> Comment:
    """Post a comment or a reply; replies nest one level below a top-level comment."""
    await get_video_or_404(storage, video_id)

    if parent_id is not None:
        parent = await storage.get_comment(parent_id)
        if parent is None or parent.video_id != video_id:
            raise InvalidInputError(
                "Invalid input data",
                errors=[{"loc": ["body", "parentId"], "msg": "Parent comment does not exist on this video"}],
            )
        if parent.parent_id is not None:
            raise InvalidInputError(
                "Invalid input data",
                errors=[{"loc": ["body", "parentId"], "msg": "Replies cannot be nested more than one level"}],
            )

    return await storage.create_comment(
        video_id=video_id,
        user_id=user_id,
        content=content,
        parent_id=parent_id,
    )


async def like_comment(storage: Storage, *, video_id: int, comment_id: int) -> Comment:
    comment = await storage.get_comment(comment_id)
    if comment is None or comment.video_id != video_id:
        raise NotFoundError("Comment not found")
    liked = await storage.like_comment(comment_id)
    if liked is None:
        raise NotFoundError("Comment not found")
    return liked


async def set_comment_status(storage: Storage, *, comment_id: int, status: str, moderator_id: int) -> Comment:
    comment = await storage.update_comment_status(comment_id, status)
    if comment is None:
        raise NotFoundError("Comment not found")
    logger.info("comment_moderated comment=%s status=%s moderator=%s", comment_id, status, moderator_id)
    return comment


async def record_progress(
    storage: Storage,
    *,
    user_id: int,
    video_id: int,
    progress: int,
    completed: bool,
) -> WatchHistory:
    await get_video_or_404(storage, video_id)
    return await storage.upsert_watch_history(
        user_id=user_id,
        video_id=video_id,
        progress=progress,
        completed=completed,
    )


async def save_for_later(storage: Storage, *, user_id: int, video_id: int) -> WatchLater:
    """Idempotent: an existing entry is returned unchanged."""
    await get_video_or_404(storage, video_id)
    return await storage.add_watch_later(user_id=user_id, video_id=video_id)


async def remove_from_watch_later(storage: Storage, *, user_id: int, video_id: int) -> None:
    if not await storage.remove_watch_later(user_id, video_id):
        raise NotFoundError("Watch later entry not found")

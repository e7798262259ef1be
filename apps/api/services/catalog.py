"""Video catalog rules: creation defaults, ownership, counters and moderation."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict

from config import settings
from models.video import Video
from services.errors import InvalidInputError, NotFoundError, PermissionDeniedError
from services.storage import Storage

logger = logging.getLogger(__name__)

EXTERNAL_URL_PATTERN = re.compile(r"^https?://\S+$", re.IGNORECASE)
REQUIRED_VIDEO_FIELDS = ("title", "description", "url", "embed_type", "category", "difficulty", "tags")


def _check_source(embed_type: str, url: str) -> None:
    """Embedded players need an absolute http(s) URL; uploads may use a storage path."""
    if embed_type in {"youtube", "vimeo"} and not EXTERNAL_URL_PATTERN.match(url or ""):
        raise InvalidInputError(
            "Invalid input data",
            errors=[{"loc": ["body", "url"], "msg": f"{embed_type} videos require an http(s) URL"}],
        )


def _check_thumbnail(thumbnail: Any) -> None:
    if thumbnail is not None and not EXTERNAL_URL_PATTERN.match(str(thumbnail)):
        raise InvalidInputError(
            "Invalid input data",
            errors=[{"loc": ["body", "thumbnail"], "msg": "Thumbnail must be an http(s) URL"}],
        )


def can_modify(video: Video, user_id: int, role: str) -> bool:
    return role == "admin" or video.creator_id == user_id


async def get_video_or_404(storage: Storage, video_id: int) -> Video:
    video = await storage.get_video(video_id)
    if video is None:
        raise NotFoundError("Video not found")
    return video


async def view_video(storage: Storage, video_id: int) -> Video:
    """Count one view and return the video with its updated counter."""
    if not await storage.increment_views(video_id):
        raise NotFoundError("Video not found")
    return await get_video_or_404(storage, video_id)


async def create_video(storage: Storage, *, creator_id: int, fields: Dict[str, Any]) -> Video:
    _check_source(fields["embed_type"], fields["url"])
    _check_thumbnail(fields.get("thumbnail"))
    video = await storage.create_video(
        creator_id=creator_id,
        status=settings.VIDEO_DEFAULT_STATUS,
        fields=fields,
    )
    logger.info("video_created video=%s creator=%s status=%s", video.id, creator_id, video.status)
    return video


async def update_video(
    storage: Storage,
    *,
    video_id: int,
    user_id: int,
    role: str,
    fields: Dict[str, Any],
) -> Video:
    video = await get_video_or_404(storage, video_id)
    if not can_modify(video, user_id, role):
        raise PermissionDeniedError("You don't have permission to update this video")

    nulled = sorted(key for key in REQUIRED_VIDEO_FIELDS if key in fields and fields[key] is None)
    if nulled:
        raise InvalidInputError(
            "Invalid input data",
            errors=[{"loc": ["body", key], "msg": "Field cannot be null"} for key in nulled],
        )
    if "url" in fields or "embed_type" in fields:
        _check_source(fields.get("embed_type", video.embed_type), fields.get("url", video.url))
    if "thumbnail" in fields:
        _check_thumbnail(fields["thumbnail"])
    if not fields:
        return video

    updated = await storage.update_video(video_id, fields)
    if updated is None:
        raise NotFoundError("Video not found")
    return updated


async def delete_video(storage: Storage, *, video_id: int, user_id: int, role: str) -> None:
    video = await get_video_or_404(storage, video_id)
    if not can_modify(video, user_id, role):
        raise PermissionDeniedError("You don't have permission to delete this video")
    if not await storage.delete_video(video_id):
        raise NotFoundError("Video not found")
    logger.info("video_deleted video=%s by user=%s role=%s", video_id, user_id, role)


async def react_to_video(storage: Storage, *, video_id: int, is_like: bool) -> Video:
    video = await storage.record_reaction(video_id, is_like)
    if video is None:
        raise NotFoundError("Video not found")
    return video


async def set_video_status(storage: Storage, *, video_id: int, status: str, moderator_id: int) -> Video:
    """Apply an admin moderation decision; any status may follow any other."""
    video = await storage.update_video(video_id, {"status": status})
    if video is None:
        raise NotFoundError("Video not found")
    logger.info("video_moderated video=%s status=%s moderator=%s", video_id, status, moderator_id)
    return video

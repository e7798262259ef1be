"""
Admin moderation router.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from routers.auth_scope import AuthContext, require_roles
from schemas import (
    CommentResponse,
    CommentStatus,
    CommentStatusRequest,
    VideoResponse,
    VideoStatus,
    VideoStatusRequest,
)
from services import catalog, engagement
from services.errors import CodecastError, error_detail
from services.storage import Storage, VideoQuery, get_storage

router = APIRouter(dependencies=[Depends(require_roles("admin"))])
logger = logging.getLogger(__name__)


@router.get("/videos", response_model=List[VideoResponse])
async def list_videos(
    status: Optional[VideoStatus] = None,
    storage: Storage = Depends(get_storage),
):
    """Platform-wide listing; every status unless one is requested."""
    return await storage.list_videos(VideoQuery(status=status))


@router.patch("/videos/{video_id}/status", response_model=VideoResponse)
async def update_video_status(
    video_id: int,
    request: VideoStatusRequest,
    auth: AuthContext = Depends(require_roles("admin")),
    storage: Storage = Depends(get_storage),
):
    try:
        return await catalog.set_video_status(
            storage,
            video_id=video_id,
            status=request.status,
            moderator_id=auth.user_id,
        )
    except CodecastError:
        raise
    except Exception:
        logger.exception("Failed to moderate video %s", video_id)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL", "Failed to update video status."))


@router.get("/comments", response_model=List[CommentResponse])
async def list_comments(
    status: Optional[CommentStatus] = None,
    storage: Storage = Depends(get_storage),
):
    """Moderation queue, e.g. ``?status=flagged``."""
    return await storage.list_comments_by_status(status)


@router.patch("/comments/{comment_id}/status", response_model=CommentResponse)
async def update_comment_status(
    comment_id: int,
    request: CommentStatusRequest,
    auth: AuthContext = Depends(require_roles("admin")),
    storage: Storage = Depends(get_storage),
):
    try:
        return await engagement.set_comment_status(
            storage,
            comment_id=comment_id,
            status=request.status,
            moderator_id=auth.user_id,
        )
    except CodecastError:
        raise
    except Exception:
        logger.exception("Failed to moderate comment %s", comment_id)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL", "Failed to update comment status."))

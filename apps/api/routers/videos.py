"""
Video catalog router: public browsing plus creator/admin management.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from routers.auth_scope import AuthContext, get_auth_context, require_roles
from schemas import (
    MessageResponse,
    ReactionRequest,
    VideoCreateRequest,
    VideoResponse,
    VideoUpdateRequest,
)
from services import catalog
from services.errors import CodecastError, error_detail
from services.storage import Storage, VideoQuery, get_storage

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[VideoResponse])
async def list_videos(
    category: Optional[str] = None,
    difficulty: Optional[str] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    storage: Storage = Depends(get_storage),
):
    """Browse active videos, newest first."""
    query = VideoQuery(
        category=category,
        difficulty=difficulty,
        tag=tag,
        search=search,
        status="active",
        limit=limit,
        offset=offset,
    )
    try:
        return await storage.list_videos(query)
    except Exception:
        logger.exception("Failed to list videos query=%s", query)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL", "Failed to list videos."))


@router.get("/{video_id}", response_model=VideoResponse)
async def get_video(
    video_id: int,
    storage: Storage = Depends(get_storage),
):
    """Fetch one video; every fetch counts as a view."""
    try:
        return await catalog.view_video(storage, video_id)
    except CodecastError:
        raise
    except Exception:
        logger.exception("Failed to fetch video %s", video_id)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL", "Failed to fetch video."))


@router.post("", response_model=VideoResponse, status_code=201)
async def create_video(
    request: VideoCreateRequest,
    auth: AuthContext = Depends(require_roles("creator", "admin")),
    storage: Storage = Depends(get_storage),
):
    """Publish a video owned by the caller."""
    try:
        return await catalog.create_video(
            storage,
            creator_id=auth.user_id,
            fields=request.model_dump(),
        )
    except CodecastError:
        raise
    except Exception:
        logger.exception("Failed to create video for creator %s", auth.user_id)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL", "Failed to create video."))


@router.patch("/{video_id}", response_model=VideoResponse)
async def update_video(
    video_id: int,
    request: VideoUpdateRequest,
    auth: AuthContext = Depends(require_roles("creator", "admin")),
    storage: Storage = Depends(get_storage),
):
    """Partially update a video; only its creator or an admin may do so."""
    try:
        return await catalog.update_video(
            storage,
            video_id=video_id,
            user_id=auth.user_id,
            role=auth.role,
            fields=request.model_dump(exclude_unset=True),
        )
    except CodecastError:
        raise
    except Exception:
        logger.exception("Failed to update video %s", video_id)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL", "Failed to update video."))


@router.delete("/{video_id}", response_model=MessageResponse)
async def delete_video(
    video_id: int,
    auth: AuthContext = Depends(require_roles("creator", "admin")),
    storage: Storage = Depends(get_storage),
):
    try:
        await catalog.delete_video(storage, video_id=video_id, user_id=auth.user_id, role=auth.role)
    except CodecastError:
        raise
    except Exception:
        logger.exception("Failed to delete video %s", video_id)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL", "Failed to delete video."))
    return MessageResponse(message="Video deleted successfully")


@router.post("/{video_id}/like", response_model=VideoResponse)
async def react_to_video(
    video_id: int,
    request: ReactionRequest,
    _auth: AuthContext = Depends(get_auth_context),
    storage: Storage = Depends(get_storage),
):
    """Add one like (isLike=true) or one dislike (isLike=false)."""
    try:
        return await catalog.react_to_video(storage, video_id=video_id, is_like=request.is_like)
    except CodecastError:
        raise
    except Exception:
        logger.exception("Failed to record reaction on video %s", video_id)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL", "Failed to record reaction."))

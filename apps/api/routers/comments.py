"""
Comment router nested under videos.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from routers.auth_scope import AuthContext, get_auth_context
from schemas import CommentCreateRequest, CommentResponse
from services import engagement
from services.errors import CodecastError, error_detail
from services.storage import Storage, get_storage

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/{video_id}/comments", response_model=List[CommentResponse])
async def list_comments(
    video_id: int,
    storage: Storage = Depends(get_storage),
):
    """Active comments and replies for a video, newest first."""
    return await storage.list_comments(video_id, status="active")


@router.post("/{video_id}/comments", response_model=CommentResponse, status_code=201)
async def create_comment(
    video_id: int,
    request: CommentCreateRequest,
    auth: AuthContext = Depends(get_auth_context),
    storage: Storage = Depends(get_storage),
):
    try:
        return await engagement.add_comment(
            storage,
            video_id=video_id,
            user_id=auth.user_id,
            content=request.content,
            parent_id=request.parent_id,
        )
    except CodecastError:
        raise
    except Exception:
        logger.exception("Failed to create comment on video %s", video_id)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL", "Failed to create comment."))


@router.post("/{video_id}/comments/{comment_id}/like", response_model=CommentResponse)
async def like_comment(
    video_id: int,
    comment_id: int,
    _auth: AuthContext = Depends(get_auth_context),
    storage: Storage = Depends(get_storage),
):
    return await engagement.like_comment(storage, video_id=video_id, comment_id=comment_id)

"""
Watch later router, scoped to the caller.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from routers.auth_scope import AuthContext, get_auth_context
from schemas import MessageResponse, WatchLaterRequest, WatchLaterResponse
from services import engagement
from services.errors import CodecastError, error_detail
from services.storage import Storage, get_storage

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[WatchLaterResponse])
async def get_watch_later(
    auth: AuthContext = Depends(get_auth_context),
    storage: Storage = Depends(get_storage),
):
    return await storage.list_watch_later(auth.user_id)


@router.post("", response_model=WatchLaterResponse, status_code=201)
async def add_to_watch_later(
    request: WatchLaterRequest,
    auth: AuthContext = Depends(get_auth_context),
    storage: Storage = Depends(get_storage),
):
    """Save a video; saving it again returns the existing entry."""
    try:
        return await engagement.save_for_later(storage, user_id=auth.user_id, video_id=request.video_id)
    except CodecastError:
        raise
    except Exception:
        logger.exception("Failed to add watch later user=%s video=%s", auth.user_id, request.video_id)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL", "Failed to add to watch later."))


@router.delete("/{video_id}", response_model=MessageResponse)
async def remove_from_watch_later(
    video_id: int,
    auth: AuthContext = Depends(get_auth_context),
    storage: Storage = Depends(get_storage),
):
    await engagement.remove_from_watch_later(storage, user_id=auth.user_id, video_id=video_id)
    return MessageResponse(message="Removed from watch later successfully")

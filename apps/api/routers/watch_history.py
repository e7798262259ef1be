"""
Watch history router, scoped to the caller.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from routers.auth_scope import AuthContext, get_auth_context
from schemas import ClearHistoryResponse, WatchHistoryRequest, WatchHistoryResponse
from services import engagement
from services.errors import CodecastError, error_detail
from services.storage import Storage, get_storage

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[WatchHistoryResponse])
async def get_watch_history(
    auth: AuthContext = Depends(get_auth_context),
    storage: Storage = Depends(get_storage),
):
    """Most recently watched first."""
    return await storage.list_watch_history(auth.user_id)


@router.post("", response_model=WatchHistoryResponse, status_code=201)
async def record_watch_progress(
    request: WatchHistoryRequest,
    auth: AuthContext = Depends(get_auth_context),
    storage: Storage = Depends(get_storage),
):
    """Insert or overwrite the caller's progress (percent watched) on a video."""
    try:
        return await engagement.record_progress(
            storage,
            user_id=auth.user_id,
            video_id=request.video_id,
            progress=request.progress,
            completed=request.completed,
        )
    except CodecastError:
        raise
    except Exception:
        logger.exception("Failed to record watch history user=%s video=%s", auth.user_id, request.video_id)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL", "Failed to update watch history."))


@router.delete("", response_model=ClearHistoryResponse)
async def clear_watch_history(
    auth: AuthContext = Depends(get_auth_context),
    storage: Storage = Depends(get_storage),
):
    removed = await storage.clear_watch_history(auth.user_id)
    return ClearHistoryResponse(message="Watch history cleared", removed=removed)

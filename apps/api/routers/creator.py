"""
Creator dashboard router.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from routers.auth_scope import AuthContext, require_roles
from schemas import VideoResponse, VideoStatus
from services.storage import Storage, VideoQuery, get_storage

router = APIRouter()


@router.get("/videos", response_model=List[VideoResponse])
async def list_my_videos(
    status: Optional[VideoStatus] = None,
    auth: AuthContext = Depends(require_roles("creator", "admin")),
    storage: Storage = Depends(get_storage),
):
    """The caller's own uploads in every moderation state unless filtered."""
    return await storage.list_videos(VideoQuery(creator_id=auth.user_id, status=status))

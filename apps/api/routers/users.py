"""
User profile router.
"""

from fastapi import APIRouter, Depends

from routers.auth_scope import AuthContext, get_auth_context
from schemas import UserResponse
from services.errors import NotFoundError
from services.storage import Storage, get_storage

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user(
    auth: AuthContext = Depends(get_auth_context),
    storage: Storage = Depends(get_storage),
):
    """Get the caller's public profile."""
    user = await storage.get_user(auth.user_id)
    if not user:
        raise NotFoundError("User not found")
    return user

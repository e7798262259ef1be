"""
Authentication router: registration, login and logout acknowledgment.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from routers.auth_scope import AuthContext, get_auth_context
from routers.rate_limit import auth_throttle
from schemas import AuthResponse, LoginRequest, MessageResponse, RegisterRequest, UserResponse
from services.accounts import authenticate_user, issue_session, register_user
from services.errors import CodecastError, error_detail
from services.storage import Storage, get_storage

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=201,
    dependencies=[Depends(auth_throttle("register"))],
)
async def register(
    request: RegisterRequest,
    storage: Storage = Depends(get_storage),
):
    """Create a viewer or creator account and return a session token."""
    try:
        user = await register_user(
            storage,
            username=request.username,
            email=request.email,
            password=request.password,
            role=request.role,
        )
        session = issue_session(user)
    except CodecastError:
        raise
    except Exception:
        logger.exception("Failed to register user %s", request.username)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL", "Failed to register user."))

    return AuthResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(user),
        token=session["token"],
        expires_at=session["expires_at"],
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    dependencies=[Depends(auth_throttle("login"))],
)
async def login(
    request: LoginRequest,
    storage: Storage = Depends(get_storage),
):
    """Exchange username and password for a session token."""
    try:
        user = await authenticate_user(storage, username=request.username, password=request.password)
        session = issue_session(user)
    except CodecastError:
        raise
    except Exception:
        logger.exception("Failed to log in user %s", request.username)
        raise HTTPException(status_code=500, detail=error_detail("INTERNAL", "Failed to log in."))

    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(user),
        token=session["token"],
        expires_at=session["expires_at"],
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(_auth: AuthContext = Depends(get_auth_context)):
    """Client-managed logout acknowledgment; tokens expire on their own."""
    return MessageResponse(message="Logged out successfully")

"""Account registration and credential checks."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

from models.user import User
from services.errors import AuthenticationError, ConflictError
from services.passwords import hash_password, verify_password
from services.session_token import create_session_token
from services.storage import Storage

logger = logging.getLogger(__name__)


async def register_user(
    storage: Storage,
    *,
    username: str,
    email: str,
    password: str,
    role: str = "viewer",
) -> User:
    """Create an account, rejecting duplicate usernames or emails."""
    existing = await storage.get_user_by_username(username) or await storage.get_user_by_email(email)
    if existing:
        raise ConflictError("Username or email already exists")

    password_hash = await asyncio.to_thread(hash_password, password)
    # A concurrent registration can still win the insert; storage raises ConflictError then.
    user = await storage.create_user(
        username=username,
        email=email,
        password_hash=password_hash,
        role=role,
    )

    logger.info("user_registered user=%s role=%s", user.id, user.role)
    return user


async def authenticate_user(storage: Storage, *, username: str, password: str) -> User:
    user = await storage.get_user_by_username(username)
    if not user or not await asyncio.to_thread(verify_password, password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    return user


def issue_session(user: User) -> Dict[str, Any]:
    """Sign a session token for the user's id and role."""
    return create_session_token(user.id, user.role)

"""Signed bearer tokens that identify a CodeCast account and its role.

The API keeps no session table: the token itself carries the user id and role,
and logging out is left to the client discarding it.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from config import settings


SESSION_TOKEN_TYPE = "codecast_session"
SESSION_ROLES = frozenset({"viewer", "creator", "admin"})


def create_session_token(
    user_id: int,
    role: str,
    expires_hours: Optional[int] = None,
) -> Dict[str, Any]:
    """Sign a token for ``user_id`` acting as ``role``.

    Returns the encoded token and its expiry as a unix timestamp so the client
    can schedule a fresh login.
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = timedelta(hours=max(int(expires_hours or settings.JWT_EXPIRATION_HOURS or 168), 1))
    expiry = int((issued_at + lifetime).timestamp())

    token = jwt.encode(
        {
            "sub": str(user_id),
            "role": role,
            "type": SESSION_TOKEN_TYPE,
            "iat": int(issued_at.timestamp()),
            "exp": expiry,
        },
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    return {"token": token, "expires_at": expiry}


def decode_session_token(token: str) -> Dict[str, Any]:
    """Verify a bearer token and return its claims; ``ValueError`` on any defect."""
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise ValueError("Bearer token is expired or its signature does not verify.") from exc

    if claims.get("type") != SESSION_TOKEN_TYPE:
        raise ValueError("Bearer token is not a CodeCast session (type mismatch).")
    if not str(claims.get("sub", "")).isdigit():
        raise ValueError("Bearer token names no numeric user id.")
    if claims.get("role") not in SESSION_ROLES:
        raise ValueError("Bearer token carries an unknown role.")

    return claims

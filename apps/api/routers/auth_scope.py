"""Authentication and role dependencies for API routes."""

from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from services.errors import error_detail
from services.session_token import decode_session_token


auth_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    user_id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _unauthenticated(message: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=error_detail("UNAUTHENTICATED", message),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_auth_context(
    credentials: HTTPAuthorizationCredentials = Depends(auth_scheme),
) -> AuthContext:
    """Resolve the caller from a Bearer session token."""
    if not credentials or credentials.scheme.lower() != "bearer":
        raise _unauthenticated("Missing Bearer session token.")

    try:
        payload = decode_session_token(credentials.credentials)
    except ValueError as exc:
        raise _unauthenticated(str(exc)) from exc

    return AuthContext(
        user_id=int(payload["sub"]),
        role=str(payload["role"]),
    )


def require_roles(*roles: str) -> Callable[..., AuthContext]:
    """Return a dependency that admits only the listed roles."""
    allowed = frozenset(roles)

    async def _dependency(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if auth.role not in allowed:
            raise HTTPException(
                status_code=403,
                detail=error_detail("UNAUTHORIZED", "Forbidden - Insufficient permissions"),
            )
        return auth

    return _dependency

"""Domain errors shared by services and routers.

Each error carries the machine-readable ``code`` and the HTTP status it maps to,
so routers can surface them without a per-endpoint translation table.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class CodecastError(Exception):
    """Base class for expected, client-facing failures."""

    code = "INTERNAL"
    status_code = 500

    def __init__(self, message: str, *, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    def to_detail(self) -> Dict[str, Any]:
        detail: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.errors:
            detail["errors"] = self.errors
        return detail


class InvalidInputError(CodecastError, ValueError):
    code = "VALIDATION_ERROR"
    status_code = 400


class AuthenticationError(CodecastError):
    code = "UNAUTHENTICATED"
    status_code = 401


class PermissionDeniedError(CodecastError):
    code = "UNAUTHORIZED"
    status_code = 403


class NotFoundError(CodecastError, LookupError):
    code = "NOT_FOUND"
    status_code = 404


class ConflictError(CodecastError):
    code = "CONFLICT"
    status_code = 409


def error_detail(code: str, message: str) -> Dict[str, str]:
    """Build the ``detail`` payload used by every error response."""
    return {"code": code, "message": message}

"""Storage backends and the FastAPI dependency that hands them to routers."""

from fastapi import Request

from services.storage.base import COMMENT_STATUSES, VIDEO_STATUSES, Storage, VideoQuery
from services.storage.memory import MemoryStorage
from services.storage.sql import SqlStorage

__all__ = [
    "COMMENT_STATUSES",
    "VIDEO_STATUSES",
    "MemoryStorage",
    "SqlStorage",
    "Storage",
    "VideoQuery",
    "build_storage",
    "get_storage",
]


def build_storage(backend: str, session_maker=None) -> Storage:
    """Construct the configured backend once at process start."""
    if backend == "memory":
        return MemoryStorage()
    if backend == "database":
        if session_maker is None:
            from database import async_session_maker

            session_maker = async_session_maker
        return SqlStorage(session_maker)
    raise ValueError(f"Unknown storage backend: {backend}")


def get_storage(request: Request) -> Storage:
    """Resolve the process-wide storage attached to the application."""
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise RuntimeError("Storage backend is not initialised.")
    return storage

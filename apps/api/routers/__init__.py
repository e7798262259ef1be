"""Routers package."""

from . import (
    health,
    auth,
    users,
    videos,
    comments,
    creator,
    admin,
    watch_history,
    watch_later,
)

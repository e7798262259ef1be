"""Fixed-window throttling for the public credential endpoints.

Counters live in Redis so every API worker shares one quota per client. When
Redis cannot be reached the worker keeps its own in-process window instead.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict

from fastapi import HTTPException, Request
import redis.asyncio as redis
from redis.exceptions import RedisError

from config import settings
from services.errors import error_detail

logger = logging.getLogger(__name__)

KEY_PREFIX = "codecast:throttle"

_local_counters: Dict[str, int] = {}
_local_lock = asyncio.Lock()


def _caller_address(request: Request) -> str:
    """Peer address of the connection; the forwarded header only when no peer is known."""
    if request.client and request.client.host:
        return request.client.host
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return "unknown"


def _window(window_seconds: int, now: float) -> tuple[int, int]:
    """Return the current bucket number and the seconds left in it."""
    bucket = int(now // window_seconds)
    retry_after = max(int((bucket + 1) * window_seconds - now), 1)
    return bucket, retry_after


async def _count_in_redis(key: str, window_seconds: int) -> int:
    client = redis.from_url(settings.REDIS_URL, decode_responses=True, socket_connect_timeout=1)
    try:
        async with client.pipeline(transaction=True) as pipe:
            pipe.incr(key)
            pipe.expire(key, window_seconds)
            hits, _ = await pipe.execute()
    finally:
        await client.aclose()
    return int(hits)


async def _count_locally(key: str, bucket: int) -> int:
    async with _local_lock:
        stale = [name for name in _local_counters if int(name.rsplit(":", 1)[1]) < bucket]
        for name in stale:
            del _local_counters[name]
        _local_counters[key] = _local_counters.get(key, 0) + 1
        return _local_counters[key]


def auth_throttle(action: str) -> Callable[[Request], Awaitable[None]]:
    """Dependency limiting ``action`` to ``AUTH_RATE_LIMIT`` calls per client per window."""

    async def _dependency(request: Request) -> None:
        if getattr(request.app.state, "disable_rate_limits", False):
            return

        limit = settings.AUTH_RATE_LIMIT
        window_seconds = max(settings.AUTH_RATE_WINDOW_SECONDS, 1)
        bucket, retry_after = _window(window_seconds, time.time())
        key = f"{KEY_PREFIX}:{action}:{_caller_address(request)}:{bucket}"

        try:
            hits = await _count_in_redis(key, window_seconds)
        except (RedisError, OSError) as exc:
            logger.debug("throttle falling back to local counters action=%s: %s", action, exc)
            hits = await _count_locally(key, bucket)

        if hits > limit:
            logger.warning("throttled action=%s client=%s hits=%s", action, _caller_address(request), hits)
            raise HTTPException(
                status_code=429,
                detail=error_detail("RATE_LIMITED", f"Too many {action} attempts. Try again later."),
                headers={"Retry-After": str(retry_after)},
            )

    return _dependency

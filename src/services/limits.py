"""Rate limiting and idempotency helpers."""
from __future__ import annotations

import time
from typing import Optional

import redis.asyncio as redis
from fastapi import HTTPException, status

from src.core.config import settings

_redis_client: redis.Redis | None = None


async def _get_client() -> redis.Redis:
    """Return a cached Redis client instance."""

    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            str(settings.REDIS_URI), decode_responses=True
        )
    return _redis_client


async def check_rate_limit(user_id: str) -> None:
    """Enforce a simple fixed-window rate limit per user."""

    client = await _get_client()
    minute_window = int(time.time() // 60)
    key = f"rl:{user_id}:{minute_window}"
    current = await client.incr(key)
    if current == 1:
        await client.expire(key, 60)
    if current > settings.limits.rate_limit_rpm:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded",
        )


async def ensure_idempotent(user_id: str, key: Optional[str]) -> None:
    """Reject duplicate POST requests sharing the same idempotency key."""

    if not key:
        return
    client = await _get_client()
    redis_key = f"idemp:{user_id}:{key}"
    was_set = await client.set(
        redis_key, "1", ex=settings.limits.idempotency_ttl_seconds, nx=True
    )
    if not was_set:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Duplicate request (idempotency)",
        )


async def complete_idempotency(user_id: str, key: Optional[str], result_id: str) -> None:
    """Record the id produced under ``key`` so duplicates stay rejected for the TTL."""

    if not key:
        return
    client = await _get_client()
    await client.set(
        f"idemp:{user_id}:{key}", result_id, ex=settings.limits.idempotency_ttl_seconds
    )


async def release_idempotency(user_id: str, key: Optional[str]) -> None:
    """Free ``key`` after a failed request so the client can retry with it."""

    if not key:
        return
    client = await _get_client()
    await client.delete(f"idemp:{user_id}:{key}")


async def close_client() -> None:
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
    _redis_client = None

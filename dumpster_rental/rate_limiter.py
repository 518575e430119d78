"""
Per-IP rate limiting for the public endpoints (contact form, guest inquiry, distance lookup).

Counts live in process memory and are mirrored to Redis every few seconds so that
several API workers share roughly the same window. When Redis is unreachable the
in-memory window keeps limiting on its own.
"""

import logging
import os
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)

SYNC_INTERVAL_SECONDS = 10
CLEANUP_INTERVAL_SECONDS = 60
REDIS_RETRY_SECONDS = 60

_redis_client: Optional[redis.Redis] = None
_redis_failed_at = 0.0

# {key: {"count": int, "reset_at": int, "synced_at": int}}
_windows: dict[str, dict] = {}
_windows_lock = Lock()
_last_cleanup = 0


def build_redis_client() -> redis.Redis:
    """Redis client from REDIS_URL, or REDIS_HOST/PORT/PASSWORD/DB/SSL"""
    redis_url = os.getenv("REDIS_URL")
    options = {
        "decode_responses": True,
        "socket_connect_timeout": 5,
        "socket_timeout": 5,
        "retry_on_timeout": True,
        "health_check_interval": 30,
    }
    if redis_url:
        return redis.from_url(redis_url, **options)
    return redis.Redis(
        host=os.getenv("REDIS_HOST", "localhost"),
        port=int(os.getenv("REDIS_PORT", "6379")),
        password=os.getenv("REDIS_PASSWORD") or None,
        db=int(os.getenv("REDIS_DB", "0")),
        ssl=os.getenv("REDIS_SSL", "false").lower() == "true",
        **options,
    )


def get_redis_client() -> Optional[redis.Redis]:
    """Shared Redis client, or None while Redis is unreachable"""
    global _redis_client, _redis_failed_at

    if _redis_client is not None:
        return _redis_client
    if _redis_failed_at and time.time() - _redis_failed_at < REDIS_RETRY_SECONDS:
        return None

    try:
        client = build_redis_client()
        client.ping()
        _redis_client = client
        logger.info("✅ Redis connected for rate limiting")
    except Exception as e:
        _redis_failed_at = time.time()
        logger.warning(f"⚠️ Redis unavailable, rate limiting is process-local: {e}")
        return None
    return _redis_client


def reset_rate_limits():
    """Forget every window (used between tests)"""
    with _windows_lock:
        _windows.clear()


def _cleanup(now: int):
    global _last_cleanup
    if now - _last_cleanup < CLEANUP_INTERVAL_SECONDS:
        return
    expired = [key for key, window in _windows.items() if now >= window["reset_at"]]
    for key in expired:
        del _windows[key]
    if expired:
        logger.debug(f"🧹 Cleaned up {len(expired)} expired rate limit windows")
    _last_cleanup = now


def _load_window(key: str, window_seconds: int, now: int, client: Optional[redis.Redis]) -> dict:
    if client is not None:
        try:
            count = client.get(key)
            ttl = client.ttl(key)
            if count and ttl > 0:
                return {"count": int(count), "reset_at": now + ttl, "synced_at": now}
        except Exception as e:
            logger.warning(f"⚠️ Failed to load rate limit window from Redis: {e}")
    return {"count": 0, "reset_at": now + window_seconds, "synced_at": now}


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: Optional[redis.Redis] = None
) -> tuple[bool, int, int]:
    """
    Count one request against ``key``.

    Returns:
        Tuple of (is_allowed, current_count, seconds_until_reset)
    """
    now = int(time.time())

    with _windows_lock:
        _cleanup(now)

        window = _windows.get(key)
        if window is None:
            window = _windows[key] = _load_window(key, window_seconds, now, client)

        if now >= window["reset_at"]:
            window.update(count=0, reset_at=now + window_seconds, synced_at=0)

        allowed = window["count"] < limit
        if allowed:
            window["count"] += 1

        if client is not None and now - window["synced_at"] >= SYNC_INTERVAL_SECONDS:
            try:
                client.set(key, window["count"], ex=max(1, window["reset_at"] - now))
                window["synced_at"] = now
            except Exception as e:
                logger.warning(f"⚠️ Failed to sync rate limit window to Redis: {e}")

        return allowed, window["count"], max(0, window["reset_at"] - now)


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def create_rate_limiter(
    limit: int, window_seconds: int, key_prefix: str = "rate_limit", use_ip: bool = True
):
    """
    Build a FastAPI dependency enforcing ``limit`` requests per ``window_seconds``.

    Example:
        contact_rate_limit = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="contact")

        @router.post("/contact")
        async def contact(data: ContactRequest, _: None = Depends(contact_rate_limit)):
            ...
    """

    async def rate_limiter(request: Request):
        key = f"{key_prefix}:{client_ip(request) if use_ip else 'global'}"
        allowed, count, ttl = check_rate_limit(key, limit, window_seconds, get_redis_client())

        if not allowed:
            logger.warning(f"🚫 Rate limit exceeded for {key} ({count}/{limit})")
            raise HTTPException(
                status_code=429,
                detail={
                    "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                    "retry_after": ttl,
                },
                headers={"Retry-After": str(ttl)},
            )

        request.state.rate_limit_remaining = limit - count

    return rate_limiter

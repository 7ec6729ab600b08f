"""Redis cache for per-user derived views, invalidated by version bumps."""
# Standard library imports
import logging
import os
from typing import Optional

# Third-party imports
import redis

logger = logging.getLogger(__name__)

_redis_client: Optional[redis.Redis] = None


def get_redis() -> Optional[redis.Redis]:
    """
    Returns a Redis client if REDIS_HOST is configured and reachable, else None.

    Caching is optional; every helper below degrades to a no-op without Redis.
    """
    global _redis_client
    if _redis_client:
        return _redis_client

    host = os.getenv("REDIS_HOST")
    if not host:
        return None

    try:
        port = int(os.getenv("REDIS_PORT", "6379"))
        client = redis.Redis(
            host=host,
            port=port,
            decode_responses=False,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )
        client.ping()
        _redis_client = client
        logger.info(f"Redis connected: {host}:{port}")
        return client
    except redis.RedisError as e:
        logger.warning(f"Redis connection failed: {host}:{port} - {type(e).__name__}: {e}")
        return None


def user_version(user_id: str) -> int:
    """Current cache generation for a user's records. Starts at 1."""
    r = get_redis()
    if not r:
        return 1

    key = f"version:{user_id}"
    version = r.get(key)
    if version is None:
        r.set(key, 1, nx=True)
        return 1
    return int(version)


def invalidate_user(user_id: str) -> None:
    """Bump the user's generation so every cached view of their records misses."""
    r = get_redis()
    if not r:
        return
    r.incr(f"version:{user_id}")


def view_key(kind: str, user_id: str, *parts: str) -> str:
    suffix = ":".join(parts)
    return f"{kind}:{user_id}:v{user_version(user_id)}:{suffix}"


def get_cached(key: str) -> Optional[bytes]:
    r = get_redis()
    if not r:
        return None
    value = r.get(key)
    logger.info(f"Cache lookup: {key}, hit: {value is not None}")
    return value


def set_cached(key: str, value: bytes, ex: int = 300) -> None:
    r = get_redis()
    if not r:
        return
    try:
        r.setex(key, ex, value)
        logger.info(f"Cache store: {key}, {len(value)} bytes, ttl {ex}s")
    except redis.RedisError as e:
        logger.warning(f"Redis set failed for key {key}: {type(e).__name__}: {e}")

"""Token-bucket rate limiting backed by a Redis Lua script."""
import logging
import os
import time
from dataclasses import dataclass

import redis.asyncio as redis
from redis.exceptions import RedisError
from fastapi import Request, status
from fastapi.responses import JSONResponse

from healthdesk.config import DISABLE_RATE_LIMIT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BucketPolicy:
    name: str
    rate: float
    capacity: int


USER_POLICY = BucketPolicy("user", rate=2.0, capacity=30)
ANON_POLICY = BucketPolicy("anon", rate=0.5, capacity=10)
# Credential endpoints get a small bucket per client IP.
LOGIN_POLICY = BucketPolicy("login", rate=0.1, capacity=5)

LOGIN_PATHS = ("/auth/login", "/auth/register", "/admin/login")

BUCKET_TTL_SECONDS = 120

TOKEN_BUCKET_SCRIPT = """
local key = KEYS[1]
local capacity = tonumber(ARGV[1])
local rate = tonumber(ARGV[2])
local now = tonumber(ARGV[3])
local ttl = tonumber(ARGV[4])

local bucket = redis.call('HMGET', key, 'tokens', 'last_refill')
local tokens = tonumber(bucket[1]) or capacity
local last_refill = tonumber(bucket[2]) or now

tokens = math.min(capacity, tokens + (now - last_refill) * rate)

local allowed = 0
if tokens >= 1 then
    tokens = tokens - 1
    allowed = 1
end

redis.call('HSET', key, 'tokens', tokens, 'last_refill', now)
redis.call('EXPIRE', key, ttl)
return allowed
"""

_redis_client: redis.Redis | None = None
_script_sha: str | None = None


async def get_redis_client() -> redis.Redis | None:
    """Async Redis client singleton for rate limiting; None when not configured."""
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
        await client.ping()
        _redis_client = client
        logger.info(f"Rate limiter Redis connected: {host}:{port}")
        return client
    except RedisError as e:
        logger.warning(f"Rate limiter Redis connection failed: {host}:{port} - {type(e).__name__}: {e}")
        return None


async def load_rate_limit_script() -> str | None:
    """Load the Lua script into Redis and return its SHA. Call on startup."""
    global _script_sha
    if _script_sha:
        return _script_sha

    redis_client = await get_redis_client()
    if not redis_client:
        logger.warning("Redis not available, rate limiting disabled")
        return None

    try:
        _script_sha = await redis_client.script_load(TOKEN_BUCKET_SCRIPT)
        logger.info(f"Rate limit script loaded: {_script_sha[:8]}...")
        return _script_sha
    except RedisError as e:
        logger.warning(f"Failed to load rate limit script: {e}")
        return None


def get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def select_policy(request: Request) -> tuple[BucketPolicy, str]:
    """Pick the bucket policy and identifier for a request."""
    if request.url.path in LOGIN_PATHS:
        return LOGIN_POLICY, f"ip:{get_client_ip(request)}"

    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return USER_POLICY, f"user:{user_id}"
    return ANON_POLICY, f"ip:{get_client_ip(request)}"


async def check_rate_limit(policy: BucketPolicy, identifier: str) -> bool:
    """Take one token from the bucket. Returns True if allowed; fails open."""
    redis_client = await get_redis_client()
    if not redis_client or not _script_sha:
        return True

    key = f"ratelimit:{policy.name}:{identifier}"
    try:
        result = await redis_client.evalsha(
            _script_sha, 1, key, policy.capacity, policy.rate, time.time(), BUCKET_TTL_SECONDS
        )
        return bool(result)
    except RedisError as e:
        logger.warning(f"Rate limit check failed: {e}")
        return True


async def rate_limit_middleware(request: Request, call_next):
    if DISABLE_RATE_LIMIT or not _script_sha:
        return await call_next(request)

    policy, identifier = select_policy(request)
    if not await check_rate_limit(policy, identifier):
        logger.info(f"Rate limited {identifier} on {request.url.path} ({policy.name})")
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"detail": "Rate limit exceeded"},
            headers={"Retry-After": str(int(1 / policy.rate))}
        )

    response = await call_next(request)
    response.headers["X-RateLimit-Limit"] = str(policy.capacity)
    response.headers["X-RateLimit-Rate"] = f"{policy.rate:.1f}/s"
    return response

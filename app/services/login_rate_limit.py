from __future__ import annotations

import hashlib
from functools import lru_cache

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.core.config import get_settings

logger = structlog.get_logger(__name__)

LOGIN_FAILURES_KEY_PREFIX = "diamond_quiz:login_failures"


class LoginRateLimitedError(Exception):
    pass


def build_failure_key(*, email: str, client_ip: str | None) -> str:
    digest = hashlib.sha256(f"{email.strip().lower()}|{client_ip or '-'}".encode("utf-8")).hexdigest()
    return f"{LOGIN_FAILURES_KEY_PREFIX}:{digest[:32]}"


class LoginRateLimiter:
    """Fixed-window counter of failed logins per email and client address.

    Redis outages fail open: logins keep working and a warning is logged.
    """

    def __init__(self, redis: Redis, *, max_attempts: int, window_seconds: int) -> None:
        self._redis = redis
        self._max_attempts = max_attempts
        self._window_seconds = window_seconds

    async def ensure_allowed(self, *, email: str, client_ip: str | None) -> None:
        key = build_failure_key(email=email, client_ip=client_ip)
        try:
            raw_count = await self._redis.get(key)
        except RedisError as exc:
            logger.warning("login_rate_limit_unavailable", error=str(exc))
            return
        if raw_count is not None and int(raw_count) >= self._max_attempts:
            logger.warning("login_rate_limited", client_ip=client_ip)
            raise LoginRateLimitedError

    async def register_failure(self, *, email: str, client_ip: str | None) -> int:
        key = build_failure_key(email=email, client_ip=client_ip)
        try:
            # The window TTL is set in the same MULTI as the increment, so a key never outlives it.
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.set(key, 0, ex=self._window_seconds, nx=True)
                pipe.incr(key)
                _, count = await pipe.execute()
        except RedisError as exc:
            logger.warning("login_rate_limit_unavailable", error=str(exc))
            return 0
        return int(count)

    async def reset(self, *, email: str, client_ip: str | None) -> None:
        try:
            await self._redis.delete(build_failure_key(email=email, client_ip=client_ip))
        except RedisError as exc:
            logger.warning("login_rate_limit_unavailable", error=str(exc))


@lru_cache(maxsize=1)
def get_login_rate_limiter() -> LoginRateLimiter:
    settings = get_settings()
    return LoginRateLimiter(
        Redis.from_url(settings.redis_url),
        max_attempts=settings.login_max_attempts,
        window_seconds=settings.login_window_seconds,
    )

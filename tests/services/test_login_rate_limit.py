from __future__ import annotations

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.services.login_rate_limit import (
    LOGIN_FAILURES_KEY_PREFIX,
    LoginRateLimitedError,
    LoginRateLimiter,
    build_failure_key,
)


class FakePipeline:
    def __init__(self, redis: FakeRedis) -> None:
        self._redis = redis
        self._commands: list[tuple[str, tuple, dict]] = []

    async def __aenter__(self) -> FakePipeline:
        return self

    async def __aexit__(self, *exc_info) -> None:  # noqa: ANN002
        self._commands.clear()

    def set(self, key: str, value: int, *, ex: int | None = None, nx: bool = False) -> FakePipeline:
        self._commands.append(("set", (key, value), {"ex": ex, "nx": nx}))
        return self

    def incr(self, key: str) -> FakePipeline:
        self._commands.append(("incr", (key,), {}))
        return self

    async def execute(self) -> list[object]:
        results: list[object] = []
        for name, args, kwargs in self._commands:
            if name == "set":
                key, value = args
                if kwargs["nx"] and key in self._redis.values:
                    results.append(None)
                    continue
                self._redis.values[key] = value
                if kwargs["ex"] is not None:
                    self._redis.expirations[key] = kwargs["ex"]
                results.append(True)
            else:
                (key,) = args
                self._redis.values[key] = self._redis.values.get(key, 0) + 1
                results.append(self._redis.values[key])
        return results


class FakeRedis:
    def __init__(self) -> None:
        self.values: dict[str, int] = {}
        self.expirations: dict[str, int] = {}

    async def get(self, key: str):
        value = self.values.get(key)
        return None if value is None else str(value).encode("utf-8")

    def pipeline(self, *, transaction: bool = True) -> FakePipeline:
        assert transaction is True
        return FakePipeline(self)

    async def delete(self, key: str) -> int:
        self.expirations.pop(key, None)
        return 1 if self.values.pop(key, None) is not None else 0


class BrokenPipeline(FakePipeline):
    async def execute(self) -> list[object]:
        raise RedisConnectionError("redis down")


class BrokenRedis:
    async def get(self, key: str):
        raise RedisConnectionError("redis down")

    def pipeline(self, *, transaction: bool = True) -> BrokenPipeline:
        return BrokenPipeline(FakeRedis())

    async def delete(self, key: str) -> int:
        raise RedisConnectionError("redis down")


def test_build_failure_key_normalizes_email_and_hides_it() -> None:
    key = build_failure_key(email=" Ada@Example.com ", client_ip="10.0.0.1")

    assert key == build_failure_key(email="ada@example.com", client_ip="10.0.0.1")
    assert key != build_failure_key(email="ada@example.com", client_ip="10.0.0.2")
    assert key.startswith(f"{LOGIN_FAILURES_KEY_PREFIX}:")
    assert "@" not in key


@pytest.mark.asyncio
async def test_limiter_blocks_after_max_failures_within_window() -> None:
    redis = FakeRedis()
    limiter = LoginRateLimiter(redis, max_attempts=3, window_seconds=900)

    for _ in range(3):
        await limiter.ensure_allowed(email="a@example.com", client_ip="10.0.0.1")
        await limiter.register_failure(email="a@example.com", client_ip="10.0.0.1")

    with pytest.raises(LoginRateLimitedError):
        await limiter.ensure_allowed(email="a@example.com", client_ip="10.0.0.1")

    key = build_failure_key(email="a@example.com", client_ip="10.0.0.1")
    assert redis.expirations == {key: 900}
    await limiter.ensure_allowed(email="a@example.com", client_ip="10.0.0.2")


@pytest.mark.asyncio
async def test_limiter_reset_clears_failures() -> None:
    redis = FakeRedis()
    limiter = LoginRateLimiter(redis, max_attempts=1, window_seconds=60)

    assert await limiter.register_failure(email="a@example.com", client_ip=None) == 1
    await limiter.reset(email="a@example.com", client_ip=None)

    await limiter.ensure_allowed(email="a@example.com", client_ip=None)


@pytest.mark.asyncio
async def test_limiter_fails_open_when_redis_is_unavailable() -> None:
    limiter = LoginRateLimiter(BrokenRedis(), max_attempts=1, window_seconds=60)

    await limiter.ensure_allowed(email="a@example.com", client_ip="10.0.0.1")
    assert await limiter.register_failure(email="a@example.com", client_ip="10.0.0.1") == 0
    await limiter.reset(email="a@example.com", client_ip="10.0.0.1")


@pytest.mark.asyncio
async def test_register_failure_sets_window_with_first_increment_only() -> None:
    redis = FakeRedis()
    limiter = LoginRateLimiter(redis, max_attempts=5, window_seconds=900)
    key = build_failure_key(email="a@example.com", client_ip="10.0.0.1")

    assert await limiter.register_failure(email="a@example.com", client_ip="10.0.0.1") == 1
    assert redis.expirations == {key: 900}

    redis.expirations[key] = 120
    assert await limiter.register_failure(email="a@example.com", client_ip="10.0.0.1") == 2
    assert redis.expirations == {key: 120}

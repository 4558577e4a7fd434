"""Redis client adapter for the Config Access store.

Normalizes the interface between the Upstash SDK (cloud) and fakeredis (local
dev and tests). The two agree on command names but not on return types:
redis-py style clients may hand back bytes, Upstash always returns str.
RedisAdapter decodes everything so the repository only ever sees str.

Environment detection:
  - UPSTASH_REDIS_REST_URL set → Upstash SDK (staging/prod)
  - Otherwise → fakeredis (local dev, no Docker, no cloud dependency)
"""

from __future__ import annotations

import os
from typing import Any


def _decode(value: Any) -> str:
    return value if isinstance(value, str) else value.decode()


class RedisAdapter:
    """Unified async Redis interface over Upstash SDK or fakeredis."""

    def __init__(self, raw_client: Any) -> None:
        self._client = raw_client

    async def get(self, key: str) -> str | None:
        value = await self._client.get(key)
        return None if value is None else _decode(value)

    async def set(self, key: str, value: str) -> None:
        await self._client.set(key, value)

    async def hset(self, key: str, field: str, value: str) -> None:
        await self._client.hset(key, field, value)

    async def hgetall(self, key: str) -> dict[str, str]:
        result = await self._client.hgetall(key)
        if not result:
            return {}
        if isinstance(result, dict):
            return {_decode(k): _decode(v) for k, v in result.items()}
        # Upstash may return a flat [field, value, field, value, ...] list
        items = [_decode(r) for r in result]
        return dict(zip(items[::2], items[1::2], strict=True))


# ============================================================================
# Singleton management
# ============================================================================

_client: RedisAdapter | None = None


def get_client() -> RedisAdapter:
    """Return a lazily-initialized RedisAdapter singleton.

    Environment detection:
      - UPSTASH_REDIS_REST_URL set → Upstash SDK
      - Otherwise → fakeredis (in-memory, no external dependency)
    """
    global _client
    if _client is not None:
        return _client

    if os.environ.get("UPSTASH_REDIS_REST_URL"):
        from upstash_redis.asyncio import Redis

        _client = RedisAdapter(Redis.from_env())
    else:
        from fakeredis.aioredis import FakeRedis

        _client = RedisAdapter(FakeRedis(decode_responses=True))

    return _client


def reset_client() -> None:
    """Reset the client singleton — used in tests to inject mocks."""
    global _client
    _client = None


def set_client(adapter: RedisAdapter) -> None:
    """Inject a client — used in tests."""
    global _client
    _client = adapter

"""RedisCacheStore — concrete implementation of CacheStoreProtocol.

Values are pickled before SET and unpickled after GET. Expiry is delegated
to Redis (``SET key value EX ttl``).
"""

import pickle
from typing import Any

import redis.asyncio as aioredis


class RedisCacheStore:
    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    async def get(self, key: str) -> Any | None:
        raw = await self._client.get(key)
        if raw is None:
            return None
        return pickle.loads(raw)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        await self._client.set(key, pickle.dumps(value), ex=ttl)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

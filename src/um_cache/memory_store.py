"""InMemoryCacheStore — process-local CacheStoreProtocol.

Used by unit tests and by ``CACHE_BACKEND=memory`` for local runs without
Redis. Entries are ``key -> (value, expires_at)`` on a monotonic clock;
an expired entry is absent and is purged when read. Values are deep-copied
on the way in and out, so callers get a private copy as they do from Redis.
"""

import copy
import time
from collections.abc import Callable
from typing import Any


class InMemoryCacheStore:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return copy.deepcopy(value)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        self._entries[key] = (copy.deepcopy(value), self._clock() + ttl)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._clock() < entry[1]

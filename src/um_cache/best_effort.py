"""Best-effort cache access.

Every cache read, write and delete in the service goes through
BestEffortCache. Any failure of the underlying store is logged on the
``um.cache`` logger and swallowed: a failed read is a miss, a failed write
or delete is skipped. Errors raised by a ``remember`` loader are not cache
failures and propagate unchanged.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from src.um_cache.protocol import CacheStoreProtocol

logger = logging.getLogger("um.cache")

T = TypeVar("T")


class BestEffortCache:
    def __init__(self, store: CacheStoreProtocol) -> None:
        self._store = store

    async def get(self, key: str) -> Any | None:
        try:
            return await self._store.get(key)
        except Exception as exc:
            logger.error("Cache get failed key=%s: %s", key, exc)
            return None

    async def put(self, key: str, value: Any, ttl: int) -> None:
        try:
            await self._store.set(key, value, ttl)
        except Exception as exc:
            logger.error("Cache put failed key=%s: %s", key, exc)

    async def forget(self, key: str) -> None:
        try:
            await self._store.delete(key)
        except Exception as exc:
            logger.error("Cache forget failed key=%s: %s", key, exc)

    async def remember(
        self,
        key: str,
        ttl: int,
        loader: Callable[[], Awaitable[T]],
    ) -> T:
        """Read-through: return the cached value, or load, populate and return.

        ``None`` results are returned but never stored.
        """
        cached = await self.get(key)
        if cached is not None:
            return cached  # type: ignore[no-any-return]

        value = await loader()
        if value is not None:
            await self.put(key, value, ttl)
        return value

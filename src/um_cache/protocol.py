"""Cache store Protocol — dependency inversion for testability.

A store maps a string key to a value with an expiry. Production uses
RedisCacheStore; unit tests inject InMemoryCacheStore.
"""

from typing import Any, Protocol


class CacheStoreProtocol(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl: int) -> None: ...

    async def delete(self, key: str) -> None: ...

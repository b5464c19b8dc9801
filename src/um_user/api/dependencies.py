"""FastAPI dependencies for the users API.

The cache backend is chosen by ``settings.CACHE_BACKEND``:
  redis  — RedisCacheStore over the shared pool (production)
  memory — one process-local InMemoryCacheStore (local runs without Redis)
"""

from typing import Annotated

from fastapi import Depends

from config.settings import settings
from src.um_cache.memory_store import InMemoryCacheStore
from src.um_cache.protocol import CacheStoreProtocol
from src.um_cache.redis_store import RedisCacheStore
from src.um_common.redis_client import get_redis
from src.um_user.application.service import UserCacheService

_memory_store = InMemoryCacheStore()


async def get_cache_store() -> CacheStoreProtocol:
    if settings.CACHE_BACKEND == "memory":
        return _memory_store
    return RedisCacheStore(await get_redis())


async def get_user_service(
    store: Annotated[CacheStoreProtocol, Depends(get_cache_store)],
) -> UserCacheService:
    return UserCacheService(store, ttl=settings.USER_CACHE_TTL_SECONDS)

"""UserCacheService — user reads/writes behind a read-through cache.

Cache layout (all entries expire after ``ttl`` seconds):
  user:<id>                -> User
  user:email:<md5(email)>  -> User
  users:all                -> list[User], ordered by id

Writes go to the store first, then the cache is maintained best-effort:
any cache failure is logged by BestEffortCache and never fails the call.
Store errors (UserNotFoundError, EmailExistsError, anything else) propagate.

The caller (router) passes the db session and owns the transaction. It
runs the store phase (insert_user / apply_update) inside the transaction
and the cache phase (cache_created_user / refresh_updated_user) only after
the commit, so a rolled-back write never reaches the cache.
"""

import hashlib
import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.um_cache.best_effort import BestEffortCache
from src.um_cache.protocol import CacheStoreProtocol
from src.um_common.errors import UserNotFoundError
from src.um_common.logging_config import redact
from src.um_gateway.auth.password import hash_password
from src.um_user.domain.models import User
from src.um_user.domain.repository import UserRepositoryProtocol
from src.um_user.infrastructure.persistence import UserRepository

logger = logging.getLogger("um.user")

CACHE_TTL = 3600
CACHE_KEY_PREFIX = "user:"
CACHE_EMAIL_PREFIX = "user:email:"
CACHE_ALL_USERS_KEY = "users:all"


def user_cache_key(user_id: int) -> str:
    return f"{CACHE_KEY_PREFIX}{user_id}"


def user_email_cache_key(email: str) -> str:
    # md5 only bounds key length / charset; collisions are accepted
    return f"{CACHE_EMAIL_PREFIX}{hashlib.md5(email.encode('utf-8')).hexdigest()}"


def _hash_password_field(fields: dict[str, Any]) -> dict[str, Any]:
    """Replace plaintext ``password`` with ``password_hash``. Returns a copy."""
    data = dict(fields)
    if data.get("password") is not None:
        data["password_hash"] = hash_password(data.pop("password"))
    else:
        data.pop("password", None)
    return data


class UserCacheService:
    def __init__(
        self,
        cache_store: CacheStoreProtocol,
        repo: UserRepositoryProtocol | None = None,
        ttl: int = CACHE_TTL,
    ) -> None:
        self._cache = BestEffortCache(cache_store)
        self._repo: UserRepositoryProtocol = repo or UserRepository()
        self._ttl = ttl

    # ------------------------------------------------------------------
    # Writes
    #
    # Each write has a store phase, run inside the caller's transaction,
    # and a cache phase, run after the commit. create_user / update_user
    # run both back to back for callers without an outer transaction.
    # ------------------------------------------------------------------

    async def create_user(self, db: AsyncSession, fields: dict[str, Any]) -> User:
        user = await self.insert_user(db, fields)
        await self.cache_created_user(user)
        return user

    async def insert_user(self, db: AsyncSession, fields: dict[str, Any]) -> User:
        try:
            return await self._repo.insert(db, _hash_password_field(fields))
        except Exception as exc:
            logger.error(
                "Failed to create user: %s data=%s", exc, redact(fields)
            )
            raise

    async def cache_created_user(self, user: User) -> None:
        await self._cache_user(user)
        await self._cache.forget(CACHE_ALL_USERS_KEY)

    async def update_user(
        self, db: AsyncSession, user_id: int, fields: dict[str, Any]
    ) -> User:
        """Apply a partial update and refresh the cache entries for the user.

        Returns the record produced by the store update, not the re-fetched
        copy used to repopulate the cache.
        """
        user, old_email = await self.apply_update(db, user_id, fields)
        await self.refresh_updated_user(db, user, old_email)
        return user

    async def apply_update(
        self, db: AsyncSession, user_id: int, fields: dict[str, Any]
    ) -> tuple[User, str]:
        """Store phase of an update. Returns the updated user and its old email."""
        try:
            current = await self.get_user(db, user_id)
            old_email = current.email
            user = await self._repo.update(db, user_id, _hash_password_field(fields))
        except Exception as exc:
            logger.error(
                "Failed to update user: %s user_id=%s data=%s",
                exc,
                user_id,
                redact(fields),
            )
            raise
        return user, old_email

    async def refresh_updated_user(
        self, db: AsyncSession, user: User, old_email: str
    ) -> None:
        await self._cache.forget(user_cache_key(user.id))
        if user.email != old_email:
            await self._cache.forget(user_email_cache_key(old_email))

        try:
            fresh = await self._repo.find_by_id(db, user.id)
        except Exception as exc:
            logger.error("Failed to reload user for cache: %s user_id=%s", exc, user.id)
            fresh = None
        if fresh is not None:
            await self._cache_user(fresh)

        await self._cache.forget(CACHE_ALL_USERS_KEY)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_user(self, db: AsyncSession, user_id: int) -> User:
        async def load() -> User:
            user = await self._repo.find_by_id(db, user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            return user

        return await self._cache.remember(user_cache_key(user_id), self._ttl, load)

    async def get_user_by_email(self, db: AsyncSession, email: str) -> User | None:
        return await self._cache.remember(
            user_email_cache_key(email),
            self._ttl,
            lambda: self._repo.find_by_email(db, email),
        )

    async def get_all_users(self, db: AsyncSession) -> list[User]:
        return await self._cache.remember(
            CACHE_ALL_USERS_KEY,
            self._ttl,
            lambda: self._repo.find_all(db),
        )

    async def email_available(
        self, db: AsyncSession, email: str, ignore_user_id: int | None = None
    ) -> bool:
        """Uniqueness pre-check. Reads the store directly; the cache may be stale."""
        owner = await self._repo.find_by_email(db, email)
        return owner is None or owner.id == ignore_user_id

    # ------------------------------------------------------------------
    # Cache maintenance
    # ------------------------------------------------------------------

    async def _cache_user(self, user: User) -> None:
        await self._cache.put(user_cache_key(user.id), user, self._ttl)
        await self._cache.put(user_email_cache_key(user.email), user, self._ttl)

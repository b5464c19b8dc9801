"""In-memory stand-ins shared by unit tests."""

from collections import Counter
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from src.um_common.errors import EmailExistsError, UserNotFoundError
from src.um_user.domain.models import User


class FakeUserRepository:
    """Conforms to UserRepositoryProtocol; counts calls per method."""

    def __init__(self) -> None:
        self.rows: dict[int, User] = {}
        self.calls: Counter[str] = Counter()
        self._next_id = 1

    def _email_owner(self, email: str) -> User | None:
        return next((u for u in self.rows.values() if u.email == email), None)

    async def insert(self, db: Any, fields: dict[str, Any]) -> User:
        self.calls["insert"] += 1
        if self._email_owner(fields["email"]) is not None:
            raise EmailExistsError()
        now = datetime.now(timezone.utc)
        user = User(
            id=self._next_id,
            name=fields["name"],
            email=fields["email"],
            password_hash=fields["password_hash"],
            created_at=now,
            updated_at=now,
        )
        self.rows[user.id] = user
        self._next_id += 1
        return replace(user)

    async def find_by_id(self, db: Any, user_id: int) -> User | None:
        self.calls["find_by_id"] += 1
        user = self.rows.get(user_id)
        return replace(user) if user else None

    async def find_by_email(self, db: Any, email: str) -> User | None:
        self.calls["find_by_email"] += 1
        user = self._email_owner(email)
        return replace(user) if user else None

    async def find_all(self, db: Any) -> list[User]:
        self.calls["find_all"] += 1
        return [replace(u) for _, u in sorted(self.rows.items())]

    async def update(self, db: Any, user_id: int, fields: dict[str, Any]) -> User:
        self.calls["update"] += 1
        user = self.rows.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        owner = self._email_owner(fields.get("email", user.email))
        if owner is not None and owner.id != user_id:
            raise EmailExistsError()
        changes = {k: v for k, v in fields.items() if k in ("name", "email", "password_hash")}
        updated = replace(user, **changes, updated_at=datetime.now(timezone.utc))
        self.rows[user_id] = updated
        return replace(updated)


class FailingCacheStore:
    """CacheStoreProtocol whose every call raises, like an unreachable Redis."""

    def __init__(self) -> None:
        self.attempts = 0

    async def get(self, key: str) -> Any:
        self.attempts += 1
        raise ConnectionError("cache unavailable")

    async def set(self, key: str, value: Any, ttl: int) -> None:
        self.attempts += 1
        raise ConnectionError("cache unavailable")

    async def delete(self, key: str) -> None:
        self.attempts += 1
        raise ConnectionError("cache unavailable")


class FakeSession:
    """Just enough AsyncSession for routers: ``async with db.begin()``.

    Set ``commit_error`` to make a clean exit from the block fail the way a
    rejected COMMIT does; ``on_rollback`` runs whenever the block rolls back.
    """

    def __init__(self) -> None:
        self.transactions = 0
        self.rollbacks = 0
        self.commit_error: Exception | None = None
        self.on_rollback: Callable[[], object] | None = None

    def begin(self) -> "_FakeTransaction":
        self.transactions += 1
        return _FakeTransaction(self)

    def _roll_back(self) -> None:
        self.rollbacks += 1
        if self.on_rollback is not None:
            self.on_rollback()


class _FakeTransaction:
    def __init__(self, session: FakeSession) -> None:
        self._session = session

    async def __aenter__(self) -> "_FakeTransaction":
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        if exc_type is not None:
            self._session._roll_back()
        elif self._session.commit_error is not None:
            self._session._roll_back()
            raise self._session.commit_error
        return False


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

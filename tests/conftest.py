"""Shared test fixtures.

The HTTP client runs the real app with the DB session and the user service
overridden by in-memory fakes, so no PostgreSQL or Redis is needed.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import settings
from src.main import app
from src.um_cache.memory_store import InMemoryCacheStore
from src.um_common.database import get_db_session
from src.um_user.api.dependencies import get_user_service
from src.um_user.application.service import UserCacheService
from tests.fakes import FakeSession, FakeUserRepository


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch: pytest.MonkeyPatch) -> None:
    """Cheapest bcrypt cost keeps hashing-heavy tests fast."""
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def cache_store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def service(cache_store: InMemoryCacheStore, repo: FakeUserRepository) -> UserCacheService:
    return UserCacheService(cache_store, repo=repo)


@pytest.fixture
def db() -> FakeSession:
    return FakeSession()


@pytest.fixture
async def client(service: UserCacheService, db: FakeSession) -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""

    async def _db():
        yield db

    app.dependency_overrides[get_db_session] = _db
    app.dependency_overrides[get_user_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

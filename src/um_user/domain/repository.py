"""Repository Protocol — dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.

``fields`` keys are column attributes: ``name``, ``email``, ``password_hash``.
"""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.um_user.domain.models import User


class UserRepositoryProtocol(Protocol):
    async def insert(self, db: AsyncSession, fields: dict[str, Any]) -> User:
        """Raises EmailExistsError if the email is already taken."""
        ...

    async def find_by_id(self, db: AsyncSession, user_id: int) -> User | None: ...

    async def find_by_email(self, db: AsyncSession, email: str) -> User | None: ...

    async def find_all(self, db: AsyncSession) -> list[User]: ...

    async def update(
        self, db: AsyncSession, user_id: int, fields: dict[str, Any]
    ) -> User:
        """Raises UserNotFoundError if absent, EmailExistsError on duplicate email."""
        ...

"""UserRepository — concrete implementation of UserRepositoryProtocol.

Transaction ownership: the CALLER (router) starts and commits the
transaction via `async with db.begin()`. Writes only flush, so the
UNIQUE(email) violation surfaces here as IntegrityError.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.um_common.errors import EmailExistsError, UserNotFoundError
from src.um_user.domain.models import User
from src.um_user.infrastructure.db_models import UserModel

_UPDATABLE_FIELDS = ("name", "email", "password_hash")


def _to_domain(model: UserModel) -> User:
    return User(
        id=model.id,
        name=model.name,
        email=model.email,
        password_hash=model.password_hash,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class UserRepository:
    async def insert(self, db: AsyncSession, fields: dict[str, Any]) -> User:
        model = UserModel(
            name=fields["name"],
            email=fields["email"],
            password_hash=fields["password_hash"],
        )
        db.add(model)
        await self._flush(db)
        await db.refresh(model)  # load id + server-side timestamps
        return _to_domain(model)

    async def find_by_id(self, db: AsyncSession, user_id: int) -> User | None:
        model = await self._get_model(db, user_id)
        return _to_domain(model) if model else None

    async def find_by_email(self, db: AsyncSession, email: str) -> User | None:
        result = await db.execute(select(UserModel).where(UserModel.email == email))
        model = result.scalar_one_or_none()
        return _to_domain(model) if model else None

    async def find_all(self, db: AsyncSession) -> list[User]:
        result = await db.execute(select(UserModel).order_by(UserModel.id))
        return [_to_domain(m) for m in result.scalars().all()]

    async def update(
        self, db: AsyncSession, user_id: int, fields: dict[str, Any]
    ) -> User:
        model = await self._get_model(db, user_id)
        if model is None:
            raise UserNotFoundError(user_id)

        changes = {k: v for k, v in fields.items() if k in _UPDATABLE_FIELDS}
        if changes:
            for attr, value in changes.items():
                setattr(model, attr, value)
            model.updated_at = datetime.now(timezone.utc)
            await self._flush(db)
        return _to_domain(model)

    async def _get_model(self, db: AsyncSession, user_id: int) -> UserModel | None:
        result = await db.execute(select(UserModel).where(UserModel.id == user_id))
        return result.scalar_one_or_none()

    async def _flush(self, db: AsyncSession) -> None:
        try:
            await db.flush()
        except IntegrityError as exc:
            # users has a single UNIQUE constraint: uq_users_email
            raise EmailExistsError() from exc

"""Password hashing (bcrypt).

bcrypt only reads the first 72 bytes of a secret and bcrypt>=5 rejects
longer input, so both hashing and verification cut the encoded password
at 72 bytes. The work factor comes from ``settings.BCRYPT_ROUNDS``.
"""

import bcrypt

from config.settings import settings

_BCRYPT_MAX_BYTES = 72


def _secret(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str, rounds: int | None = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_secret(plain), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(_secret(plain), hashed.encode("utf-8"))

"""Domain models for um_user — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    id: int
    name: str
    email: str
    password_hash: str  # bcrypt hash, never the plaintext
    created_at: datetime
    updated_at: datetime

"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: User
  9xxx: System
"""

from typing import Any


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        details: Any = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details
        super().__init__(message)


# --- 1xxx: User ---

class ValidationFailedError(AppError):
    """Field-level validation failure. ``errors`` maps field -> messages."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        super().__init__(1001, "Validation failed", 422, {"errors": errors})


class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409)


class UserNotFoundError(AppError):
    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(
            1003,
            "User not found",
            404,
            {"error": f"User not found with ID: {user_id}"},
        )


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error", error: str | None = None) -> None:
        super().__init__(9002, detail, 500, {"error": error} if error else None)

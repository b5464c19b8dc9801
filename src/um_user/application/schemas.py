"""Pydantic request/response schemas and payload validation for um_user.

Validation is transport-free: ``validate_user_payload`` returns the
validated fields or a ``field -> [messages]`` map, never raises, and never
touches HTTP. The router decides how to surface the errors.

Rules:
  name      required, string, max 255
  email     required, valid address
  password  required, min 8
On update every rule applies only to fields that are present.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator

from src.um_user.domain.models import User

EMAIL_TAKEN_MESSAGE = "The email has already been taken."
EMAIL_MAX_LENGTH = 255


def _check_email_length(v: str | None) -> str | None:
    if v is not None and len(v) > EMAIL_MAX_LENGTH:
        raise ValueError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
    return v


class UserCreateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8)

    @field_validator("email")
    @classmethod
    def email_length(cls, v: str | None) -> str | None:
        return _check_email_length(v)


class UserUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=8)

    @field_validator("email")
    @classmethod
    def email_length(cls, v: str | None) -> str | None:
        return _check_email_length(v)


class UserOut(BaseModel):
    """Public user representation — the password hash is never exposed."""

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@dataclass
class ValidationResult:
    fields: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def collect_field_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Flatten pydantic error dicts into ``{field: [messages]}``.

    Accepts both ``ValidationError.errors()`` and FastAPI's
    ``RequestValidationError.errors()`` (whose locations start with "body").
    """
    out: dict[str, list[str]] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if len(loc) > 1 and loc[0] in ("body", "path", "query"):
            loc = loc[1:]
        out.setdefault(".".join(loc) or "body", []).append(err["msg"])
    return out


def validate_user_payload(payload: Any, partial: bool = False) -> ValidationResult:
    """Validate a raw request body for create (``partial=False``) or update.

    On update, explicit ``null`` values count as present and are rejected.
    """
    if not isinstance(payload, dict):
        return ValidationResult(errors={"body": ["The request body must be a JSON object."]})

    schema = UserUpdateRequest if partial else UserCreateRequest
    try:
        validated = schema.model_validate(payload)
    except ValidationError as exc:
        return ValidationResult(errors=collect_field_errors(exc.errors()))

    if partial:
        nulls = {
            name: [f"The {name} field must not be null."]
            for name in validated.model_fields_set
            if getattr(validated, name) is None
        }
        if nulls:
            return ValidationResult(errors=nulls)

    return ValidationResult(fields=validated.model_dump(exclude_unset=partial))

"""Users REST endpoints.

GET    /users        — list (cached as users:all)
POST   /users        — create
GET    /users/{id}   — detail (cached as user:<id>)
PUT    /users/{id}   — partial update (PATCH accepted too)
DELETE /users/{id}   — declared, not implemented (no-op)

Validation runs before any store/cache access. Write endpoints own the
transaction via `async with db.begin()` and touch the cache only after it
commits.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.um_common.database import get_db_session
from src.um_common.errors import AppError, InternalError, ValidationFailedError
from src.um_common.logging_config import redact
from src.um_common.response import ApiResponse, success_response
from src.um_gateway.middleware.request_log import get_request_id
from src.um_user.api.dependencies import get_user_service
from src.um_user.application.schemas import (
    EMAIL_TAKEN_MESSAGE,
    UserOut,
    validate_user_payload,
)
from src.um_user.application.service import UserCacheService
from src.um_user.domain.models import User

logger = logging.getLogger("um.user")

router = APIRouter(prefix="/users", tags=["users"])

DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Service = Annotated[UserCacheService, Depends(get_user_service)]


def _respond(request: Request, data: Any, message: str = "success") -> ApiResponse:
    resp = success_response(data, message)
    resp.request_id = get_request_id(request)
    return resp


def _user_data(user: User) -> dict[str, Any]:
    return UserOut.from_domain(user).model_dump(mode="json")


def _error_detail(exc: Exception) -> str | None:
    return str(exc) if settings.EXPOSE_ERROR_DETAILS else None


def _loggable(payload: Any) -> Any:
    return redact(payload) if isinstance(payload, dict) else payload


@router.get("", response_model=ApiResponse, summary="List users")
async def list_users(request: Request, db: DbSession, service: Service) -> ApiResponse:
    users = await service.get_all_users(db)
    return _respond(request, [_user_data(u) for u in users])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Create user",
)
async def create_user(
    request: Request,
    db: DbSession,
    service: Service,
    payload: Annotated[Any, Body()],
) -> ApiResponse:
    logger.info("Create request received data=%s", _loggable(payload))

    result = validate_user_payload(payload)
    if not result.ok:
        raise ValidationFailedError(result.errors)

    try:
        async with db.begin():
            if not await service.email_available(db, result.fields["email"]):
                raise ValidationFailedError({"email": [EMAIL_TAKEN_MESSAGE]})
            user = await service.insert_user(db, result.fields)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Failed to create user")
        raise InternalError("Failed to create user", _error_detail(exc)) from exc

    await service.cache_created_user(user)
    return _respond(request, _user_data(user), "User created successfully")


@router.get("/{user_id}", response_model=ApiResponse, summary="Get user")
async def get_user(
    user_id: int, request: Request, db: DbSession, service: Service
) -> ApiResponse:
    user = await service.get_user(db, user_id)
    return _respond(request, _user_data(user))


@router.api_route(
    "/{user_id}",
    methods=["PUT", "PATCH"],
    response_model=ApiResponse,
    summary="Update user",
)
async def update_user(
    user_id: int,
    request: Request,
    db: DbSession,
    service: Service,
    payload: Annotated[Any, Body()],
) -> ApiResponse:
    logger.info("Update request received user_id=%s data=%s", user_id, _loggable(payload))

    result = validate_user_payload(payload, partial=True)
    if not result.ok:
        raise ValidationFailedError(result.errors)

    try:
        async with db.begin():
            email = result.fields.get("email")
            if email is not None and not await service.email_available(
                db, email, ignore_user_id=user_id
            ):
                raise ValidationFailedError({"email": [EMAIL_TAKEN_MESSAGE]})
            user, old_email = await service.apply_update(db, user_id, result.fields)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Failed to update user user_id=%s", user_id)
        raise InternalError("Failed to update user", _error_detail(exc)) from exc

    await service.refresh_updated_user(db, user, old_email)
    return _respond(request, _user_data(user), "User updated successfully")


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user (not implemented)",
)
async def delete_user(user_id: int) -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)

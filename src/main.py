"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000 --loop uvloop
or:       python -m src.main
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.um_common.database import engine
from src.um_common.errors import AppError, InternalError, ValidationFailedError
from src.um_common.logging_config import configure_logging
from src.um_common.redis_client import close_redis, get_redis
from src.um_common.response import error_response
from src.um_gateway.middleware.request_log import RequestLogMiddleware, get_request_id
from src.um_user.api.router import router as users_router
from src.um_user.application.schemas import collect_field_errors

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB (+ Redis when it backs the cache). Shutdown: dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    if settings.CACHE_BACKEND == "redis":
        redis = await get_redis()
        await redis.ping()
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


def _error_json(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, exc.details)
    resp.request_id = get_request_id(request)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_json(request, exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_json(request, ValidationFailedError(collect_field_errors(exc.errors())))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    detail = str(exc) if settings.EXPOSE_ERROR_DETAILS else None
    return _error_json(request, InternalError(error=detail))


app.include_router(users_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host="0.0.0.0", port=8000, loop="uvloop")

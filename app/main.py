"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1 import v1_router
from app.core.config import get_settings
from app.core.database import init_db
from app.core.errors import AppError
from app.core.logging import configure_logging
from app.services.broker import get_broker

_settings = get_settings()
configure_logging(_settings.log_level)
logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup: ensure tables exist (use Alembic in production)
    await init_db()
    yield
    # Shutdown: drop realtime subscriptions and the Redis client
    await get_broker().aclose()


app = FastAPI(
    title="RoomDesk",
    version="0.1.0",
    description="Hotel guest-services requests with live staff dashboards",
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in _settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error mapping ────────────────────────────────────────────

def _hotel_context(request: Request) -> str | None:
    return request.path_params.get("hotel_id")


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s on %s %s (hotel %s)",
            type(exc).__name__, request.method, request.url.path, _hotel_context(request),
        )
        return JSONResponse({"detail": "Server error"}, status_code=exc.status_code)
    logger.info(
        "%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail
    )
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        {"detail": "Invalid request", "errors": errors},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(
        "Storage error on %s %s (hotel %s)",
        request.method, request.url.path, _hotel_context(request),
    )
    return JSONResponse({"detail": "Server error"}, status_code=500)


# ── API routes ───────────────────────────────────────────────
app.include_router(v1_router)


@app.get("/health", tags=["system"])
async def health_check() -> dict:
    return {"status": "ok"}

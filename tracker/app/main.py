"""FastAPI application, the main entrypoint for the feature request tracker."""

import logging
import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from tracker.app.api.feature_requests import router as feature_requests_router
from tracker.app.config import settings
from tracker.app.db import engine, get_db, init_db
from tracker.app.errors import ApiError, NotFoundError, StorageError, ValidationError
from tracker.app.logging_config import configure_logging
from tracker.app.schemas.validation import field_errors

logger = logging.getLogger(__name__)

configure_logging(settings.log_level, settings.log_format)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    await init_db()
    logger.info("Feature request API ready on %s:%s", settings.host, settings.port)
    yield
    await engine.dispose()


app = FastAPI(
    title="Feature Request Tracker API",
    description="API documentation for the Feature Request Tracker",
    version="1.0.0",
    contact={"name": "API Support", "email": "support@example.com"},
    docs_url="/api-docs",
    openapi_url="/api-docs.json",
    redoc_url=None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    logger.info(
        "Incoming request %s %s",
        request.method,
        request.url.path,
        extra={
            "method": request.method,
            "url": str(request.url.path),
            "ip": request.client.host if request.client else None,
            "user_agent": request.headers.get("user-agent"),
        },
    )
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - start) * 1000, 1)
    logger.info(
        "Response sent %s %s -> %d (%.1fms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
        extra={
            "method": request.method,
            "url": str(request.url.path),
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


# --- Exception handlers ---


def _error_response(exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(ApiError)
async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        return _error_response(ApiError("INVALID_JSON", "Invalid JSON in request body", 400))
    return _error_response(ValidationError(field_errors(errors)))


@app.exception_handler(SQLAlchemyError)
async def _database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return _error_response(StorageError.from_exception(exc))


@app.exception_handler(StarletteHTTPException)
async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return _error_response(NotFoundError("Resource not found"))
    return _error_response(ApiError("HTTP_ERROR", str(exc.detail), exc.status_code))


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch unhandled exceptions and return a clean JSON 500 instead of a stack trace."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(ApiError("INTERNAL_SERVER_ERROR", "An unexpected error occurred", 500))


# Include routers
app.include_router(feature_requests_router, prefix="/api")


# --- Health check ---


@app.get("/api/health", tags=["health"])
async def health(db: AsyncSession = Depends(get_db)) -> dict[str, str]:
    """Health check with DB connectivity verification. No API key required."""
    db_ok = "ok"
    try:
        await db.execute(text("SELECT 1"))
    except Exception:
        db_ok = "error"
        logger.exception("Health check: database connectivity failed")

    return {
        "status": "ok" if db_ok == "ok" else "degraded",
        "database": db_ok,
    }

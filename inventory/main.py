"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inventory.api import router as api_router
from inventory.core.config import settings
from inventory.core.database import SessionLocal, check_db_connected, engine
from inventory.core.validation import FieldError, ValidationFailed
from inventory.services.users import ensure_default_admin

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Refuse to start without a database, then reconcile the default admin account."""
    db = SessionLocal()
    try:
        if not check_db_connected(db):
            raise RuntimeError("Database is unreachable; refusing to start")
        ensure_default_admin(db, settings)
    finally:
        db.close()
    logger.info("Inventory API started (env=%s, prefix=%s)", settings.APP_ENV, settings.API_PREFIX)
    yield
    logger.info("Inventory API shutting down")
    engine.dispose()


app = FastAPI(
    title="Inventory API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)


def _validation_response(errors: list[FieldError]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Validation failed",
            "errors": [e.as_dict() for e in errors],
        },
    )


@app.exception_handler(ValidationFailed)
async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    return _validation_response(exc.errors)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Path/query parameter errors use the same 400 shape as body rule failures."""
    errors = [
        FieldError(str(err["loc"][-1]) if err.get("loc") else "request", err["msg"])
        for err in exc.errors()
    ]
    return _validation_response(errors)


_ROUTING_MISSES = (
    (status.HTTP_404_NOT_FOUND, "Not Found"),
    (status.HTTP_405_METHOD_NOT_ALLOWED, "Method Not Allowed"),
)


def _is_routing_miss(exc: StarletteHTTPException) -> bool:
    return (exc.status_code, exc.detail) in _ROUTING_MISSES


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Unmatched routes answer 404 "Route not found", including a known path hit
    with an unsupported method. Every other HTTP error is passed through.
    """
    if _is_routing_miss(exc):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "Route not found"},
        )
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )

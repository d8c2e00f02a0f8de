# src/picklerank/main.py

"""Main FastAPI application for PickleRank."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .api import group, match, player, user, venue
from .db.session import engine
from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    PickleRankError,
    RatingEngineError,
    ResourceNotFoundError,
    ValidationError,
)
from .logging_config import setup_logging
from .middleware.logging import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan context manager for startup and shutdown events."""
    setup_logging()
    yield
    # Shutdown: Dispose of database connections gracefully
    await engine.dispose()


app = FastAPI(title="PickleRank API", lifespan=lifespan)

app.add_middleware(RequestLoggingMiddleware)


# =============================================================================
# Global Exception Handlers
# =============================================================================

# Domain errors the client caused, with the level they are logged at
CLIENT_ERRORS: dict[type[PickleRankError], tuple[int, int]] = {
    ResourceNotFoundError: (404, logging.WARNING),
    ValidationError: (422, logging.WARNING),
    ConflictError: (409, logging.WARNING),
    AuthenticationError: (401, logging.INFO),
    AuthorizationError: (403, logging.WARNING),
}


def _client_error_status(exc: PickleRankError) -> tuple[int, int]:
    for cls in type(exc).__mro__:
        if cls in CLIENT_ERRORS:
            return CLIENT_ERRORS[cls]
    return 500, logging.ERROR


async def client_error_handler(request: Request, exc: PickleRankError) -> JSONResponse:
    """Handle not-found, validation, conflict and auth errors."""
    status_code, level = _client_error_status(exc)
    logger.log(
        level,
        "%s -> %d: %s",
        type(exc).__name__,
        status_code,
        exc.message,
        extra=exc.details,
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error_type": type(exc).__name__},
    )


for _error_cls in CLIENT_ERRORS:
    app.add_exception_handler(_error_cls, client_error_handler)


@app.exception_handler(RatingEngineError)
async def rating_engine_error_handler(
    request: Request, exc: RatingEngineError
) -> JSONResponse:
    """Handle rating failures -> 500, pointing at the stored match."""
    logger.error("Rating engine error: %s", exc.message, extra=exc.details)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Match was recorded but its ratings could not be applied",
            "error_type": type(exc).__name__,
            "match_id": exc.details.get("match_id"),
        },
    )


@app.exception_handler(PickleRankError)
async def picklerank_error_handler(
    request: Request, exc: PickleRankError
) -> JSONResponse:
    """Catch-all for any other PickleRank errors -> 500."""
    logger.error("PickleRank error: %s", exc.message, extra=exc.details, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": exc.message, "error_type": type(exc).__name__},
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(
    request: Request, exc: IntegrityError
) -> JSONResponse:
    """Unique-constraint races that slipped past the service checks -> 409."""
    error_msg = str(exc.orig) if exc.orig else str(exc)
    logger.warning("Database integrity error: %s", error_msg)

    if "UNIQUE constraint failed" in error_msg or "duplicate key" in error_msg:
        return JSONResponse(
            status_code=409,
            content={"detail": "Resource already exists with given unique field(s)"},
        )

    return JSONResponse(
        status_code=400,
        content={"detail": "Database constraint violation"},
    )


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_error_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Catch-all for other SQLAlchemy database errors."""
    logger.error("Database error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal database error occurred"},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions."""
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal server error occurred"},
    )


# Include routers into the main application
app.include_router(user.router)
app.include_router(group.router)
app.include_router(player.router)
app.include_router(venue.router)
app.include_router(match.router)


@app.get("/", tags=["Root"])
async def read_root() -> dict[str, str]:
    """Provides a welcome message."""
    return {"message": "Welcome to the PickleRank API"}


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}

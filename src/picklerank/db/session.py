# src/picklerank/db/session.py

"""
Async engine and session factory.

Environment variables:
- DATABASE_URL: async SQLAlchemy URL (default: ./picklerank.db via aiosqlite)
- DB_ECHO: "true" to log every SQL statement
- DB_BUSY_TIMEOUT: seconds a SQLite connection waits on a locked file
- DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_RECYCLE: pooling for server databases
"""

import logging
import os
from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./picklerank.db")


def _engine_options(url: str) -> dict[str, Any]:
    options: dict[str, Any] = {
        "echo": os.getenv("DB_ECHO", "false").lower() == "true",
    }

    if url.startswith("sqlite"):
        # Concurrent rating writers wait for the file lock rather than erroring
        busy_timeout = float(os.getenv("DB_BUSY_TIMEOUT", "15"))
        options["connect_args"] = {"timeout": busy_timeout}
        return options

    options.update(
        pool_size=int(os.getenv("DB_POOL_SIZE", "20")),
        max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
        pool_recycle=int(os.getenv("DB_POOL_RECYCLE", "3600")),
        pool_pre_ping=True,
    )
    return options


engine = create_async_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

# autoflush=False: rating application flushes explicitly so that optimistic
# version checks surface at a known point.
# expire_on_commit=False: a match stays readable after its first commit.
AsyncSessionLocal = async_sessionmaker(
    bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request, rolled back if the request fails."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception as e:
            logger.warning(
                "Request failed, rolling back session",
                extra={"error": type(e).__name__},
            )
            await session.rollback()
            raise

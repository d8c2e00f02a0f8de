# tests/conftest.py

"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from picklerank.db.models import Base, GroupRole, SystemRole, User, new_id
from picklerank.db.session import get_db
from picklerank.main import app
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Fixture to provide a session on a fresh in-memory database.

    StaticPool keeps the single in-memory connection alive for the whole
    test, and the engine is disposed afterwards so no state leaks.
    """
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        bind=engine, expire_on_commit=False, autocommit=False, autoflush=False
    )
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Fixture to provide an async test client for the API."""

    # Override the get_db dependency to use the test database
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        try:
            yield db_session
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    # Clean up the override after the test
    del app.dependency_overrides[get_db]


async def make_user(
    db: AsyncSession,
    name: str,
    email: str | None = None,
    system_role: SystemRole = SystemRole.USER,
    memberships: dict[str, GroupRole] | None = None,
) -> User:
    """Insert a user directly, bypassing the registration endpoint."""
    user = User(
        id=new_id(),
        name=name,
        email=email,
        system_role=system_role.value,
        memberships={g: r.value for g, r in (memberships or {}).items()},
    )
    db.add(user)
    await db.commit()
    return user


def auth(user: User) -> dict[str, str]:
    """Request headers identifying `user` as the caller."""
    return {"X-User-ID": user.id}


@pytest.fixture
async def admin(db_session: AsyncSession) -> User:
    return await make_user(
        db_session, "Admin", "admin@example.com", system_role=SystemRole.ADMIN
    )


@pytest.fixture
async def alice(db_session: AsyncSession) -> User:
    return await make_user(db_session, "Alice", "alice@example.com")


@pytest.fixture
async def bob(db_session: AsyncSession) -> User:
    return await make_user(db_session, "Bob", "bob@example.com")

# src/picklerank/api/deps.py

"""Shared FastAPI dependencies."""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from picklerank.db.models import User
from picklerank.db.session import get_db
from picklerank.exceptions import AuthenticationError


async def get_current_user(
    x_user_id: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the acting user from the X-User-ID header.

    Token verification happens upstream; by the time a request reaches
    this service the header carries an already-verified user id.
    """
    if not x_user_id:
        raise AuthenticationError("missing X-User-ID header")

    user = await db.get(User, x_user_id)
    if user is None:
        raise AuthenticationError(f"unknown user {x_user_id}")
    return user

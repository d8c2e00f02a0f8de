# src/picklerank/api/user.py

"""API endpoints for user accounts."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from picklerank.api.deps import get_current_user
from picklerank.db.models import SystemRole, User, new_id
from picklerank.db.session import get_db
from picklerank.exceptions import DuplicateEmailError
from picklerank.schemas import user as user_schema

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "/", response_model=user_schema.UserRead, status_code=status.HTTP_201_CREATED
)
async def create_user(
    user_in: user_schema.UserCreate, db: AsyncSession = Depends(get_db)
) -> User:
    """
    Register a user account with the USER system role.

    Raises:
        409 Conflict: If the email is already registered.
    """
    if user_in.email is not None:
        if await User.find_by_email(db, user_in.email) is not None:
            raise DuplicateEmailError(user_in.email)

    new_user = User(
        id=new_id(),
        name=user_in.name,
        email=user_in.email,
        system_role=SystemRole.USER.value,
        memberships={},
    )
    db.add(new_user)
    await db.commit()
    return new_user


@router.get("/me", response_model=user_schema.UserRead)
async def read_current_user(user: User = Depends(get_current_user)) -> User:
    """Return the authenticated user, including group memberships."""
    return user

# backend/fitclub/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

The token only carries the user ID; role checks happen in the services so
that the same rules hold outside HTTP. ``get_current_admin`` guards the
admin routes, which have no member-facing counterpart.
"""

import logging

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...auth import get_current_user as auth_get_current_user
from ...models.user import User
from ...repositories.factory import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)


def get_current_user(
    current_user_id: str = Depends(auth_get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """
    Load the authenticated user from the database.

    Raises:
        HTTPException: 401 if the token names a user that does not exist
    """
    user = RepositoryFactory.create_user_repository(db).get_by_id(current_user_id)
    if user is None:
        logger.warning("Token subject %s does not match any user", current_user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Get the current authenticated and active user.

    Raises:
        HTTPException: If user is not active
    """
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user


async def get_current_admin(
    current_user: User = Depends(get_current_active_user),
) -> User:
    """
    Get the current authenticated admin.

    Raises:
        HTTPException: If user is not an admin
    """
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not an admin")
    return current_user

from __future__ import annotations

from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from sharecal.db import SessionDep
from sharecal.models import User
from sharecal.services import users


def get_current_user(
    session: SessionDep,
    x_user_id: str | None = Header(default=None),
) -> User:
    """Resolve the caller set by the authentication gateway in ``X-User-Id``."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authenticated user",
        )
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authenticated user",
        ) from None

    user = users.resolve_by_id(session, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Inactive or missing user",
        )
    return user


CurrentUser = Depends(get_current_user)

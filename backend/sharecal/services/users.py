from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlmodel import Session, select

from sharecal.models import User


def resolve_by_pseudo(session: Session, pseudo: str) -> Optional[User]:
    return session.exec(select(User).where(User.pseudo == pseudo)).one_or_none()


def resolve_by_id(session: Session, user_id: UUID) -> Optional[User]:
    return session.get(User, user_id)


def resolve_many_by_id(session: Session, user_ids: list[UUID]) -> dict[UUID, User]:
    if not user_ids:
        return {}
    users = session.exec(select(User).where(User.id.in_(user_ids))).all()
    return {user.id: user for user in users}

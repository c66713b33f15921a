from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlmodel import Session, delete, select

from sharecal.models import Group

logger = logging.getLogger(__name__)


def find_by_calendar_id(session: Session, calendar_id: UUID) -> Optional[Group]:
    return session.exec(
        select(Group).where(Group.calendar_id == calendar_id)
    ).first()


def delete_by_id(session: Session, group_id: UUID) -> None:
    session.exec(delete(Group).where(Group.id == group_id))
    logger.info(f"Group {group_id} deleted")

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from sharecal.core.exceptions import ConflictError, NotFoundError
from sharecal.models import Calendar, CalendarMember, CalendarRole

logger = logging.getLogger(__name__)

NewMember = Tuple[UUID, CalendarRole, bool]


def find_relation(
    session: Session,
    calendar_id: UUID,
    user_id: UUID,
) -> Optional[CalendarMember]:
    return session.exec(
        select(CalendarMember).where(
            CalendarMember.calendar_id == calendar_id,
            CalendarMember.user_id == user_id,
        )
    ).one_or_none()


def list_members(session: Session, calendar_id: UUID) -> List[CalendarMember]:
    return list(
        session.exec(
            select(CalendarMember)
            .where(CalendarMember.calendar_id == calendar_id)
            .order_by(CalendarMember.added_at)
        ).all()
    )


def count_confirmed(session: Session, calendar_id: UUID) -> int:
    session.flush()
    return session.exec(
        select(func.count())
        .select_from(CalendarMember)
        .where(
            CalendarMember.calendar_id == calendar_id,
            CalendarMember.confirmed.is_(True),
        )
    ).one()


def sync_owner_count(session: Session, calendar: Calendar) -> int:
    """Recompute ``nb_owners`` from the confirmed rows in the current transaction."""
    calendar.nb_owners = count_confirmed(session, calendar.id)
    calendar.touch()
    session.add(calendar)
    return calendar.nb_owners


def add_members(
    session: Session,
    calendar: Calendar,
    members: Iterable[NewMember],
) -> List[CalendarMember]:
    """Insert a batch of relations; nothing is written if any one conflicts."""
    batch = list(members)
    user_ids = [user_id for user_id, _, _ in batch]

    seen: set[UUID] = set()
    for user_id in user_ids:
        if user_id in seen:
            raise ConflictError(f"User {user_id} listed twice")
        seen.add(user_id)

    if user_ids:
        existing = session.exec(
            select(CalendarMember.user_id).where(
                CalendarMember.calendar_id == calendar.id,
                CalendarMember.user_id.in_(user_ids),
            )
        ).first()
        if existing is not None:
            raise ConflictError(f"User {existing} is already a member of this calendar")

    created = [
        CalendarMember(
            calendar_id=calendar.id,
            user_id=user_id,
            role=role,
            confirmed=confirmed,
        )
        for user_id, role, confirmed in batch
    ]
    session.add_all(created)
    sync_owner_count(session, calendar)
    logger.info(f"Added {len(created)} member(s) to calendar {calendar.id}")
    return created


def remove_member(session: Session, calendar: Calendar, user_id: UUID) -> int:
    """Delete a relation and return the confirmed-owner count left behind."""
    membership = find_relation(session, calendar.id, user_id)
    if membership is None:
        raise NotFoundError("Calendar member not found")

    session.delete(membership)
    remaining = sync_owner_count(session, calendar)
    logger.info(
        f"User {user_id} removed from calendar {calendar.id}, {remaining} owner(s) left"
    )
    return remaining


def confirm_member(session: Session, calendar: Calendar, user_id: UUID) -> CalendarMember:
    membership = find_relation(session, calendar.id, user_id)
    if membership is None:
        raise NotFoundError("Calendar member not found")
    if membership.confirmed:
        raise ConflictError("Calendar membership already confirmed")

    membership.confirmed = True
    session.add(membership)
    sync_owner_count(session, calendar)
    return membership

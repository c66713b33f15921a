"""Calendar creation, membership changes and cascading deletion.

A calendar belongs to its confirmed members. Whenever a change leaves it
without a confirmed member, the calendar is deleted in the same transaction,
together with the group that points at it.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlmodel import Session, delete, select

from sharecal.core.config import settings
from sharecal.core.exceptions import InvalidInputError, NotFoundError
from sharecal.db import lock_calendar, transaction
from sharecal.models import (
    Calendar,
    CalendarMember,
    CalendarRole,
    Event,
    EventAttendee,
    Group,
)
from sharecal.services import groups, memberships, permissions, users
from sharecal.services.timeslots import empty_matrix

logger = logging.getLogger(__name__)

OwnerAssignment = Tuple[UUID, CalendarRole]


def _validate_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidInputError("Calendar name must not be empty")
    if len(cleaned) > settings.CALENDAR_NAME_MAX_LENGTH:
        raise InvalidInputError(
            f"Calendar name exceeds {settings.CALENDAR_NAME_MAX_LENGTH} characters"
        )
    return cleaned


def get_calendar(session: Session, calendar_id: UUID) -> Calendar:
    calendar = session.get(Calendar, calendar_id)
    if not calendar:
        raise NotFoundError("Calendar not found")
    return calendar


def get_calendar_with_owners(
    session: Session, calendar_id: UUID
) -> Tuple[Calendar, List[CalendarMember]]:
    calendar = get_calendar(session, calendar_id)
    return calendar, memberships.list_members(session, calendar_id)


def create_calendar(
    session: Session,
    name: str,
    owner_assignments: Sequence[OwnerAssignment],
    creator_id: UUID,
) -> Calendar:
    """Create a calendar whose only confirmed member is its creator."""
    cleaned = _validate_name(name)
    assignments = list(owner_assignments)
    if creator_id not in {user_id for user_id, _ in assignments}:
        assignments.insert(0, (creator_id, CalendarRole.ADMIN))

    known = users.resolve_many_by_id(session, [user_id for user_id, _ in assignments])
    for user_id, _ in assignments:
        if user_id not in known:
            raise NotFoundError(f"User {user_id} not found")

    with transaction(session):
        calendar = Calendar(
            name=cleaned,
            timeslot_preferences=empty_matrix(settings.EVENT_TYPES),
        )
        session.add(calendar)
        session.flush()
        memberships.add_members(
            session,
            calendar,
            [(user_id, role, user_id == creator_id) for user_id, role in assignments],
        )

    session.refresh(calendar)
    logger.info(
        f"Calendar {calendar.id} created by {creator_id} with {len(assignments)} member(s)"
    )
    return calendar


def list_user_calendars(
    session: Session, user_id: UUID
) -> List[Tuple[Calendar, CalendarMember]]:
    """Every calendar the user relates to, pending invitations included."""
    rows = session.exec(
        select(Calendar, CalendarMember)
        .join(CalendarMember, CalendarMember.calendar_id == Calendar.id)
        .where(CalendarMember.user_id == user_id)
        .order_by(Calendar.created_at)
    ).all()
    return [(calendar, member) for calendar, member in rows]


def ensure_default_calendar(session: Session, user_id: UUID) -> Calendar:
    """Return the user's default calendar, creating it on first use."""
    existing = session.exec(
        select(Calendar)
        .join(CalendarMember, CalendarMember.calendar_id == Calendar.id)
        .where(
            CalendarMember.user_id == user_id,
            CalendarMember.confirmed.is_(True),
            Calendar.name == settings.DEFAULT_CALENDAR_NAME,
        )
    ).first()
    if existing:
        return existing

    return create_calendar(
        session,
        settings.DEFAULT_CALENDAR_NAME,
        [(user_id, CalendarRole.ADMIN)],
        creator_id=user_id,
    )


def edit_calendar(
    session: Session,
    calendar: Calendar,
    membership: Optional[CalendarMember],
    name: str,
) -> Calendar:
    permissions.ensure_admin(membership)
    cleaned = _validate_name(name)
    with transaction(session):
        calendar.name = cleaned
        calendar.touch()
        session.add(calendar)
    session.refresh(calendar)
    return calendar


def add_members(
    session: Session,
    calendar: Calendar,
    membership: Optional[CalendarMember],
    new_members: Iterable[OwnerAssignment],
) -> List[CalendarMember]:
    """Admins and actors may add users; the newcomers start unconfirmed."""
    permissions.ensure_can_manage_events(membership)
    assignments = list(new_members)
    if not assignments:
        raise InvalidInputError("No users to add")

    known = users.resolve_many_by_id(session, [user_id for user_id, _ in assignments])
    for user_id, _ in assignments:
        if user_id not in known:
            raise NotFoundError(f"User {user_id} not found")

    with transaction(session):
        locked = lock_calendar(session, calendar.id)
        created = memberships.add_members(
            session,
            locked,
            [(user_id, role, False) for user_id, role in assignments],
        )
    for member in created:
        session.refresh(member)
    return created


def confirm_membership(session: Session, calendar_id: UUID, user_id: UUID) -> CalendarMember:
    with transaction(session):
        calendar = lock_calendar(session, calendar_id)
        member = memberships.confirm_member(session, calendar, user_id)
    session.refresh(member)
    logger.info(f"User {user_id} confirmed membership of calendar {calendar_id}")
    return member


def _delete_cascade(session: Session, calendar_id: UUID) -> None:
    # Order matters: group back-reference, attendees, events, members, calendar.
    group: Optional[Group] = groups.find_by_calendar_id(session, calendar_id)
    if group:
        groups.delete_by_id(session, group.id)
    event_ids = list(
        session.exec(select(Event.id).where(Event.calendar_id == calendar_id)).all()
    )
    if event_ids:
        session.exec(delete(EventAttendee).where(EventAttendee.event_id.in_(event_ids)))
        session.exec(delete(Event).where(Event.id.in_(event_ids)))
    session.exec(delete(CalendarMember).where(CalendarMember.calendar_id == calendar_id))
    session.exec(delete(Calendar).where(Calendar.id == calendar_id))
    logger.info(f"Calendar {calendar_id} deleted with {len(event_ids)} event(s)")


def delete_calendar(session: Session, calendar_id: UUID) -> None:
    with transaction(session):
        lock_calendar(session, calendar_id)
        _delete_cascade(session, calendar_id)


def remove_member(session: Session, calendar_id: UUID, user_id: UUID) -> bool:
    """Remove a member. Returns True when the calendar was deleted as an orphan."""
    with transaction(session):
        calendar = lock_calendar(session, calendar_id)
        remaining = memberships.remove_member(session, calendar, user_id)
        orphaned = remaining == 0
        if orphaned:
            _delete_cascade(session, calendar_id)
    return orphaned

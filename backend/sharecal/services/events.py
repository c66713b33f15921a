from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlmodel import Session, delete, select

from sharecal.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from sharecal.db import lock_calendar, transaction
from sharecal.models import (
    AttendanceStatus,
    Calendar,
    CalendarMember,
    CalendarRole,
    Event,
    EventAttendee,
    EventVisibility,
    User,
)
from sharecal.schemas import EventCreate, EventUpdate
from sharecal.services import memberships, permissions, timeslots, users

logger = logging.getLogger(__name__)

ALLOWED_RESPONSES = {
    AttendanceStatus.INVITED: {AttendanceStatus.ACCEPTED, AttendanceStatus.DECLINED},
    AttendanceStatus.ACCEPTED: set(),
    AttendanceStatus.DECLINED: set(),
}


def get_event(session: Session, event_id: UUID) -> Event:
    event = session.get(Event, event_id)
    if not event:
        raise NotFoundError("Event not found")
    return event


def load_attendees(session: Session, event_id: UUID) -> List[EventAttendee]:
    return list(
        session.exec(
            select(EventAttendee)
            .where(EventAttendee.event_id == event_id)
            .order_by(EventAttendee.added_at)
        ).all()
    )


def get_event_with_attendees(
    session: Session, event_id: UUID
) -> Tuple[Event, List[EventAttendee]]:
    event = get_event(session, event_id)
    return event, load_attendees(session, event_id)


def list_calendar_events(
    session: Session,
    calendar: Calendar,
    membership: Optional[CalendarMember],
) -> List[Event]:
    """Members see every event of the calendar, others only the public ones."""
    statement = select(Event).where(Event.calendar_id == calendar.id)
    if not permissions.can_view(membership):
        statement = statement.where(Event.visibility == EventVisibility.PUBLIC)
    return list(session.exec(statement.order_by(Event.start_time)).all())


def _check_time_range(payload: EventCreate | EventUpdate) -> None:
    if payload.end_time < payload.start_time:
        raise InvalidInputError("end_time must be greater than or equal to start_time")


def create_event(
    session: Session,
    calendar: Calendar,
    membership: Optional[CalendarMember],
    payload: EventCreate,
    timezone_offset: int = 0,
) -> Event:
    """Create an event and account it in the calendar's timeslot preferences."""
    permissions.ensure_can_manage_events(membership)
    _check_time_range(payload)

    with transaction(session):
        locked = lock_calendar(session, calendar.id)
        timeslots.ensure_event_type(locked, payload.type)
        event = Event(calendar_id=locked.id, **payload.model_dump())
        session.add(event)
        timeslots.apply_event(
            locked,
            payload.type,
            payload.start_time,
            payload.end_time,
            timezone_offset,
        )
        session.add(locked)

    session.refresh(event)
    logger.info(f"Event {event.id} created in calendar {calendar.id}")
    return event


def edit_event(
    session: Session,
    calendar: Calendar,
    membership: Optional[CalendarMember],
    event: Event,
    payload: EventUpdate,
) -> Event:
    """Overwrite the event's mutable fields. Preferences are left as they are."""
    permissions.ensure_can_manage_events(membership)
    if event.calendar_id != calendar.id:
        raise NotFoundError("Event not found")
    _check_time_range(payload)
    timeslots.ensure_event_type(calendar, payload.type)

    with transaction(session):
        for field, value in payload.model_dump().items():
            setattr(event, field, value)
        event.touch()
        session.add(event)

    session.refresh(event)
    return event


def delete_event(
    session: Session,
    calendar: Calendar,
    membership: Optional[CalendarMember],
    event_id: UUID,
) -> None:
    permissions.ensure_can_manage_events(membership)
    event = get_event(session, event_id)
    if event.calendar_id != calendar.id:
        raise NotFoundError("Event not found")

    with transaction(session):
        session.exec(delete(EventAttendee).where(EventAttendee.event_id == event_id))
        session.exec(delete(Event).where(Event.id == event_id))
    logger.info(f"Event {event_id} deleted from calendar {calendar.id}")


def _resolve_pseudos(session: Session, pseudos: Sequence[str]) -> List[User]:
    resolved: List[User] = []
    for pseudo in pseudos:
        user = users.resolve_by_pseudo(session, pseudo)
        if user is None:
            raise NotFoundError(f'User "{pseudo}" does not exist')
        resolved.append(user)
    return resolved


def invite_attendees(
    session: Session,
    calendar: Calendar,
    membership: Optional[CalendarMember],
    event: Event,
    existing_attendees: Sequence[EventAttendee],
    pseudos: Sequence[str],
) -> List[EventAttendee]:
    """Invite users by pseudo. Either every user is invited or none is.

    Users without a relation to the calendar join it as unconfirmed outsiders.
    Returns the previous attendees followed by the new ones.
    """
    permissions.ensure_can_manage_events(membership)
    if not pseudos:
        raise InvalidInputError("No users to invite")
    if event.calendar_id != calendar.id:
        raise NotFoundError("Event not found")

    with transaction(session):
        locked = lock_calendar(session, calendar.id)
        invitees = _resolve_pseudos(session, pseudos)

        listed = {attendee.user_id for attendee in existing_attendees}
        for pseudo, user in zip(pseudos, invitees):
            if user.id in listed:
                raise ConflictError(f'User "{pseudo}" already invited')
            listed.add(user.id)

        created = [
            EventAttendee(
                event_id=event.id,
                user_id=user.id,
                status=AttendanceStatus.INVITED,
            )
            for user in invitees
        ]
        session.add_all(created)

        outsiders = [
            (user.id, CalendarRole.OUTSIDER, False)
            for user in invitees
            if memberships.find_relation(session, locked.id, user.id) is None
        ]
        if outsiders:
            memberships.add_members(session, locked, outsiders)

    for attendee in created:
        session.refresh(attendee)
    logger.info(f"Invited {len(created)} user(s) to event {event.id}")
    return [*existing_attendees, *created]


def respond_to_invitation(
    session: Session,
    event: Event,
    user_id: UUID,
    status: AttendanceStatus,
) -> EventAttendee:
    attendee = session.exec(
        select(EventAttendee).where(
            EventAttendee.event_id == event.id,
            EventAttendee.user_id == user_id,
        )
    ).one_or_none()
    if attendee is None:
        raise NotFoundError("Attendee not found. You must be invited to the event first.")

    current = AttendanceStatus(attendee.status)
    if status not in ALLOWED_RESPONSES[current]:
        raise InvalidInputError(
            f"Cannot change attendance from {current.value} to {status.value}"
        )

    with transaction(session):
        attendee.status = status
        session.add(attendee)
    session.refresh(attendee)
    return attendee

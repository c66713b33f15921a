from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, status

from sharecal.api.deps import CurrentUser
from sharecal.db import SessionDep
from sharecal.models import AttendanceStatus, EventAttendee, User
from sharecal.schemas import (
    AttendanceResponse,
    EventAttendeeRead,
    EventInvite,
    EventRead,
    EventReadWithStatus,
    EventUpdate,
)
from sharecal.services import calendars, events, memberships, permissions, users

router = APIRouter()


def _serialize_attendees(
    session: SessionDep, attendees: List[EventAttendee]
) -> List[EventAttendeeRead]:
    directory = users.resolve_many_by_id(session, [a.user_id for a in attendees])
    result: List[EventAttendeeRead] = []
    for attendee in attendees:
        user = directory.get(attendee.user_id)
        base = EventAttendeeRead.model_validate(attendee)
        result.append(base.model_copy(update={"pseudo": user.pseudo if user else None}))
    return result


@router.get("/{event_id}", response_model=EventReadWithStatus, summary="Get event by id")
def get_event(
    event_id: UUID,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> EventReadWithStatus:
    event, attendees = events.get_event_with_attendees(session, event_id)
    membership = memberships.find_relation(session, event.calendar_id, current_user.id)
    permissions.ensure_event_readable(event, membership)

    own = next((a for a in attendees if a.user_id == current_user.id), None)
    attendance = own.status if own else AttendanceStatus.INVITED
    return EventReadWithStatus.model_validate(event).model_copy(
        update={"status": attendance}
    )


@router.get(
    "/{event_id}/attendees",
    response_model=List[EventAttendeeRead],
    summary="List event attendees",
)
def get_event_attendees(
    event_id: UUID,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> List[EventAttendeeRead]:
    event, attendees = events.get_event_with_attendees(session, event_id)
    membership = memberships.find_relation(session, event.calendar_id, current_user.id)
    permissions.ensure_event_readable(event, membership)
    return _serialize_attendees(session, attendees)


@router.post(
    "/{event_id}/attendees",
    response_model=List[EventAttendeeRead],
    status_code=status.HTTP_201_CREATED,
    summary="Invite users to event",
)
def invite_to_event(
    event_id: UUID,
    payload: EventInvite,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> List[EventAttendeeRead]:
    event, attendees = events.get_event_with_attendees(session, event_id)
    calendar = calendars.get_calendar(session, event.calendar_id)
    membership = memberships.find_relation(session, calendar.id, current_user.id)
    updated = events.invite_attendees(
        session, calendar, membership, event, attendees, payload.users
    )
    return _serialize_attendees(session, updated)


@router.patch(
    "/{event_id}/attendance",
    response_model=EventAttendeeRead,
    summary="Accept or decline an invitation",
)
def respond_to_event(
    event_id: UUID,
    payload: AttendanceResponse,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> EventAttendeeRead:
    event = events.get_event(session, event_id)
    attendee = events.respond_to_invitation(session, event, current_user.id, payload.status)
    return _serialize_attendees(session, [attendee])[0]


@router.put("/{event_id}", response_model=EventRead, summary="Update event")
def update_event(
    event_id: UUID,
    payload: EventUpdate,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> EventRead:
    event = events.get_event(session, event_id)
    calendar = calendars.get_calendar(session, event.calendar_id)
    membership = memberships.find_relation(session, calendar.id, current_user.id)
    updated = events.edit_event(session, calendar, membership, event, payload)
    return EventRead.model_validate(updated)


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete event",
    response_model=None,
)
def delete_event(
    event_id: UUID,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> None:
    event = events.get_event(session, event_id)
    calendar = calendars.get_calendar(session, event.calendar_id)
    membership = memberships.find_relation(session, calendar.id, current_user.id)
    events.delete_event(session, calendar, membership, event_id)

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Query, status

from sharecal.api.deps import CurrentUser
from sharecal.core.exceptions import ForbiddenError, ForbiddenReason
from sharecal.db import SessionDep
from sharecal.models import Calendar, CalendarMember, User
from sharecal.schemas import (
    CalendarCreate,
    CalendarMemberCreate,
    CalendarMemberRead,
    CalendarReadWithOwners,
    CalendarReadWithRole,
    CalendarUpdate,
    EventCreate,
    EventRead,
    TimeslotPreferencesRead,
)
from sharecal.services import calendars, events, memberships, permissions, timeslots, users

router = APIRouter()


def _serialize_members(
    session: SessionDep, members: List[CalendarMember]
) -> List[CalendarMemberRead]:
    directory = users.resolve_many_by_id(session, [member.user_id for member in members])
    result: List[CalendarMemberRead] = []
    for member in members:
        user = directory.get(member.user_id)
        base = CalendarMemberRead.model_validate(member)
        result.append(base.model_copy(update={"pseudo": user.pseudo if user else None}))
    return result


def _serialize_calendar_with_owners(
    session: SessionDep,
    calendar: Calendar,
    members: List[CalendarMember],
    current_user: User,
) -> CalendarReadWithOwners:
    own = next((m for m in members if m.user_id == current_user.id), None)
    base = CalendarReadWithOwners.model_validate(calendar)
    return base.model_copy(
        update={
            "current_user_role": own.role if own else None,
            "owners": _serialize_members(session, members),
        }
    )


def _load_calendar(
    session: SessionDep, calendar_id: UUID, current_user: User
) -> tuple[Calendar, Optional[CalendarMember]]:
    calendar = calendars.get_calendar(session, calendar_id)
    membership = memberships.find_relation(session, calendar_id, current_user.id)
    return calendar, membership


@router.get(
    "/",
    response_model=List[CalendarReadWithRole],
    summary="List calendars of the current user",
)
def list_calendars(
    session: SessionDep,
    current_user: User = CurrentUser,
) -> List[CalendarReadWithRole]:
    """Includes pending memberships; the default calendar is created on first use."""
    calendars.ensure_default_calendar(session, current_user.id)

    result: List[CalendarReadWithRole] = []
    for calendar, member in calendars.list_user_calendars(session, current_user.id):
        base = CalendarReadWithRole.model_validate(calendar)
        result.append(
            base.model_copy(
                update={"current_user_role": member.role, "confirmed": member.confirmed}
            )
        )
    return result


@router.post(
    "/",
    response_model=CalendarReadWithOwners,
    status_code=status.HTTP_201_CREATED,
    summary="Create calendar",
)
def create_calendar(
    payload: CalendarCreate,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> CalendarReadWithOwners:
    calendar = calendars.create_calendar(
        session,
        payload.name,
        [(owner.user_id, owner.role) for owner in payload.owners],
        creator_id=current_user.id,
    )
    _, members = calendars.get_calendar_with_owners(session, calendar.id)
    return _serialize_calendar_with_owners(session, calendar, members, current_user)


@router.get(
    "/{calendar_id}",
    response_model=CalendarReadWithOwners,
    summary="Get calendar with its owners",
)
def get_calendar(
    calendar_id: UUID,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> CalendarReadWithOwners:
    calendar, members = calendars.get_calendar_with_owners(session, calendar_id)
    own = next((m for m in members if m.user_id == current_user.id), None)
    permissions.ensure_can_view(own)
    return _serialize_calendar_with_owners(session, calendar, members, current_user)


@router.put(
    "/{calendar_id}",
    response_model=CalendarReadWithOwners,
    summary="Rename calendar",
)
def update_calendar(
    calendar_id: UUID,
    payload: CalendarUpdate,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> CalendarReadWithOwners:
    calendar, membership = _load_calendar(session, calendar_id, current_user)
    calendars.edit_calendar(session, calendar, membership, payload.name)
    calendar, members = calendars.get_calendar_with_owners(session, calendar_id)
    return _serialize_calendar_with_owners(session, calendar, members, current_user)


@router.delete(
    "/{calendar_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete calendar",
)
def delete_calendar(
    calendar_id: UUID,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> dict[str, str]:
    _, membership = _load_calendar(session, calendar_id, current_user)
    permissions.ensure_admin(membership)
    calendars.delete_calendar(session, calendar_id)
    return {"status": "deleted"}


@router.post(
    "/{calendar_id}/members",
    response_model=List[CalendarMemberRead],
    status_code=status.HTTP_201_CREATED,
    summary="Add calendar members",
)
def add_calendar_members(
    calendar_id: UUID,
    payload: CalendarMemberCreate,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> List[CalendarMemberRead]:
    calendar, membership = _load_calendar(session, calendar_id, current_user)
    created = calendars.add_members(
        session,
        calendar,
        membership,
        [(member.user_id, member.role) for member in payload.members],
    )
    return _serialize_members(session, created)


@router.post(
    "/{calendar_id}/members/confirm",
    response_model=CalendarMemberRead,
    summary="Accept a pending calendar membership",
)
def confirm_calendar_membership(
    calendar_id: UUID,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> CalendarMemberRead:
    member = calendars.confirm_membership(session, calendar_id, current_user.id)
    return _serialize_members(session, [member])[0]


@router.delete(
    "/{calendar_id}/members/{user_id}",
    status_code=status.HTTP_200_OK,
    summary="Remove calendar member",
)
def delete_calendar_member(
    calendar_id: UUID,
    user_id: UUID,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> dict:
    """Members may leave on their own; removing someone else requires admin."""
    _, membership = _load_calendar(session, calendar_id, current_user)
    if user_id != current_user.id:
        permissions.ensure_admin(membership)
    elif membership is None:
        raise ForbiddenError("Not a member of this calendar", ForbiddenReason.ABSENT)

    calendar_deleted = calendars.remove_member(session, calendar_id, user_id)
    return {"status": "removed", "calendar_deleted": calendar_deleted}


@router.get(
    "/{calendar_id}/events",
    response_model=List[EventRead],
    summary="List calendar events",
)
def list_calendar_events(
    calendar_id: UUID,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> List[EventRead]:
    calendar, membership = _load_calendar(session, calendar_id, current_user)
    found = events.list_calendar_events(session, calendar, membership)
    return [EventRead.model_validate(event) for event in found]


@router.post(
    "/{calendar_id}/events",
    response_model=EventRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create event",
)
def create_event(
    calendar_id: UUID,
    payload: EventCreate,
    session: SessionDep,
    current_user: User = CurrentUser,
    timezone_offset: int = Query(
        default=0,
        ge=-timeslots.MAX_TIMEZONE_OFFSET,
        le=timeslots.MAX_TIMEZONE_OFFSET,
        description="Caller's offset from UTC in minutes",
    ),
) -> EventRead:
    calendar, membership = _load_calendar(session, calendar_id, current_user)
    event = events.create_event(session, calendar, membership, payload, timezone_offset)
    return EventRead.model_validate(event)


@router.get(
    "/{calendar_id}/timeslot-preferences",
    response_model=TimeslotPreferencesRead,
    summary="Weekly timeslot preferences",
)
def get_timeslot_preferences(
    calendar_id: UUID,
    session: SessionDep,
    current_user: User = CurrentUser,
) -> TimeslotPreferencesRead:
    calendar, membership = _load_calendar(session, calendar_id, current_user)
    permissions.ensure_can_view(membership)
    frozen = timeslots.get_preferences(calendar)
    return TimeslotPreferencesRead(
        calendar_id=calendar.id,
        preferences={key: [list(day) for day in grid] for key, grid in frozen.items()},
    )

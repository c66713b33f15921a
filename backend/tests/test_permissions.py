from datetime import datetime
from uuid import uuid4

import pytest

from sharecal.core.exceptions import ForbiddenError, ForbiddenReason
from sharecal.models import CalendarMember, CalendarRole, Event, EventVisibility
from sharecal.services import permissions


def _member(role: CalendarRole, confirmed: bool) -> CalendarMember:
    return CalendarMember(
        calendar_id=uuid4(), user_id=uuid4(), role=role, confirmed=confirmed
    )


def _event(visibility: EventVisibility) -> Event:
    return Event(
        calendar_id=uuid4(),
        type="meeting",
        visibility=visibility,
        name="Review",
        start_time=datetime(2024, 1, 1, 9),
        end_time=datetime(2024, 1, 1, 10),
    )


@pytest.mark.parametrize(
    ("role", "confirmed", "view", "manage", "admin"),
    [
        (CalendarRole.OUTSIDER, True, True, False, False),
        (CalendarRole.OUTSIDER, False, False, False, False),
        (CalendarRole.ACTOR, True, True, True, False),
        (CalendarRole.ACTOR, False, False, False, False),
        (CalendarRole.ADMIN, True, True, True, True),
        (CalendarRole.ADMIN, False, False, False, False),
    ],
)
def test_role_matrix(role, confirmed, view, manage, admin):
    member = _member(role, confirmed)
    assert permissions.can_view(member) is view
    assert permissions.can_manage_events(member) is manage
    assert permissions.is_admin(member) is admin


def test_absent_membership_grants_nothing():
    assert permissions.can_view(None) is False
    assert permissions.can_manage_events(None) is False
    assert permissions.is_admin(None) is False


def test_forbidden_reasons_are_distinguished():
    with pytest.raises(ForbiddenError) as absent:
        permissions.ensure_can_view(None)
    assert absent.value.reason is ForbiddenReason.ABSENT

    with pytest.raises(ForbiddenError) as pending:
        permissions.ensure_can_manage_events(_member(CalendarRole.ADMIN, False))
    assert pending.value.reason is ForbiddenReason.UNCONFIRMED

    with pytest.raises(ForbiddenError) as weak:
        permissions.ensure_can_manage_events(_member(CalendarRole.OUTSIDER, True))
    assert weak.value.reason is ForbiddenReason.INSUFFICIENT_ROLE

    with pytest.raises(ForbiddenError) as not_admin:
        permissions.ensure_admin(_member(CalendarRole.ACTOR, True))
    assert not_admin.value.reason is ForbiddenReason.INSUFFICIENT_ROLE


def test_public_event_is_readable_without_membership():
    permissions.ensure_event_readable(_event(EventVisibility.PUBLIC), None)


def test_private_event_requires_confirmed_membership():
    private = _event(EventVisibility.PRIVATE)
    with pytest.raises(ForbiddenError):
        permissions.ensure_event_readable(private, None)
    with pytest.raises(ForbiddenError):
        permissions.ensure_event_readable(private, _member(CalendarRole.ACTOR, False))
    permissions.ensure_event_readable(private, _member(CalendarRole.OUTSIDER, True))

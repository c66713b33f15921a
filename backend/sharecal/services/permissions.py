"""Who may view, manage events on, or administer a calendar.

Decisions are pure functions of a membership row (or its absence). The
``ensure_*`` variants raise ``ForbiddenError`` and keep the reason apart:
no relation at all, a pending relation, or a role that is too weak.
"""
from __future__ import annotations

from typing import Optional

from sharecal.core.exceptions import ForbiddenError, ForbiddenReason
from sharecal.models import CalendarMember, CalendarRole, Event, EventVisibility


def _role_manages_events(role: CalendarRole) -> bool:
    if role is CalendarRole.ADMIN:
        return True
    if role is CalendarRole.ACTOR:
        return True
    if role is CalendarRole.OUTSIDER:
        return False
    raise ValueError(f"Unknown calendar role: {role!r}")


def can_view(membership: Optional[CalendarMember]) -> bool:
    return membership is not None and membership.confirmed


def can_manage_events(membership: Optional[CalendarMember]) -> bool:
    return can_view(membership) and _role_manages_events(CalendarRole(membership.role))


def is_admin(membership: Optional[CalendarMember]) -> bool:
    return can_view(membership) and CalendarRole(membership.role) is CalendarRole.ADMIN


def _ensure_member(membership: Optional[CalendarMember], action: str) -> CalendarMember:
    if membership is None:
        raise ForbiddenError(
            f"Not a member of this calendar, cannot {action}",
            ForbiddenReason.ABSENT,
        )
    if not membership.confirmed:
        raise ForbiddenError(
            f"Calendar membership not confirmed, cannot {action}",
            ForbiddenReason.UNCONFIRMED,
        )
    return membership


def ensure_can_view(membership: Optional[CalendarMember]) -> CalendarMember:
    return _ensure_member(membership, "view calendar")


def ensure_can_manage_events(membership: Optional[CalendarMember]) -> CalendarMember:
    member = _ensure_member(membership, "manage events")
    if not can_manage_events(member):
        raise ForbiddenError(
            f"Role {CalendarRole(member.role).value} cannot manage events",
            ForbiddenReason.INSUFFICIENT_ROLE,
        )
    return member


def ensure_admin(membership: Optional[CalendarMember]) -> CalendarMember:
    member = _ensure_member(membership, "administer calendar")
    if not is_admin(member):
        raise ForbiddenError(
            "Calendar administration requires the admin role",
            ForbiddenReason.INSUFFICIENT_ROLE,
        )
    return member


def ensure_event_readable(event: Event, membership: Optional[CalendarMember]) -> None:
    """Public events are readable by anyone; the others follow calendar access."""
    if EventVisibility(event.visibility) is EventVisibility.PUBLIC:
        return
    ensure_can_view(membership)

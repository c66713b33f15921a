from .calendar import (
    CalendarCreate,
    CalendarMemberCreate,
    CalendarMemberRead,
    CalendarOwnerAssignment,
    CalendarRead,
    CalendarReadWithOwners,
    CalendarReadWithRole,
    CalendarUpdate,
    TimeslotPreferencesRead,
)
from .event import (
    AttendanceResponse,
    EventAttendeeRead,
    EventCreate,
    EventInvite,
    EventRead,
    EventReadWithStatus,
    EventUpdate,
)

__all__ = [
    "AttendanceResponse",
    "CalendarCreate",
    "CalendarMemberCreate",
    "CalendarMemberRead",
    "CalendarOwnerAssignment",
    "CalendarRead",
    "CalendarReadWithOwners",
    "CalendarReadWithRole",
    "CalendarUpdate",
    "EventAttendeeRead",
    "EventCreate",
    "EventInvite",
    "EventRead",
    "EventReadWithStatus",
    "EventUpdate",
    "TimeslotPreferencesRead",
]

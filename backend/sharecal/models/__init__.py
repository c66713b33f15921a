from .calendar import Calendar
from .calendar_member import CalendarMember
from .enums import AttendanceStatus, CalendarRole, EventVisibility
from .event import Event
from .event_attendee import EventAttendee
from .group import Group
from .user import User

__all__ = [
    "AttendanceStatus",
    "Calendar",
    "CalendarMember",
    "CalendarRole",
    "Event",
    "EventAttendee",
    "EventVisibility",
    "Group",
    "User",
]

from __future__ import annotations

from enum import Enum


class CalendarRole(str, Enum):
    ADMIN = "admin"
    ACTOR = "actor"
    OUTSIDER = "outsider"


class EventVisibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class AttendanceStatus(str, Enum):
    INVITED = "invited"
    ACCEPTED = "accepted"
    DECLINED = "declined"

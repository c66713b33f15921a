from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlmodel import Field, SQLModel

from .enums import AttendanceStatus


class EventAttendee(SQLModel, table=True):
    """Event attendee with response status."""

    __tablename__ = "event_attendees"
    __table_args__ = {"sqlite_autoincrement": False}

    event_id: UUID = Field(
        foreign_key="events.id", primary_key=True, nullable=False
    )
    user_id: UUID = Field(foreign_key="users.id", primary_key=True, nullable=False)
    status: AttendanceStatus = Field(default=AttendanceStatus.INVITED)
    added_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from sharecal.models import AttendanceStatus, EventVisibility


class EventBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    location: str = ""
    type: str
    visibility: EventVisibility = EventVisibility.PRIVATE
    start_time: datetime
    end_time: datetime

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_to_utc(cls, value: datetime) -> datetime:
        """Store aware UTC datetimes; naive input is taken as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @field_validator("end_time")
    @classmethod
    def check_ends_after_start(cls, end_time: datetime, info: ValidationInfo) -> datetime:
        start_time: datetime | None = info.data.get("start_time")
        if start_time and end_time < start_time:
            raise ValueError("end_time must be greater than or equal to start_time")
        return end_time


class EventCreate(EventBase):
    pass


class EventUpdate(EventBase):
    """Full replacement of an event's mutable fields."""


class EventAttendeeRead(BaseModel):
    user_id: UUID
    pseudo: Optional[str] = None
    status: AttendanceStatus

    model_config = ConfigDict(from_attributes=True)


class EventRead(EventBase):
    id: UUID
    calendar_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EventReadWithStatus(EventRead):
    status: AttendanceStatus = AttendanceStatus.INVITED


class EventInvite(BaseModel):
    users: List[str] = Field(min_length=1)


class AttendanceResponse(BaseModel):
    status: AttendanceStatus

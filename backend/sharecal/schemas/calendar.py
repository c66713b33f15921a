from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from sharecal.models import CalendarRole


class CalendarOwnerAssignment(BaseModel):
    user_id: UUID
    role: CalendarRole = CalendarRole.ACTOR


class CalendarCreate(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    owners: List[CalendarOwnerAssignment] = []


class CalendarUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=256)


class CalendarRead(BaseModel):
    id: UUID
    name: str
    nb_owners: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CalendarMemberRead(BaseModel):
    calendar_id: UUID
    user_id: UUID
    role: CalendarRole
    confirmed: bool
    added_at: datetime
    pseudo: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CalendarMemberCreate(BaseModel):
    members: List[CalendarOwnerAssignment] = Field(min_length=1)


class CalendarReadWithRole(CalendarRead):
    current_user_role: Optional[CalendarRole] = None
    confirmed: bool = False


class CalendarReadWithOwners(CalendarRead):
    current_user_role: Optional[CalendarRole] = None
    owners: List[CalendarMemberRead] = []


class TimeslotPreferencesRead(BaseModel):
    calendar_id: UUID
    # event type -> [weekday 0=Sunday][hour] -> count
    preferences: Dict[str, List[List[int]]]

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlmodel import Field, SQLModel

from .enums import CalendarRole


class CalendarMember(SQLModel, table=True):
    """Calendar membership with per-user role and confirmation state."""

    __tablename__ = "calendar_members"
    __table_args__ = {"sqlite_autoincrement": False}

    calendar_id: UUID = Field(
        foreign_key="calendars.id", primary_key=True, nullable=False
    )
    user_id: UUID = Field(
        foreign_key="users.id", primary_key=True, nullable=False, index=True
    )
    role: CalendarRole = Field(default=CalendarRole.OUTSIDER)
    confirmed: bool = Field(default=False, nullable=False)
    added_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class Group(SQLModel, table=True):
    """Group of users sharing a calendar. Refers to the calendar by id only."""

    __tablename__ = "groups"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    name: str = Field(max_length=255)
    calendar_id: UUID = Field(
        foreign_key="calendars.id", nullable=False, index=True, unique=True
    )
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)

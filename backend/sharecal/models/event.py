from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from .enums import EventVisibility


class Event(SQLModel, table=True):
    """Calendar event."""

    __tablename__ = "events"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    calendar_id: UUID = Field(foreign_key="calendars.id", nullable=False, index=True)
    type: str = Field(max_length=64)
    visibility: EventVisibility = Field(default=EventVisibility.PRIVATE)
    name: str = Field(max_length=255)
    description: str = Field(default="", max_length=2000)
    location: str = Field(default="", max_length=255)
    start_time: datetime = Field(nullable=False, index=True)
    end_time: datetime = Field(nullable=False, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Column, JSON
from sqlmodel import Field, SQLModel


class Calendar(SQLModel, table=True):
    """Calendar collectively owned by its confirmed members."""

    __tablename__ = "calendars"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    name: str = Field(max_length=256)
    nb_owners: int = Field(default=0, nullable=False)
    # {event_type: [weekday][hour] -> count}, weekday 0 is Sunday
    timeslot_preferences: dict = Field(
        default_factory=dict, sa_column=Column(JSON, nullable=False)
    )
    sync_token: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)

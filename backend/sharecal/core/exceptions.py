"""Error taxonomy of the calendar core.

Every service operation either returns a value or raises exactly one of the
errors below. The HTTP layer turns them into responses using ``status_code``.
"""
from __future__ import annotations

from enum import Enum

from fastapi import status


class CoreError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(CoreError):
    """Calendar, event, membership or user is absent."""

    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenReason(str, Enum):
    ABSENT = "absent"
    UNCONFIRMED = "unconfirmed"
    INSUFFICIENT_ROLE = "insufficient_role"


class ForbiddenError(CoreError):
    """Membership absent, unconfirmed, or with a role that is too weak."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, detail: str, reason: ForbiddenReason) -> None:
        super().__init__(detail)
        self.reason = reason


class ConflictError(CoreError):
    status_code = status.HTTP_409_CONFLICT


class InvalidInputError(CoreError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidEventTypeError(InvalidInputError):
    def __init__(self, event_type: str) -> None:
        super().__init__(f"Event type invalid: {event_type!r}")
        self.event_type = event_type


class TransactionFailureError(CoreError):
    """The store aborted the unit of work; nothing was committed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

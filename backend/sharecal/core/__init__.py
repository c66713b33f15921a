from .config import settings
from .exceptions import (
    ConflictError,
    CoreError,
    ForbiddenError,
    ForbiddenReason,
    InvalidEventTypeError,
    InvalidInputError,
    NotFoundError,
    TransactionFailureError,
)

__all__ = [
    "settings",
    "ConflictError",
    "CoreError",
    "ForbiddenError",
    "ForbiddenReason",
    "InvalidEventTypeError",
    "InvalidInputError",
    "NotFoundError",
    "TransactionFailureError",
]

from __future__ import annotations

import logging
from typing import Optional

from sharecal.core.config import settings


def configure_logging(*, level: Optional[str] = None) -> None:
    """Configure application-wide logging on stderr."""

    resolved_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(
        level=resolved_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

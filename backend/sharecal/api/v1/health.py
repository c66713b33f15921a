import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from sharecal.core.config import settings
from sharecal.db import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", summary="Health check")
def read_health() -> dict[str, str]:
    return {"status": "ok", "service": settings.PROJECT_NAME}


@router.get("/ready", summary="Readiness check")
def read_ready(session: SessionDep):
    """Readiness probe: the store must answer a trivial query."""
    try:
        session.connection().execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error(f"Readiness check failed: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "database": "disconnected",
                "error": str(exc) if settings.ENVIRONMENT != "production" else "Database connection failed",
            },
        )
    return {"status": "ready", "database": "connected"}

from __future__ import annotations

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import event as sa_event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine, select

from sharecal.core.config import settings
from sharecal.core.exceptions import (
    ConflictError,
    CoreError,
    NotFoundError,
    TransactionFailureError,
)
from sharecal.models import Calendar

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **kwargs) -> Engine:
    connect_args = kwargs.pop("connect_args", {})
    if url.startswith("sqlite"):
        connect_args.setdefault("check_same_thread", False)
    built = create_engine(url, connect_args=connect_args, **kwargs)
    if url.startswith("sqlite"):
        sa_event.listen(built, "connect", _enable_sqlite_foreign_keys)
    return built


engine = build_engine(settings.DATABASE_URL)


def init_db(bind: Engine | None = None) -> None:
    """Create database tables in environments without migrations."""
    SQLModel.metadata.create_all(bind=bind or engine)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_session)]


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """Unit of work: commit on success, roll everything back on any failure.

    Store errors are translated into the core taxonomy: unique or foreign key
    violations become ``ConflictError``, anything else raised by SQLAlchemy
    becomes ``TransactionFailureError``.
    """
    try:
        yield session
        session.commit()
    except CoreError:
        session.rollback()
        raise
    except IntegrityError as exc:
        session.rollback()
        logger.warning(f"Integrity violation, transaction rolled back: {exc.orig}")
        raise ConflictError("Record already exists") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error(f"Transaction aborted: {exc}", exc_info=True)
        raise TransactionFailureError("Transaction aborted by the store") from exc
    except Exception:
        session.rollback()
        raise


def lock_calendar(session: Session, calendar_id: UUID) -> Calendar:
    """Take the per-calendar exclusive lock for the current transaction.

    Emits ``SELECT ... FOR UPDATE`` where the dialect supports it; SQLite
    serialises writers on its own and ignores the clause.
    """
    calendar = session.exec(
        select(Calendar)
        .where(Calendar.id == calendar_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).one_or_none()
    if calendar is None:
        raise NotFoundError("Calendar not found")
    return calendar

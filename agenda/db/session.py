# agenda/db/session.py
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from agenda.core.config import DATABASE_URL
from agenda.core.errors import DuplicateError, ExternalServiceError

log = logging.getLogger(__name__)

_is_sqlite = DATABASE_URL.startswith("sqlite")

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
    pool_pre_ping=True,  # safer reconnects
    future=True,
)


# Enforce foreign keys in SQLite
def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON;")
    cursor.close()


if _is_sqlite:
    event.listen(engine, "connect", enable_sqlite_foreign_keys)


# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    future=True,
)


def _is_unique_violation(e: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed"; postgres: sqlstate 23505
    if getattr(e.orig, "pgcode", None) == "23505":
        return True
    text = str(e.orig).lower()
    return "unique" in text or "duplicate" in text


@contextmanager
def transaction(db: Session, action: str) -> Iterator[Session]:
    """
    One commit for everything written inside the block.
    Any failure rolls the whole unit back; unique-constraint violations
    surface as DuplicateError, every other database error as
    ExternalServiceError.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if _is_unique_violation(e):
            log.warning("unique violation while trying to %s: %s", action, e.orig)
            raise DuplicateError(f"Could not {action}: conflicts with existing data.") from e
        log.error("integrity error while trying to %s: %s", action, e.orig)
        raise ExternalServiceError(f"Could not {action}. Please try again.") from e
    except SQLAlchemyError as e:
        db.rollback()
        log.exception("database error while trying to %s", action)
        raise ExternalServiceError(f"Could not {action}. Please try again.") from e
    except Exception:
        db.rollback()
        raise

from typing import Generator
from contextlib import contextmanager

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from quizboard.database.session import SQLALCHEMY_DATABASE_URL, get_engine, get_local_session
from quizboard.log import get_logger

log = get_logger(__name__)


def _engine_options(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        return {}
    return {
        "pool_size": 5,          # max number of persistent connections in the pool
        "max_overflow": 0,       # 0 means never open more than pool_size
        "pool_timeout": 30,      # seconds to wait for a connection before raising
        "pool_recycle": 1800,    # recycle connections periodically (helps stale conns)
        "pool_pre_ping": True,   # validates connections before using
    }


ENGINE = get_engine(SQLALCHEMY_DATABASE_URL, **_engine_options(SQLALCHEMY_DATABASE_URL))
SessionLocal = get_local_session(ENGINE)


def get_db() -> Generator:  # pragma: no cover
    """
    Returns a generator that yields a database session

    Yields:
        Session: A database session object.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Generator:
    """
    Commits the session on success, rolls it back and re-raises on any error.

    Used by the write paths that must be all-or-nothing (quiz creation and
    attempt upserts).
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def dialect_insert(db: Session, table):
    """
    Returns an INSERT construct that supports ON CONFLICT for the session's database.

    Raises:
        RuntimeError: The session is bound to a database without ON CONFLICT support.
    """
    name = db.get_bind().dialect.name
    try:
        insert = _INSERTS[name]
    except KeyError:
        raise RuntimeError(f"Upserts are not supported on {name}") from None
    return insert(table)

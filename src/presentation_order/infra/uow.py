"""
This is the canonical Unit of Work boundary for presentation-order. All transactional
changes must go through this.

Do not open ad hoc sessions elsewhere.

Every ordering operation runs inside exactly one unit of work, so a splice that fails
halfway through resequencing is rolled back as a whole and never observed.
"""

from __future__ import annotations

import contextlib
from collections.abc import Generator

from sqlalchemy.orm import Session, sessionmaker

from . import db as _db


@contextlib.contextmanager
def session(factory: sessionmaker | None = None) -> Generator[Session, None, None]:
    """
    Database session context manager for CLI operations and the ordering service.

    Provides Unit of Work semantics:
    - Opens a DB session (from ``factory`` when given, else the global SessionLocal)
    - Yields it for use
    - On success: commits the transaction
    - On exception: rolls back and re-raises the exception
    - Always closes the session

    Usage:
        with session() as db:
            engine.move(db, slot_id=4, target_position=1)
            # transaction will be committed automatically on success
    """
    db = (factory or _db.SessionLocal)()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency generator for database sessions.

    Provides the same Unit of Work semantics as session() but as a generator
    for use with FastAPI's dependency injection system.
    """
    db = _db.SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

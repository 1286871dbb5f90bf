"""
Global test configuration for presentation-order.

Every test gets its own SQLite database file. The module-level SessionLocal is
swapped for one bound to that file, so the CLI, the HTTP router and
OrderingService() all hit the test database without further wiring.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from presentation_order.domain.entities import PresentationSession, Slot
from presentation_order.infra import db as db_module
from presentation_order.infra.logging import configure_logging
from presentation_order.ordering.locks import SessionLockRegistry
from presentation_order.ordering.sequence import as_utc
from presentation_order.ordering.service import OrderingService

# Route structlog through stdlib logging before any logger is first used, so log
# lines never land on stdout captured by CliRunner.
configure_logging("WARNING")

START = datetime(2025, 9, 5, 8, 30, tzinfo=UTC)
MINUTES = 20


@pytest.fixture
def engine(tmp_path):
    test_engine = db_module.get_engine(db_url=f"sqlite:///{tmp_path / 'orders.db'}")
    db_module.Base.metadata.create_all(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture(autouse=True)
def _force_test_db(monkeypatch, session_factory):
    """Point the global SessionLocal at this test's database."""
    monkeypatch.setattr(db_module, "SessionLocal", session_factory)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def make_session(session_factory) -> Callable[..., int]:
    """Create and commit a presentation session; returns its id."""

    def _make(start: datetime = START, minutes: int = MINUTES, end: datetime | None = None) -> int:
        with session_factory() as s:
            row = PresentationSession(start_datetime=start, duration_per_slot=minutes, end_datetime=end)
            s.add(row)
            s.commit()
            return row.id

    return _make


@pytest.fixture
def service(session_factory) -> OrderingService:
    return OrderingService(factory=session_factory, locks=SessionLockRegistry(), lock_timeout=5)


@pytest.fixture
def read_slots(session_factory) -> Callable[[int], list[tuple[int, int, int, datetime]]]:
    """Committed (id, position, group_id, scheduled_at) rows of a session in position order."""

    def _read(session_id: int) -> list[tuple[int, int, int, datetime]]:
        with session_factory() as s:
            rows = s.scalars(select(Slot).where(Slot.session_id == session_id).order_by(Slot.position)).all()
            return [(r.id, r.position, r.group_id, as_utc(r.scheduled_at)) for r in rows]

    return _read


def assert_consistent(rows, start: datetime = START, minutes: int = MINUTES) -> None:
    """Positions are exactly 1..N and every time follows from its position."""
    positions = [row[1] for row in rows]
    assert positions == list(range(1, len(rows) + 1))
    for _, position, _, scheduled_at in rows:
        assert scheduled_at == start + timedelta(minutes=(position - 1) * minutes)


@pytest.fixture
def consistent() -> Callable[..., None]:
    return assert_consistent

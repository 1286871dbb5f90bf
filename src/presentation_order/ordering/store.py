"""
Slot repository for database operations.

A thin wrapper around SQLAlchemy operations for Slot rows, following the Unit
of Work pattern: the repository never commits; the caller's transaction does.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ..domain.entities import PresentationSession, Slot
from .exceptions import SessionNotFound, SlotNotFound
from .sequence import SessionWindow, as_utc


class SlotStore:
    """
    Repository for Slot database operations scoped to one SQLAlchemy session.

    ``write_positions`` is the only place positions are persisted. It parks
    every moving row at a negative position, flushes, and then assigns the
    final values, so ``uq_presentation_slots_session_position`` never sees two
    rows sharing a position mid-flush.
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def get_session(self, session_id: int) -> PresentationSession:
        """Read a session without locking it."""
        row = self.db.get(PresentationSession, session_id)
        if row is None:
            raise SessionNotFound(session_id)
        return row

    def lock_session(self, session_id: int) -> PresentationSession:
        """Load a session with a row lock held until the transaction ends.

        On PostgreSQL this serializes structural writers across processes.
        SQLite ignores FOR UPDATE; there the in-process session lock is what
        serializes writers.
        """
        stmt = (
            select(PresentationSession)
            .where(PresentationSession.id == session_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = self.db.scalars(stmt).first()
        if row is None:
            raise SessionNotFound(session_id)
        return row

    @staticmethod
    def window(session_row: PresentationSession) -> SessionWindow:
        return SessionWindow(
            start=as_utc(session_row.start_datetime),
            minutes_per_slot=session_row.duration_per_slot,
        )

    # ------------------------------------------------------------------
    # Slots: reads
    # ------------------------------------------------------------------

    def find_by_session_ordered(self, session_id: int) -> list[Slot]:
        """All slots of a session in position order, refreshed from the database."""
        stmt = (
            select(Slot)
            .where(Slot.session_id == session_id)
            .order_by(Slot.position, Slot.id)
            .execution_options(populate_existing=True)
        )
        return list(self.db.scalars(stmt))

    def find_by_id(self, slot_id: int) -> Slot:
        slot = self.db.get(Slot, slot_id)
        if slot is None:
            raise SlotNotFound(slot_id)
        return slot

    def group_taken(self, session_id: int, group_id: int, exclude_slot_id: int | None = None) -> bool:
        stmt = select(Slot.id).where(Slot.session_id == session_id, Slot.group_id == group_id)
        if exclude_slot_id is not None:
            stmt = stmt.where(Slot.id != exclude_slot_id)
        return self.db.scalars(stmt.limit(1)).first() is not None

    # ------------------------------------------------------------------
    # Slots: writes
    # ------------------------------------------------------------------

    def add(self, *, session_id: int, group_id: int) -> Slot:
        """Stage a new slot; ``write_positions`` gives it its position and time."""
        slot = Slot(session_id=session_id, group_id=group_id)
        self.db.add(slot)
        return slot

    def create_many(self, session_id: int, group_ids: Iterable[int], window: SessionWindow) -> list[Slot]:
        slots = [
            Slot(
                session_id=session_id,
                group_id=group_id,
                position=position,
                scheduled_at=window.at(position),
            )
            for position, group_id in enumerate(group_ids, start=1)
        ]
        self.db.add_all(slots)
        self.db.flush()
        return slots

    def update(self, slot: Slot, **changes: object) -> Slot:
        for name, value in changes.items():
            setattr(slot, name, value)
        self.db.flush()
        return slot

    def delete(self, slot: Slot) -> None:
        self.db.delete(slot)
        self.db.flush()

    def delete_many(self, session_id: int) -> int:
        """Delete every slot of a session immediately; returns the row count."""
        result = self.db.execute(
            delete(Slot).where(Slot.session_id == session_id).execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    def write_positions(self, slots: Sequence[Slot], window: SessionWindow) -> int:
        """Persist ``position = index + 1`` and the derived time for every slot.

        Returns the number of slots whose position changed. Slots already at
        the right position and time are left untouched.
        """
        moving = [(slot, index) for index, slot in enumerate(slots, start=1) if slot.position != index]

        if moving:
            for slot, index in moving:
                slot.position = -index
                slot.scheduled_at = window.at(index)
            self.db.flush()
            for slot, index in moving:
                slot.position = index

        for index, slot in enumerate(slots, start=1):
            expected = window.at(index)
            if as_utc(slot.scheduled_at) != expected:
                slot.scheduled_at = expected

        self.db.flush()
        return len(moving)

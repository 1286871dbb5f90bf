"""
Ordering service: the engine behind a per-session lock and a unit of work.

Each write resolves the session it touches, takes that session's lock, opens a
transaction, runs the engine operation and commits before releasing the lock.
The next writer for the same session therefore always starts from committed
state. Reads go straight to a fresh transaction without locking.
"""

from __future__ import annotations

import contextlib
from collections.abc import Generator, Sequence
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from ..infra import uow
from ..infra.settings import settings
from . import engine
from .locks import SessionLockRegistry, default_registry
from .projection import ScheduleEntry
from .sequence import SEQUENTIAL
from .store import SlotStore


class OrderingService:
    """Serialized, transactional access to the ordering engine.

    Args:
        factory: sessionmaker used for each unit of work (default: the global SessionLocal)
        locks: lock registry (default: the process-wide registry)
        lock_timeout: seconds to wait for a session lock before raising SessionBusy
    """

    def __init__(
        self,
        factory: sessionmaker | None = None,
        locks: SessionLockRegistry | None = None,
        lock_timeout: float | None = None,
    ) -> None:
        self._factory = factory
        self._locks = default_registry if locks is None else locks
        self._lock_timeout = settings.lock_timeout_seconds if lock_timeout is None else lock_timeout

    @contextlib.contextmanager
    def _serialized(self, session_id: int) -> Generator[Session, None, None]:
        with self._locks.hold(session_id, timeout=self._lock_timeout):
            with uow.session(self._factory) as db:
                yield db

    def _owning_session(self, slot_id: int) -> int:
        # A slot never changes session, so this read needs no lock.
        with uow.session(self._factory) as db:
            return SlotStore(db).find_by_id(slot_id).session_id

    def schedule(self, session_id: int) -> list[ScheduleEntry]:
        with uow.session(self._factory) as db:
            return engine.schedule(db, session_id=session_id)

    def replace_all(self, session_id: int, group_ids: Sequence[int]) -> list[ScheduleEntry]:
        with self._serialized(session_id) as db:
            return engine.replace_all(db, session_id=session_id, group_ids=group_ids)

    def generate(
        self,
        session_id: int,
        group_ids: Sequence[int],
        algorithm: str = SEQUENTIAL,
        shuffle_seed: int | None = None,
    ) -> list[ScheduleEntry]:
        with self._serialized(session_id) as db:
            return engine.generate(
                db,
                session_id=session_id,
                group_ids=group_ids,
                algorithm=algorithm,
                shuffle_seed=shuffle_seed,
            )

    def insert(self, session_id: int, group_id: int, position: int | None = None) -> list[ScheduleEntry]:
        with self._serialized(session_id) as db:
            return engine.insert(db, session_id=session_id, group_id=group_id, position=position)

    def move(self, slot_id: int, target_position: int, group_id: int | None = None) -> list[ScheduleEntry]:
        with self._serialized(self._owning_session(slot_id)) as db:
            return engine.move(db, slot_id=slot_id, target_position=target_position, group_id=group_id)

    def reorder(self, session_id: int, from_position: int, to_position: int) -> list[ScheduleEntry]:
        with self._serialized(session_id) as db:
            return engine.reorder(
                db, session_id=session_id, from_position=from_position, to_position=to_position
            )

    def remove(self, slot_id: int) -> list[ScheduleEntry]:
        with self._serialized(self._owning_session(slot_id)) as db:
            return engine.remove(db, slot_id=slot_id)

    def retime(self, session_id: int) -> list[ScheduleEntry]:
        with self._serialized(session_id) as db:
            return engine.retime(db, session_id=session_id)

    def update_session(self, session_id: int, **changes: Any) -> dict[str, Any]:
        """Change a session's window under its lock; slots are retimed in the same transaction."""
        from ..usecases.session_update import update_session

        with self._serialized(session_id) as db:
            return update_session(db, session_id=session_id, **changes)

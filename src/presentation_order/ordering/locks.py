"""Per-session write locks.

Structural operations on one session read the whole slot list and write it
back, so two of them running at once would both start from the same "before"
list and one result would be lost. The registry hands out one lock per session
id; operations on different sessions never wait on each other. A lock lives
only while some caller holds a reference to it, so the registry does not grow
with every session id it has seen.
"""

from __future__ import annotations

import contextlib
import threading
import weakref
from collections.abc import Generator

from .exceptions import SessionBusy


class SessionLockRegistry:
    """Thread-safe weak map of session id to ``threading.Lock``."""

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[int, threading.Lock] = weakref.WeakValueDictionary()
        self._guard = threading.Lock()

    def lock_for(self, session_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[session_id] = lock
            return lock

    @contextlib.contextmanager
    def hold(self, session_id: int, timeout: float | None = None) -> Generator[None, None, None]:
        """Hold the session's lock for the duration of the block.

        Raises SessionBusy if the lock is not acquired within ``timeout``
        seconds (``None`` waits indefinitely).
        """
        lock = self.lock_for(session_id)
        acquired = lock.acquire(timeout=-1 if timeout is None else timeout)
        if not acquired:
            raise SessionBusy(session_id, timeout)
        try:
            yield
        finally:
            lock.release()


# Process-wide registry shared by every OrderingService that is not given its own.
default_registry = SessionLockRegistry()

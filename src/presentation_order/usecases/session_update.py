from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from ..infra.logging import get_logger
from ..ordering import engine
from ..ordering.sequence import as_utc
from ..ordering.store import SlotStore
from .session_add import session_to_dict, validate_duration, validate_window

logger = get_logger(__name__)


def update_session(
    db: Session,
    *,
    session_id: int,
    start_datetime: datetime | None = None,
    duration_per_slot: int | None = None,
    end_datetime: datetime | None = None,
    clear_end: bool = False,
) -> dict[str, Any]:
    """Change a session's window and retime its slots when start or duration moved.

    Raises:
        SessionNotFound: If the session does not exist
        ValidationError: If the new duration or window is invalid
    """
    store = SlotStore(db)
    row = store.lock_session(session_id)

    new_start = as_utc(start_datetime) if start_datetime is not None else as_utc(row.start_datetime)
    new_duration = validate_duration(duration_per_slot) if duration_per_slot is not None else row.duration_per_slot
    if clear_end:
        new_end = None
    elif end_datetime is not None:
        new_end = as_utc(end_datetime)
    else:
        new_end = row.end_datetime
    validate_window(new_start, new_end)

    window_changed = new_start != as_utc(row.start_datetime) or new_duration != row.duration_per_slot
    row.start_datetime = new_start
    row.duration_per_slot = new_duration
    row.end_datetime = new_end
    # retime re-reads the session row, so the new window must be flushed first
    db.flush()

    result = session_to_dict(row)
    if window_changed:
        entries = engine.retime(db, session_id=session_id)
        logger.info("session_window_changed", session_id=session_id, slots=len(entries))
    return result


__all__ = ["update_session"]

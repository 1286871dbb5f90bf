from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from ..ordering import engine
from ..ordering.sequence import SessionWindow
from ..ordering.store import SlotStore
from .session_add import session_to_dict


def show_session(db: Session, *, session_id: int, with_schedule: bool = True) -> dict[str, Any]:
    """Return a session and, by default, its current presentation order.

    Raises:
        SessionNotFound: If the session does not exist
    """
    result = session_to_dict(SlotStore(db).get_session(session_id))
    if with_schedule:
        result["slots"] = [entry.to_dict() for entry in engine.schedule(db, session_id=session_id)]
    return result


def get_session_window(db: Session, *, session_id: int) -> SessionWindow:
    """Session lookup as consumed by the ordering engine: start and minutes per slot only.

    Raises:
        SessionNotFound: If the session does not exist
    """
    return SlotStore.window(SlotStore(db).get_session(session_id))


__all__ = ["get_session_window", "show_session"]

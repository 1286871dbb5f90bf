from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from ..domain.entities import PresentationSession
from ..infra.exceptions import ValidationError
from ..ordering.projection import format_datetime
from ..ordering.sequence import MAX_MINUTES_PER_SLOT, as_utc


def parse_datetime(value: str, label: str = "datetime") -> datetime:
    """Parse an ISO-8601 instant; a trailing ``Z`` and naive values mean UTC.

    Raises ValidationError if the format is invalid.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError as e:
        raise ValidationError(f"Invalid {label} '{value}'. Use ISO-8601, e.g. 2025-09-05T08:30:00Z: {e}")


def validate_duration(duration_per_slot: int) -> int:
    if duration_per_slot <= 0 or duration_per_slot > MAX_MINUTES_PER_SLOT:
        raise ValidationError(
            f"duration_per_slot must be between 1 and {MAX_MINUTES_PER_SLOT} minutes, got {duration_per_slot}"
        )
    return duration_per_slot


def validate_window(start: datetime, end: datetime | None) -> None:
    if end is not None and as_utc(end) <= as_utc(start):
        raise ValidationError("end_datetime must be after start_datetime")


def session_to_dict(row: PresentationSession) -> dict[str, Any]:
    return {
        "id": row.id,
        "start_datetime": format_datetime(as_utc(row.start_datetime)),
        "end_datetime": format_datetime(as_utc(row.end_datetime)) if row.end_datetime else None,
        "duration_per_slot": row.duration_per_slot,
    }


def add_session(
    db: Session,
    *,
    start_datetime: datetime,
    duration_per_slot: int,
    end_datetime: datetime | None = None,
) -> dict[str, Any]:
    """Register a presentation session and return a contract-aligned dict.

    Args:
        db: Database session
        start_datetime: Start of the first slot
        duration_per_slot: Minutes per presenting group (> 0)
        end_datetime: Optional informational end of the session

    Raises:
        ValidationError: If the duration or window is invalid
    """
    validate_duration(duration_per_slot)
    validate_window(start_datetime, end_datetime)

    row = PresentationSession(
        start_datetime=as_utc(start_datetime),
        duration_per_slot=duration_per_slot,
        end_datetime=as_utc(end_datetime) if end_datetime else None,
    )
    db.add(row)
    db.flush()

    return session_to_dict(row)


__all__ = ["add_session", "parse_datetime", "session_to_dict"]

"""Read-only schedule projection.

Turns a session's ordered slots into (position, group, time) entries. Times are
derived from the position here again rather than read from the stored column,
so a projection is always consistent with the session window it was built from.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from ..domain.entities import Slot
from .sequence import SessionWindow


def format_datetime(dt: datetime) -> str:
    """Format an aware datetime in ISO-8601 UTC (``Z`` suffix)."""
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ScheduleEntry:
    slot_id: int
    position: int
    group_id: int
    scheduled_at: datetime
    ends_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.slot_id,
            "position": self.position,
            "group_id": self.group_id,
            "scheduled_at": format_datetime(self.scheduled_at),
            "ends_at": format_datetime(self.ends_at),
        }


def project(slots: Sequence[Slot], window: SessionWindow) -> list[ScheduleEntry]:
    """Build entries for ``slots``, which must already be in position order."""
    return [
        ScheduleEntry(
            slot_id=slot.id,
            position=slot.position,
            group_id=slot.group_id,
            scheduled_at=window.at(slot.position),
            ends_at=window.ends_at(slot.position),
        )
        for slot in slots
    ]


CSV_COLUMNS = ("position", "group_id", "scheduled_at", "ends_at")


def export_csv(entries: Iterable[ScheduleEntry]) -> str:
    """Render a schedule as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for entry in entries:
        writer.writerow(
            [
                entry.position,
                entry.group_id,
                format_datetime(entry.scheduled_at),
                format_datetime(entry.ends_at),
            ]
        )
    return buffer.getvalue()

"""Pure list and time primitives behind slot resequencing.

Nothing here touches the database. The engine materializes a session's slots
as a Python list, edits that list with these helpers, and then writes back the
position (index + 1) and derived time of every element.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TypeVar

from .exceptions import InvalidAlgorithm, InvariantViolation, PositionOutOfRange, SlotTimeOverflow

T = TypeVar("T")

# A slot never lasts longer than a day.
MAX_MINUTES_PER_SLOT = 24 * 60

SEQUENTIAL = "sequential"
RANDOM = "random"
ALGORITHMS = (SEQUENTIAL, RANDOM)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    SQLite hands back naive datetimes for timezone-aware columns; those are
    taken to already be in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def slot_time(start: datetime, minutes_per_slot: int, position: int) -> datetime:
    """Start time of the slot at 1-based ``position``.

    Raises SlotTimeOverflow if the time falls outside the datetime range.
    """
    try:
        return as_utc(start) + timedelta(minutes=(position - 1) * minutes_per_slot)
    except OverflowError as e:
        raise SlotTimeOverflow(position, minutes_per_slot) from e


@dataclass(frozen=True)
class SessionWindow:
    """The two session fields time derivation depends on."""

    start: datetime
    minutes_per_slot: int

    def at(self, position: int) -> datetime:
        return slot_time(self.start, self.minutes_per_slot, position)

    def ends_at(self, position: int) -> datetime:
        return slot_time(self.start, self.minutes_per_slot, position + 1)


def splice(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Return a copy of ``items`` with the element at ``from_index`` moved to ``to_index``.

    Both indexes are 0-based and refer to the list before the move; the element
    is removed first, then reinserted so that it ends up at ``to_index``.
    """
    result = list(items)
    moving = result.pop(from_index)
    result.insert(to_index, moving)
    return result


def check_range(position: int, upper: int, label: str = "position") -> None:
    """Raise PositionOutOfRange unless ``1 <= position <= upper``."""
    if position < 1 or position > upper:
        raise PositionOutOfRange(position, upper, label)


def check_positions(session_id: int, positions: Sequence[int]) -> None:
    """Raise InvariantViolation unless ``positions`` is exactly 1..N in order."""
    if list(positions) != list(range(1, len(positions) + 1)):
        raise InvariantViolation(session_id, list(positions))


def arrange(group_ids: Sequence[int], algorithm: str = SEQUENTIAL, seed: int | None = None) -> list[int]:
    """Order groups for a freshly generated schedule.

    ``sequential`` keeps the given order. ``random`` shuffles with a
    ``random.Random(seed)`` instance, so the same seed always yields the same
    order for the same input.
    """
    name = algorithm.strip().lower()
    if name not in ALGORITHMS:
        raise InvalidAlgorithm(algorithm, ALGORITHMS)

    ordered = list(group_ids)
    if name == RANDOM:
        random.Random(seed).shuffle(ordered)
    return ordered

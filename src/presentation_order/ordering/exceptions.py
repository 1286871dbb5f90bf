"""
Ordering exceptions.

Every error carries the offending identifier or position (and, for range
errors, the valid range) so the caller can correct its input. All of them are
terminal for the call: the surrounding unit of work rolls back.
"""

from __future__ import annotations

from ..infra.exceptions import (
    ConcurrencyError,
    NotFoundError,
    PresentationOrderError,
    ValidationError,
)


class SessionNotFound(NotFoundError):
    """Raised when a presentation session id does not resolve."""

    def __init__(self, session_id: int):
        super().__init__(f"Presentation session {session_id} not found")
        self.session_id = session_id


class SlotNotFound(NotFoundError):
    """Raised when a slot id does not resolve."""

    def __init__(self, slot_id: int):
        super().__init__(f"Slot {slot_id} not found")
        self.slot_id = slot_id


class PositionOutOfRange(ValidationError):
    """Raised when a 1-based position lies outside the session's valid range.

    ``label`` names which argument was wrong (``from``, ``to``, ``target``,
    ``position``).
    """

    def __init__(self, position: int, upper: int, label: str = "position"):
        if upper < 1:
            message = f"{label} position {position} is out of range: session has no slots"
        else:
            message = f"{label} position {position} is out of range: valid range is 1..{upper}"
        super().__init__(message)
        self.position = position
        self.upper = upper
        self.label = label


class DuplicateGroup(ValidationError):
    """Raised when a group would occupy two slots of the same session."""

    def __init__(self, group_id: int, session_id: int):
        super().__init__(f"Group {group_id} already has a slot in presentation session {session_id}")
        self.group_id = group_id
        self.session_id = session_id


class SlotTimeOverflow(ValidationError):
    """Raised when a derived slot time falls outside the representable datetime range."""

    def __init__(self, position: int, minutes_per_slot: int):
        super().__init__(
            f"Slot time for position {position} at {minutes_per_slot} minutes per slot is out of range"
        )
        self.position = position
        self.minutes_per_slot = minutes_per_slot


class InvalidAlgorithm(ValidationError):
    """Raised when an unknown ordering algorithm is requested."""

    def __init__(self, name: str, valid: tuple[str, ...]):
        super().__init__(f"Unknown ordering algorithm '{name}'. Valid values: {list(valid)}")
        self.name = name
        self.valid = valid


class SessionBusy(ConcurrencyError):
    """Raised when another writer holds the session for longer than the lock timeout."""

    def __init__(self, session_id: int, timeout: float | None):
        super().__init__(
            f"Presentation session {session_id} is busy (lock not acquired within {timeout}s); retry"
        )
        self.session_id = session_id
        self.timeout = timeout


class InvariantViolation(PresentationOrderError):
    """Raised when resequencing produced positions that are not exactly 1..N.

    Never expected in correct operation; indicates a bug in the engine.
    """

    def __init__(self, session_id: int, positions: list[int]):
        super().__init__(
            f"Positions for presentation session {session_id} are not a dense 1..{len(positions)} "
            f"sequence: {positions}"
        )
        self.session_id = session_id
        self.positions = positions

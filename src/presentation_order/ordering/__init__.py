"""
Presentation order scheduling.

- engine: splice-and-resequence operations on a caller-supplied session
- service: the same operations serialized per presentation session
- projection: read-only (position, group, time) view and CSV export
"""

from .exceptions import (
    DuplicateGroup,
    InvalidAlgorithm,
    InvariantViolation,
    PositionOutOfRange,
    SessionBusy,
    SessionNotFound,
    SlotNotFound,
    SlotTimeOverflow,
)
from .projection import ScheduleEntry, export_csv
from .service import OrderingService

__all__ = [
    "OrderingService",
    "ScheduleEntry",
    "export_csv",
    # Exceptions
    "DuplicateGroup",
    "InvalidAlgorithm",
    "InvariantViolation",
    "PositionOutOfRange",
    "SessionBusy",
    "SessionNotFound",
    "SlotNotFound",
    "SlotTimeOverflow",
]

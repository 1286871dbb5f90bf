"""
Presentation order engine.

Keeps every session's slots at positions exactly 1..N with
``scheduled_at = start + (position - 1) * duration``. Each structural change
follows the same recipe:

1. lock the session row and load its slots in position order,
2. apply the edit to that in-memory list (splice out, splice in, rebuild),
3. write position and time for the whole resulting list,
4. check the result is dense before returning.

Functions take the caller's SQLAlchemy session and never commit; run them
inside ``infra.uow.session()`` (or use ``OrderingService``, which also
serializes writers per session).
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from ..domain.entities import PresentationSession, Slot
from ..infra.logging import get_logger
from .exceptions import DuplicateGroup, SlotNotFound
from .projection import ScheduleEntry, project
from .sequence import SEQUENTIAL, arrange, check_positions, check_range, splice
from .store import SlotStore

logger = get_logger(__name__)


def _check_distinct(session_id: int, group_ids: Sequence[int]) -> None:
    seen: set[int] = set()
    for group_id in group_ids:
        if group_id in seen:
            raise DuplicateGroup(group_id, session_id)
        seen.add(group_id)


def schedule(db: Session, *, session_id: int) -> list[ScheduleEntry]:
    """Return the session's slots in position order with derived times.

    Read-only; takes no lock. The window comes from the session registry lookup.

    Raises:
        SessionNotFound: If the session does not exist
    """
    from ..usecases.session_show import get_session_window

    window = get_session_window(db, session_id=session_id)
    return project(SlotStore(db).find_by_session_ordered(session_id), window)


def replace_all(db: Session, *, session_id: int, group_ids: Sequence[int]) -> list[ScheduleEntry]:
    """Replace the whole order of a session with ``group_ids``.

    Every existing slot is deleted (old slot ids are gone) and one slot per
    group is created at ``position = index + 1``. An empty sequence clears the
    session.

    Raises:
        SessionNotFound: If the session does not exist
        DuplicateGroup: If ``group_ids`` repeats a group
    """
    store = SlotStore(db)
    session_row = store.lock_session(session_id)
    ordered = list(group_ids)
    _check_distinct(session_id, ordered)

    removed = store.delete_many(session_id)
    created = store.create_many(session_id, ordered, store.window(session_row))
    check_positions(session_id, [slot.position for slot in created])

    logger.info("order_replaced", session_id=session_id, removed=removed, created=len(created))
    return schedule(db, session_id=session_id)


def generate(
    db: Session,
    *,
    session_id: int,
    group_ids: Sequence[int],
    algorithm: str = SEQUENTIAL,
    shuffle_seed: int | None = None,
) -> list[ScheduleEntry]:
    """Build a fresh order for ``group_ids`` and replace the session's slots with it.

    Raises:
        InvalidAlgorithm: If ``algorithm`` is not ``sequential`` or ``random``
        SessionNotFound, DuplicateGroup: As for ``replace_all``
    """
    ordered = arrange(group_ids, algorithm, shuffle_seed)
    logger.info(
        "order_generating",
        session_id=session_id,
        algorithm=algorithm,
        shuffle_seed=shuffle_seed,
        groups=len(ordered),
    )
    return replace_all(db, session_id=session_id, group_ids=ordered)


def insert(
    db: Session,
    *,
    session_id: int,
    group_id: int,
    position: int | None = None,
) -> list[ScheduleEntry]:
    """Create a slot for ``group_id`` and splice it in at ``position``.

    ``position`` defaults to the end of the order; valid values are 1..N+1.
    Slots at or after ``position`` shift down by one.

    Raises:
        SessionNotFound: If the session does not exist
        PositionOutOfRange: If ``position`` is outside 1..N+1
        DuplicateGroup: If the group already has a slot in the session
    """
    store = SlotStore(db)
    session_row = store.lock_session(session_id)
    slots = store.find_by_session_ordered(session_id)

    target = len(slots) + 1 if position is None else position
    check_range(target, len(slots) + 1, "position")
    if store.group_taken(session_id, group_id):
        raise DuplicateGroup(group_id, session_id)

    new_slot = store.add(session_id=session_id, group_id=group_id)
    ordered = list(slots)
    ordered.insert(target - 1, new_slot)
    shifted = store.write_positions(ordered, store.window(session_row))
    check_positions(session_id, [slot.position for slot in ordered])

    logger.info(
        "slot_inserted",
        session_id=session_id,
        slot_id=new_slot.id,
        group_id=group_id,
        position=target,
        shifted=shifted - 1,
    )
    return schedule(db, session_id=session_id)


def _move_within(
    store: SlotStore,
    session_row: PresentationSession,
    slots: list[Slot],
    slot: Slot,
    target_position: int,
    group_id: int | None,
) -> None:
    session_id = session_row.id
    check_range(target_position, len(slots), "target")

    regroup = group_id is not None and group_id != slot.group_id
    if regroup and store.group_taken(session_id, group_id, exclude_slot_id=slot.id):
        raise DuplicateGroup(group_id, session_id)

    current_index = slots.index(slot)
    if current_index == target_position - 1:
        if regroup:
            previous_group = slot.group_id
            store.update(slot, group_id=group_id)
            logger.info(
                "slot_regrouped",
                session_id=session_id,
                slot_id=slot.id,
                from_group=previous_group,
                to_group=group_id,
            )
        else:
            logger.debug("slot_move_noop", session_id=session_id, slot_id=slot.id, position=target_position)
        return

    reordered = splice(slots, current_index, target_position - 1)
    if regroup:
        slot.group_id = group_id
    changed = store.write_positions(reordered, store.window(session_row))
    check_positions(session_id, [s.position for s in reordered])

    logger.info(
        "slot_moved",
        session_id=session_id,
        slot_id=slot.id,
        from_position=current_index + 1,
        to_position=target_position,
        regrouped=regroup,
        changed=changed,
    )


def move(
    db: Session,
    *,
    slot_id: int,
    target_position: int,
    group_id: int | None = None,
) -> list[ScheduleEntry]:
    """Move a slot to ``target_position`` and optionally reassign its group.

    The slot is spliced out of the ordered list and back in at
    ``target_position - 1``; every other slot keeps its relative order. When
    the position does not change only the group column is written (or nothing,
    if the group is unchanged too).

    Raises:
        SlotNotFound: If ``slot_id`` does not exist
        PositionOutOfRange: If ``target_position`` is outside 1..N
        DuplicateGroup: If ``group_id`` already has another slot in the session
    """
    store = SlotStore(db)
    slot = store.find_by_id(slot_id)
    session_row = store.lock_session(slot.session_id)
    slots = store.find_by_session_ordered(slot.session_id)
    if slot not in slots:
        raise SlotNotFound(slot_id)

    _move_within(store, session_row, slots, slot, target_position, group_id)
    return schedule(db, session_id=session_row.id)


def reorder(
    db: Session,
    *,
    session_id: int,
    from_position: int,
    to_position: int,
) -> list[ScheduleEntry]:
    """Move the slot currently at ``from_position`` to ``to_position``.

    Raises:
        SessionNotFound: If the session does not exist
        PositionOutOfRange: If either position is outside 1..N (the message
            names ``from`` or ``to``)
    """
    store = SlotStore(db)
    session_row = store.lock_session(session_id)
    slots = store.find_by_session_ordered(session_id)
    check_range(from_position, len(slots), "from")
    check_range(to_position, len(slots), "to")

    _move_within(store, session_row, slots, slots[from_position - 1], to_position, None)
    return schedule(db, session_id=session_id)


def remove(db: Session, *, slot_id: int) -> list[ScheduleEntry]:
    """Delete a slot and close the gap it leaves.

    Every slot after the removed one moves up one position and gets its time
    recomputed.

    Raises:
        SlotNotFound: If ``slot_id`` does not exist
    """
    store = SlotStore(db)
    slot = store.find_by_id(slot_id)
    session_id = slot.session_id
    session_row = store.lock_session(session_id)
    slots = store.find_by_session_ordered(session_id)
    if slot not in slots:
        raise SlotNotFound(slot_id)

    removed_position = slot.position
    store.delete(slot)
    survivors = [s for s in slots if s is not slot]
    shifted = store.write_positions(survivors, store.window(session_row))
    check_positions(session_id, [s.position for s in survivors])

    logger.info(
        "slot_removed",
        session_id=session_id,
        slot_id=slot_id,
        position=removed_position,
        shifted=shifted,
        remaining=len(survivors),
    )
    return schedule(db, session_id=session_id)


def retime(db: Session, *, session_id: int) -> list[ScheduleEntry]:
    """Recompute ``scheduled_at`` for every slot from the current session window.

    Positions are left alone. Call after the session's start or slot duration
    changed.

    Raises:
        SessionNotFound: If the session does not exist
    """
    store = SlotStore(db)
    session_row = store.lock_session(session_id)
    slots = store.find_by_session_ordered(session_id)
    store.write_positions(slots, store.window(session_row))
    check_positions(session_id, [s.position for s in slots])

    logger.info("order_retimed", session_id=session_id, slots=len(slots))
    return schedule(db, session_id=session_id)


__all__ = [
    "generate",
    "insert",
    "move",
    "remove",
    "reorder",
    "replace_all",
    "retime",
    "schedule",
]

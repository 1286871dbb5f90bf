"""Unit tests for the list and time primitives used by resequencing."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from presentation_order.infra.exceptions import ValidationError
from presentation_order.ordering.exceptions import (
    InvalidAlgorithm,
    InvariantViolation,
    PositionOutOfRange,
    SlotTimeOverflow,
)
from presentation_order.ordering.sequence import (
    SessionWindow,
    arrange,
    as_utc,
    check_positions,
    check_range,
    slot_time,
    splice,
)

START = datetime(2025, 9, 5, 8, 30, tzinfo=UTC)


class TestSplice:
    def test_moves_element_towards_front(self):
        assert splice(["a", "b", "c", "d"], 2, 0) == ["c", "a", "b", "d"]

    def test_moves_element_towards_back(self):
        assert splice(["a", "b", "c", "d"], 0, 2) == ["b", "c", "a", "d"]

    def test_same_index_is_identity(self):
        assert splice([1, 2, 3], 1, 1) == [1, 2, 3]

    def test_input_is_not_mutated(self):
        items = [1, 2, 3]
        splice(items, 0, 2)
        assert items == [1, 2, 3]

    def test_relative_order_of_others_is_kept(self):
        result = splice(list(range(10)), 7, 2)
        assert [x for x in result if x != 7] == [x for x in range(10) if x != 7]
        assert result[2] == 7


class TestCheckRange:
    @pytest.mark.parametrize("position", [1, 2, 3])
    def test_accepts_inside_range(self, position):
        check_range(position, 3)

    @pytest.mark.parametrize("position", [0, 4, -1])
    def test_rejects_outside_range(self, position):
        with pytest.raises(PositionOutOfRange) as exc_info:
            check_range(position, 3, "target")
        assert exc_info.value.position == position
        assert "valid range is 1..3" in str(exc_info.value)
        assert str(exc_info.value).startswith("target position")

    def test_empty_session_message(self):
        with pytest.raises(PositionOutOfRange, match="session has no slots"):
            check_range(1, 0)


class TestCheckPositions:
    def test_dense_sequence_passes(self):
        check_positions(1, [1, 2, 3])
        check_positions(1, [])

    @pytest.mark.parametrize("positions", [[1, 3], [2, 3], [1, 1, 2], [2, 1]])
    def test_gaps_duplicates_and_disorder_fail(self, positions):
        with pytest.raises(InvariantViolation) as exc_info:
            check_positions(7, positions)
        assert exc_info.value.session_id == 7
        assert exc_info.value.positions == positions


class TestSlotTime:
    def test_first_slot_starts_at_session_start(self):
        assert slot_time(START, 20, 1) == START

    def test_later_slots_are_offset_by_duration(self):
        assert slot_time(START, 20, 3) == datetime(2025, 9, 5, 9, 10, tzinfo=UTC)

    def test_naive_start_is_read_as_utc(self):
        assert slot_time(START.replace(tzinfo=None), 20, 2) == START + timedelta(minutes=20)

    def test_window_end_is_next_slot_start(self):
        window = SessionWindow(start=START, minutes_per_slot=15)
        assert window.ends_at(2) == window.at(3)

    def test_as_utc_converts_offsets(self):
        local = datetime(2025, 9, 5, 10, 30, tzinfo=timezone(timedelta(hours=2)))
        assert as_utc(local) == START
        assert as_utc(local).tzinfo == UTC


class TestSlotTimeRange:
    def test_overflow_becomes_validation_error(self):
        with pytest.raises(SlotTimeOverflow) as exc_info:
            slot_time(datetime(9999, 12, 31, tzinfo=UTC), 24 * 60, 3)
        assert isinstance(exc_info.value, ValidationError)
        assert exc_info.value.position == 3

    def test_huge_duration_overflows(self):
        with pytest.raises(SlotTimeOverflow):
            slot_time(START, 10**10, 2)


class TestArrange:
    def test_sequential_keeps_order(self):
        assert arrange([5, 6, 7]) == [5, 6, 7]

    def test_random_is_a_permutation(self):
        groups = list(range(1, 21))
        assert sorted(arrange(groups, "random", seed=3)) == groups

    def test_random_is_deterministic_for_a_seed(self):
        groups = list(range(1, 21))
        assert arrange(groups, "random", seed=42) == arrange(groups, "random", seed=42)

    def test_algorithm_name_is_case_insensitive(self):
        assert arrange([1, 2], " Sequential ") == [1, 2]

    def test_unknown_algorithm(self):
        with pytest.raises(InvalidAlgorithm) as exc_info:
            arrange([1, 2], "alphabetical")
        assert exc_info.value.name == "alphabetical"

"""
Tests for the session registry usecases (add, show, update).
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from presentation_order.infra.exceptions import ValidationError
from presentation_order.ordering import engine
from presentation_order.ordering.exceptions import SessionNotFound
from presentation_order.usecases import session_add, session_show, session_update

START = datetime(2025, 9, 5, 8, 30, tzinfo=UTC)


class TestParseDatetime:
    def test_z_suffix(self):
        assert session_add.parse_datetime("2025-09-05T08:30:00Z") == START

    def test_offset_is_converted_to_utc(self):
        assert session_add.parse_datetime("2025-09-05T10:30:00+02:00") == START

    def test_naive_value_is_utc(self):
        assert session_add.parse_datetime("2025-09-05T08:30:00") == START

    def test_garbage_is_rejected(self):
        with pytest.raises(ValidationError, match="Invalid start"):
            session_add.parse_datetime("next tuesday", "start")


class TestAddSession:
    def test_returns_contract_dict(self, db):
        result = session_add.add_session(db, start_datetime=START, duration_per_slot=20)
        db.commit()

        assert isinstance(result["id"], int)
        assert result["start_datetime"] == "2025-09-05T08:30:00Z"
        assert result["duration_per_slot"] == 20
        assert result["end_datetime"] is None

    def test_offsets_are_normalized(self, db):
        local = datetime(2025, 9, 5, 10, 30, tzinfo=timezone(timedelta(hours=2)))
        result = session_add.add_session(db, start_datetime=local, duration_per_slot=20)
        assert result["start_datetime"] == "2025-09-05T08:30:00Z"

    @pytest.mark.parametrize("duration", [0, -5, 24 * 60 + 1, 10**10])
    def test_duration_must_be_within_a_day(self, db, duration):
        with pytest.raises(ValidationError, match="duration_per_slot"):
            session_add.add_session(db, start_datetime=START, duration_per_slot=duration)

    def test_end_must_follow_start(self, db):
        with pytest.raises(ValidationError, match="end_datetime"):
            session_add.add_session(
                db, start_datetime=START, duration_per_slot=20, end_datetime=START - timedelta(hours=1)
            )


class TestShowSession:
    def test_includes_schedule(self, db, make_session):
        session_id = make_session()
        engine.replace_all(db, session_id=session_id, group_ids=[4, 5])
        db.commit()

        result = session_show.show_session(db, session_id=session_id)
        assert [s["group_id"] for s in result["slots"]] == [4, 5]
        assert result["slots"][1]["scheduled_at"] == "2025-09-05T08:50:00Z"

    def test_without_schedule(self, db, make_session):
        session_id = make_session()
        assert "slots" not in session_show.show_session(db, session_id=session_id, with_schedule=False)

    def test_window_lookup(self, db, make_session):
        session_id = make_session(minutes=15)
        window = session_show.get_session_window(db, session_id=session_id)
        assert window.minutes_per_slot == 15
        assert window.start == START

    def test_window_lookup_unknown_session(self, db):
        with pytest.raises(SessionNotFound):
            session_show.get_session_window(db, session_id=31337)

    def test_schedule_uses_window_lookup(self, db, make_session, monkeypatch):
        session_id = make_session()
        engine.replace_all(db, session_id=session_id, group_ids=[1, 2])
        db.commit()
        calls = []
        real_lookup = session_show.get_session_window

        def recording_lookup(db, *, session_id):
            calls.append(session_id)
            return real_lookup(db, session_id=session_id)

        monkeypatch.setattr(session_show, "get_session_window", recording_lookup)
        engine.schedule(db, session_id=session_id)
        assert calls == [session_id]

    def test_unknown_session(self, db):
        with pytest.raises(SessionNotFound):
            session_show.show_session(db, session_id=31337)


class TestUpdateSession:
    def test_duration_change_retimes_slots(self, db, make_session, read_slots, consistent):
        session_id = make_session()
        engine.replace_all(db, session_id=session_id, group_ids=[1, 2, 3])
        db.commit()

        session_update.update_session(db, session_id=session_id, duration_per_slot=25)
        db.commit()

        consistent(read_slots(session_id), minutes=25)

    def test_end_only_change_keeps_times(self, db, make_session, read_slots):
        session_id = make_session()
        engine.replace_all(db, session_id=session_id, group_ids=[1, 2])
        db.commit()
        before = read_slots(session_id)

        result = session_update.update_session(
            db, session_id=session_id, end_datetime=START + timedelta(hours=2)
        )
        db.commit()

        assert result["end_datetime"] == "2025-09-05T10:30:00Z"
        assert read_slots(session_id) == before

    def test_clear_end(self, db, make_session):
        session_id = make_session(end=START + timedelta(hours=1))
        result = session_update.update_session(db, session_id=session_id, clear_end=True)
        assert result["end_datetime"] is None

    def test_start_after_existing_end_rejected(self, db, make_session):
        session_id = make_session(end=START + timedelta(hours=1))
        with pytest.raises(ValidationError):
            session_update.update_session(db, session_id=session_id, start_datetime=START + timedelta(hours=3))

    def test_duration_over_a_day_rejected(self, db, make_session):
        session_id = make_session()
        with pytest.raises(ValidationError, match="between 1 and 1440"):
            session_update.update_session(db, session_id=session_id, duration_per_slot=10**10)

    def test_unknown_session(self, db):
        with pytest.raises(SessionNotFound):
            session_update.update_session(db, session_id=404, duration_per_slot=10)

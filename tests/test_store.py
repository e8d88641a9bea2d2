"""Tests for wc.core.models and wc.core.store."""

import json
import os
import shutil
import tempfile
import unittest
from datetime import date, datetime
from pathlib import Path
from unittest.mock import patch

os.environ.setdefault("WEEKCLOCK_HOME", tempfile.mkdtemp(prefix="weekclock_test_"))

from wc.core.models import DAY_ORDER, Day, SessionSnapshot, WeekRecord, end_of_day_ms, local_date, monday_of
from wc.core.store import PersistentStore


class FakeClock:
    """Callable stand-in for time.time that only moves when told to."""

    def __init__(self, dt):
        self.now = dt.timestamp()

    def __call__(self):
        return self.now

    def set(self, dt):
        self.now = dt.timestamp()

    def advance(self, seconds):
        self.now += seconds


# Wednesday; the week's Monday is 2026-10-12
WEDNESDAY = datetime(2026, 10, 14, 9, 0, 0)
MONDAY = date(2026, 10, 12)


# ──────────────────────────────────────────────────────────────────────────
# models.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestModels(unittest.TestCase):

    def test_monday_of(self):
        self.assertEqual(monday_of(date(2026, 10, 12)), MONDAY)
        self.assertEqual(monday_of(date(2026, 10, 14)), MONDAY)
        self.assertEqual(monday_of(date(2026, 10, 18)), MONDAY)
        self.assertEqual(monday_of(date(2026, 10, 19)), date(2026, 10, 19))

    def test_fresh_week_has_all_seven_days_zeroed(self):
        record = WeekRecord.fresh(MONDAY)
        self.assertEqual(list(record.daily_seconds), [d.name for d in DAY_ORDER])
        self.assertEqual(record.total_seconds, 0)

    def test_rolled_over_not_part_of_equality_or_dict(self):
        a = WeekRecord.fresh(MONDAY)
        b = WeekRecord.fresh(MONDAY, rolled_over=True)
        self.assertEqual(a, b)
        self.assertNotIn("rolled_over", b.to_dict())

    def test_day_coerce(self):
        self.assertIs(Day.coerce("monday"), Day.MONDAY)
        self.assertIs(Day.coerce(Day.FRIDAY), Day.FRIDAY)
        self.assertIs(Day.coerce(6), Day.SUNDAY)
        with self.assertRaises(KeyError):
            Day.coerce("funday")

    def test_end_of_day_is_next_local_midnight(self):
        d = date(2026, 10, 14)
        self.assertEqual(end_of_day_ms(d), int(datetime(2026, 10, 15).timestamp() * 1000))
        self.assertEqual(local_date(end_of_day_ms(d) - 1), d)
        self.assertEqual(local_date(end_of_day_ms(d)), date(2026, 10, 15))

    def test_snapshot_from_dict_rejects_bad_types(self):
        with self.assertRaises(TypeError):
            SessionSnapshot.from_dict({"active": "yes"})
        with self.assertRaises(ValueError):
            SessionSnapshot.from_dict({"active": True, "banked_seconds": -5})


# ──────────────────────────────────────────────────────────────────────────
# store.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestPersistentStore(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.state_path = Path(self.tmpdir) / "state.json"
        self.clock = FakeClock(WEDNESDAY)
        self.store = PersistentStore(self.state_path, clock=self.clock)

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def _write_raw(self, doc):
        with open(self.state_path, "w", encoding="utf-8") as f:
            json.dump(doc, f)

    def _read_raw(self):
        with open(self.state_path, "r", encoding="utf-8") as f:
            return json.load(f)

    def test_fresh_start_returns_zeroed_current_week(self):
        record = self.store.load_week_record()
        self.assertEqual(record.week_anchor, MONDAY)
        self.assertEqual(record.total_seconds, 0)
        self.assertFalse(record.rolled_over)

    def test_fresh_start_creates_state_file(self):
        self.store.load_week_record()
        self.assertTrue(self.state_path.exists())
        doc = self._read_raw()
        self.assertEqual(doc["week_record"]["week_anchor"], "2026-10-12")
        self.assertEqual(doc["meta"]["schema_version"], 1)
        self.assertIn("saved_at", doc["meta"])

    def test_save_and_load_roundtrip(self):
        record = self.store.load_week_record()
        record.set(Day.TUESDAY, 3600)
        record.add(Day.WEDNESDAY, 125)
        self.store.save_week_record(record)

        loaded = self.store.load_week_record()
        self.assertEqual(loaded.seconds_for(Day.TUESDAY), 3600)
        self.assertEqual(loaded.seconds_for(Day.WEDNESDAY), 125)
        self.assertEqual(loaded.total_seconds, 3725)

    def test_stale_anchor_yields_zeroed_current_week(self):
        stale = WeekRecord.fresh(date(2026, 10, 5))
        stale.set(Day.MONDAY, 5000)
        self.store.save_week_record(stale)

        record = self.store.load_week_record()
        self.assertEqual(record.week_anchor, MONDAY)
        self.assertEqual(record.total_seconds, 0)
        self.assertTrue(record.rolled_over)
        # The replacement is persisted, so the next load is no longer a rollover
        again = self.store.load_week_record()
        self.assertFalse(again.rolled_over)
        self.assertEqual(self._read_raw()["week_record"]["week_anchor"], "2026-10-12")

    def test_corrupted_json_falls_back_to_fresh(self):
        with open(self.state_path, "w") as f:
            f.write("{invalid json!!")
        record = self.store.load_week_record()
        self.assertEqual(record.week_anchor, MONDAY)
        self.assertEqual(record.total_seconds, 0)
        self.assertFalse(record.rolled_over)
        self.assertFalse(self.store.load_session_snapshot().active)

    def test_unparseable_anchor_falls_back_to_fresh(self):
        self._write_raw({"week_record": {"week_anchor": "last tuesday", "daily_seconds": {}}})
        record = self.store.load_week_record()
        self.assertEqual(record.week_anchor, MONDAY)
        self.assertFalse(record.rolled_over)

    def test_missing_and_bad_day_values_default_to_zero(self):
        self._write_raw({"week_record": {
            "week_anchor": "2026-10-12",
            "daily_seconds": {"MONDAY": 100, "TUESDAY": -4, "WEDNESDAY": "lots", "THURSDAY": True},
        }})
        record = self.store.load_week_record()
        self.assertEqual(record.seconds_for(Day.MONDAY), 100)
        for day in DAY_ORDER[1:]:
            self.assertEqual(record.seconds_for(day), 0)
        self.assertEqual(len(record.daily_seconds), 7)

    def test_reset_week_record_to_zero(self):
        record = self.store.load_week_record()
        record.set(Day.FRIDAY, 999)
        self.store.save_week_record(record)

        fresh = self.store.reset_week_record_to_zero()
        self.assertEqual(fresh.week_anchor, MONDAY)
        self.assertEqual(self.store.load_week_record().total_seconds, 0)

    def test_session_snapshot_defaults_inactive(self):
        self.assertEqual(self.store.load_session_snapshot(), SessionSnapshot())

    def test_session_snapshot_roundtrip(self):
        snap = SessionSnapshot(active=True, on_break=True, session_start_epoch=1_700_000_000_000,
                               banked_seconds=42, break_start_epoch=1_700_000_042_000)
        self.store.save_session_snapshot(snap)
        self.assertEqual(self.store.load_session_snapshot(), snap)

    def test_inactive_snapshot_is_stored_cleared(self):
        self.store.save_session_snapshot(SessionSnapshot(active=False, banked_seconds=30, session_start_epoch=5))
        self.assertEqual(self._read_raw()["session_snapshot"], SessionSnapshot().to_dict())

    def test_clear_session_snapshot(self):
        self.store.save_session_snapshot(SessionSnapshot(active=True, session_start_epoch=1000))
        self.store.clear_session_snapshot()
        self.assertFalse(self.store.load_session_snapshot().active)

    def test_break_without_active_loads_inactive(self):
        self._write_raw({"session_snapshot": {"active": False, "on_break": True, "session_start_epoch": 1000}})
        self.assertEqual(self.store.load_session_snapshot(), SessionSnapshot())

    def test_active_without_start_loads_inactive(self):
        self._write_raw({"session_snapshot": {"active": True, "session_start_epoch": 0}})
        self.assertFalse(self.store.load_session_snapshot().active)

    def test_malformed_snapshot_loads_inactive(self):
        self._write_raw({"session_snapshot": ["not", "a", "dict"]})
        self.assertFalse(self.store.load_session_snapshot().active)

    def test_saving_one_section_keeps_the_other(self):
        record = self.store.load_week_record()
        record.set(Day.MONDAY, 60)
        self.store.save_week_record(record)
        self.store.save_session_snapshot(SessionSnapshot(active=True, session_start_epoch=1000))

        self.assertEqual(self.store.load_week_record().seconds_for(Day.MONDAY), 60)
        self.assertTrue(self.store.load_session_snapshot().active)

    def test_write_failure_propagates(self):
        with patch("wc.core.store.os.replace", side_effect=OSError("disk full")):
            with self.assertRaises(OSError):
                self.store.save_week_record(WeekRecord.fresh(MONDAY))
        self.assertFalse(self.state_path.exists())

    def test_failed_write_leaves_no_temp_file(self):
        with patch("wc.core.store.os.replace", side_effect=OSError("disk full")):
            with self.assertRaises(OSError):
                self.store.save_session_snapshot(SessionSnapshot(active=True, session_start_epoch=1000))
        self.assertEqual(list(Path(self.tmpdir).iterdir()), [])

    def test_out_of_range_start_epoch_loads_inactive(self):
        self._write_raw({"session_snapshot": {"active": True, "session_start_epoch": 10**20}})
        self.assertEqual(self.store.load_session_snapshot(), SessionSnapshot())

    def test_out_of_range_break_epoch_loads_inactive(self):
        self._write_raw({"session_snapshot": {
            "active": True, "on_break": True, "session_start_epoch": 1_700_000_000_000,
            "banked_seconds": 10, "break_start_epoch": 10**20,
        }})
        self.assertEqual(self.store.load_session_snapshot(), SessionSnapshot())


if __name__ == "__main__":
    unittest.main()

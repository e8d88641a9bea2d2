import json
import os
import time
from datetime import date
from pathlib import Path
from wc.common.logger import log
from wc.common.setup import PATHS
from wc.core.models import DAY_ORDER, SessionSnapshot, WeekRecord, local_date, monday_of
from wc.util import now_iso


_SCHEMA_VERSION = 1

STATE_PATH = PATHS.current / "state.json"

WEEK_KEY = "week_record"
SESSION_KEY = "session_snapshot"

# Durable home for the week record and the in-progress session snapshot. Both live as sections of one state.json;
# every save rewrites the whole file. No business logic here beyond "stale week -> fresh week".
class PersistentStore:

    def __init__(self, path: Path | None = None, clock=time.time):
        self.path = Path(path) if path is not None else STATE_PATH
        self._clock = clock

    def current_monday(self) -> date:
        return monday_of(date.fromtimestamp(self._clock()))

    #region === Raw document access ===

    # Reads state.json. Anything missing or unreadable counts as an empty document, never an error.
    def _read_document(self):
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                doc = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError):
            log.warning(f"Could not read '{self.path}', treating stored state as absent.", exc_info=True)
            return {}
        if not isinstance(doc, dict):
            log.warning(f"'{self.path}' does not hold a JSON object, treating stored state as absent.")
            return {}
        return doc

    # Writes state.json through a temp file + os.replace. Write failures are logged and re-raised.
    def _write_document(self, doc):
        doc["meta"] = {"schema_version": _SCHEMA_VERSION, "saved_at": now_iso()}
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(doc, f, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError):
            log.error(f"Failed to write state to '{self.path}'", exc_info=True)
            try: tmp_path.unlink(missing_ok=True)
            except OSError: pass
            raise

    def _write_section(self, key, value):
        doc = self._read_document()
        doc[key] = value
        self._write_document(doc)

    #endregion === Raw document access ===

    #region === Week record ===

    # Parses the stored week section, defaulting bad per-day values to 0. Returns None when there's no usable record.
    def _parse_week_record(self, raw):
        if raw is None:
            return None
        try:
            record = WeekRecord.from_dict(raw)
        except (KeyError, TypeError, ValueError, AttributeError):
            log.warning(f"Stored week record in '{self.path}' is unreadable, ignoring it.", exc_info=True)
            return None

        defaulted_values = set()
        days = {}
        for day in DAY_ORDER:
            value = record.daily_seconds.get(day.name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                defaulted_values.add(f"daily_seconds.{day.name}")
                value = 0
            days[day.name] = value
        record.daily_seconds = days

        if defaulted_values:
            log.warning(f"Loaded week record for {record.week_anchor}, but with values that were defaulted: {', '.join(sorted(defaulted_values))}")
        return record

    def load_week_record(self) -> WeekRecord:
        current_monday = self.current_monday()
        record = self._parse_week_record(self._read_document().get(WEEK_KEY))

        if record is None:
            fresh = WeekRecord.fresh(current_monday)
            self.save_week_record(fresh)
            log.info(f"No usable week record found, started a fresh week anchored at {current_monday}.")
            return fresh
        # Old week: start over. The caller is responsible for dropping any session that belonged to it.
        if record.week_anchor != current_monday:
            fresh = WeekRecord.fresh(current_monday, rolled_over=True)
            self.save_week_record(fresh)
            log.info(f"Stored week {record.week_anchor} is stale, rolled over to a fresh week anchored at {current_monday}.")
            return fresh
        return record

    def save_week_record(self, record: WeekRecord):
        self._write_section(WEEK_KEY, record.to_dict())
        log.debug(f"Saved week record {record.to_dict()}")

    def reset_week_record_to_zero(self) -> WeekRecord:
        fresh = WeekRecord.fresh(self.current_monday())
        self.save_week_record(fresh)
        log.info(f"Reset week record to zero for week anchored at {fresh.week_anchor}.")
        return fresh

    #endregion === Week record ===

    #region === Session snapshot ===

    def load_session_snapshot(self) -> SessionSnapshot:
        raw = self._read_document().get(SESSION_KEY)
        if raw is None:
            return SessionSnapshot()
        try:
            snapshot = SessionSnapshot.from_dict(raw)
        except (TypeError, ValueError, AttributeError):
            log.warning(f"Stored session snapshot in '{self.path}' is unreadable, treating it as inactive.", exc_info=True)
            return SessionSnapshot()

        if not snapshot.active:
            if snapshot.on_break:
                log.warning("Stored session snapshot is on break but not active, treating it as inactive.")
            return SessionSnapshot()
        if snapshot.session_start_epoch <= 0:
            log.warning("Stored session snapshot is active with no start time, treating it as inactive.")
            return SessionSnapshot()
        if not snapshot.on_break:
            snapshot.break_start_epoch = 0

        # Epochs must land on a real calendar date, otherwise recovery can't place the session
        try:
            local_date(snapshot.session_start_epoch)
            local_date(snapshot.break_start_epoch)
        except (OverflowError, OSError, ValueError):
            log.warning(f"Stored session snapshot has an out of range timestamp {snapshot.to_dict()}, treating it as inactive.")
            return SessionSnapshot()
        return snapshot

    def save_session_snapshot(self, snapshot: SessionSnapshot):
        # Inactive sessions are always stored in their cleared form
        data = snapshot.to_dict() if snapshot.active else SessionSnapshot().to_dict()
        self._write_section(SESSION_KEY, data)
        log.debug(f"Saved session snapshot {data}")

    def clear_session_snapshot(self):
        self.save_session_snapshot(SessionSnapshot())

    #endregion === Session snapshot ===

"""Work-session state machine: clock in/out, breaks, per-day totals and restart recovery."""

import time
from enum import Enum
from PySide6.QtCore import QObject, QTimer, Signal
from wc.common.logger import log
from wc.core.models import Day, SessionSnapshot, end_of_day_ms, local_date, monday_of, now_ms
from wc.core.store import PersistentStore

TICK_INTERVAL_MS = 1000


class SessionStatus(Enum):
    CLOCKED_OUT = "CLOCKED_OUT"
    WORKING = "WORKING"
    ON_BREAK = "ON_BREAK"


class SessionEngine(QObject):
    """Owns the live session and the week's totals, with ``PersistentStore`` as the source of truth.

    Construction runs ``recover()``. After that, every command updates in-memory state, publishes the
    change, then persists it. A storage write failure propagates to the caller and the in-memory state
    is left as is, so the next restart reflects only the last successful write.

    The ``*_changed`` signals only fire when their value actually changes. While WORKING a single
    ``QTimer`` republishes the elapsed seconds roughly once per tick interval.
    """

    status_changed = Signal(object)
    elapsed_changed = Signal(int)
    week_changed = Signal(dict)

    def __init__(self, store: PersistentStore | None = None, clock=time.time,
                 tick_interval_ms=TICK_INTERVAL_MS, parent=None):
        super().__init__(parent)
        self._clock = clock
        self._store = store if store is not None else PersistentStore(clock=clock)

        self._status = SessionStatus.CLOCKED_OUT
        self._elapsed = 0
        self._week = None
        self._week_totals = {}
        self._session = SessionSnapshot()

        self._timer = QTimer(self)
        self._timer.setInterval(tick_interval_ms)
        self._timer.timeout.connect(self._tick)

        self.recover()

    # ------------------------------------------------------------------ #
    #  Observable state                                                    #
    # ------------------------------------------------------------------ #

    @property
    def status(self):
        return self._status

    @property
    def elapsed_seconds(self):
        return self._elapsed

    @property
    def week_totals(self):
        return dict(self._week_totals)

    @property
    def week_anchor(self):
        return self._week.week_anchor if self._week is not None else None

    @property
    def session(self):
        return self._session.copy()

    @property
    def is_clocked_in(self):
        return self._status is not SessionStatus.CLOCKED_OUT

    @property
    def is_on_break(self):
        return self._status is SessionStatus.ON_BREAK

    @property
    def is_ticking(self):
        return self._timer.isActive()

    def current_elapsed(self):
        """Elapsed seconds of the current session as of right now."""
        return self._elapsed_at(self._now())

    def _elapsed_at(self, at_ms):
        s = self._session
        if not s.active:
            return 0
        if s.on_break:
            return s.banked_seconds
        return s.banked_seconds + max(0, at_ms - s.session_start_epoch) // 1000

    def _now(self):
        return now_ms(self._clock)

    def _publish(self, status=None, elapsed=None, week=None):
        if status is not None and status is not self._status:
            self._status = status
            self.status_changed.emit(status)
        if elapsed is not None and elapsed != self._elapsed:
            self._elapsed = elapsed
            self.elapsed_changed.emit(elapsed)
        if week is not None:
            self._week = week
            totals = dict(week.daily_seconds)
            if totals != self._week_totals:
                self._week_totals = totals
                self.week_changed.emit(dict(totals))

    # ------------------------------------------------------------------ #
    #  Tick                                                                #
    # ------------------------------------------------------------------ #

    def _start_tick(self):
        if not self._timer.isActive():
            self._timer.start()
            log.debug("Started display tick")

    def _stop_tick(self):
        if self._timer.isActive():
            self._timer.stop()
            log.debug("Stopped display tick")

    def _tick(self):
        if self._status is SessionStatus.WORKING:
            self._publish(elapsed=self.current_elapsed())

    # ------------------------------------------------------------------ #
    #  Recovery                                                            #
    # ------------------------------------------------------------------ #

    def recover(self):
        """Rebuild live state from the store. Safe to call again; it converges on the same state."""
        self._stop_tick()

        week = self._store.load_week_record()
        if week.rolled_over:
            # A new week never inherits an open session
            self._store.clear_session_snapshot()
        snapshot = self._store.load_session_snapshot()

        if not snapshot.active:
            self._session = SessionSnapshot()
            self._publish(SessionStatus.CLOCKED_OUT, 0, week)
            log.info(f"Recovered clocked out, week of {week.week_anchor}: {week.daily_seconds}")
            return

        now = self._now()
        start_day = local_date(snapshot.session_start_epoch)
        today = local_date(now)
        # A start date after today means the wall clock went backwards; there's no day to credit it to
        if start_day > today:
            log.warning(f"Stored session starts on {start_day}, after today ({today}), discarding it")
            self._session = SessionSnapshot()
            self._publish(SessionStatus.CLOCKED_OUT, 0, week)
            self._store.clear_session_snapshot()
            return
        if start_day != today:
            self._close_overnight_session(snapshot, start_day, week)
            return

        self._session = snapshot
        if snapshot.on_break:
            self._publish(SessionStatus.ON_BREAK, snapshot.banked_seconds, week)
            log.info(f"Recovered on break with {snapshot.banked_seconds}s banked")
        else:
            self._publish(SessionStatus.WORKING, self._elapsed_at(now), week)
            self._start_tick()
            log.info(f"Recovered working session started at {snapshot.session_start_epoch}, {self._elapsed}s so far")

    # The session ran past midnight while we weren't running. Everything up to the end of its start day goes to
    # that day and the session is closed; the time since that midnight is not tracked anywhere.
    def _close_overnight_session(self, snapshot, start_day, week):
        if snapshot.on_break:
            credited = snapshot.banked_seconds
        else:
            credited = snapshot.banked_seconds + max(0, end_of_day_ms(start_day) - snapshot.session_start_epoch) // 1000

        self._session = SessionSnapshot()
        if monday_of(start_day) == week.week_anchor:
            week.add(Day.of(start_day), credited)
            self._publish(SessionStatus.CLOCKED_OUT, 0, week)
            self._store.save_week_record(week)
            log.info(f"Session from {start_day} crossed midnight, auto clocked out and credited {credited}s to {Day.of(start_day).name}")
        else:
            self._publish(SessionStatus.CLOCKED_OUT, 0, week)
            log.warning(f"Session from {start_day} crossed midnight into a week that is no longer tracked, dropped {credited}s")
        self._store.clear_session_snapshot()

    # ------------------------------------------------------------------ #
    #  Week helpers                                                        #
    # ------------------------------------------------------------------ #

    # Loads the current week. If it rolled over underneath a live session, that session is dropped unless the
    # caller is about to close it itself.
    def _load_week(self, closing_session=False):
        week = self._store.load_week_record()
        if week.rolled_over and self._session.active and not closing_session:
            log.info("Week rolled over during an open session, discarding the session")
            self._stop_tick()
            self._session = SessionSnapshot()
            self._publish(SessionStatus.CLOCKED_OUT, 0)
            self._store.clear_session_snapshot()
        return week

    def _persist_session(self):
        self._store.save_session_snapshot(self._session)

    # ------------------------------------------------------------------ #
    #  Clock in / out                                                      #
    # ------------------------------------------------------------------ #

    def toggle_clock(self):
        if self.is_clocked_in:
            self.clock_out()
        else:
            self.clock_in()

    def clock_in(self):
        if self._status is not SessionStatus.CLOCKED_OUT:
            log.warning(f"Ignored clock in while {self._status.name}")
            return
        now = self._now()
        self._session = SessionSnapshot(active=True, session_start_epoch=now)
        self._publish(SessionStatus.WORKING, 0)
        self._start_tick()
        log.info(f"Clocked in at {now}")
        self._persist_session()

    def clock_out(self):
        if self._status is SessionStatus.CLOCKED_OUT:
            log.warning("Ignored clock out while already clocked out")
            return
        now = self._now()
        self._stop_tick()
        session_seconds = self._elapsed_at(now)
        today = Day.of(local_date(now))

        week = self._load_week(closing_session=True)
        week.add(today, session_seconds)
        self._session = SessionSnapshot()
        self._publish(SessionStatus.CLOCKED_OUT, 0, week)
        log.info(f"Clocked out, credited {session_seconds}s to {today.name}")
        self._store.save_week_record(week)
        self._store.clear_session_snapshot()

    # ------------------------------------------------------------------ #
    #  Break                                                               #
    # ------------------------------------------------------------------ #

    def toggle_break(self):
        if self._status is SessionStatus.CLOCKED_OUT:
            return
        if self._status is SessionStatus.ON_BREAK:
            self.resume()
        else:
            self.start_break()

    def start_break(self):
        if self._status is not SessionStatus.WORKING:
            log.warning(f"Ignored start break while {self._status.name}")
            return
        now = self._now()
        self._stop_tick()
        self._session.banked_seconds = self._elapsed_at(now)
        self._session.on_break = True
        self._session.break_start_epoch = now
        self._publish(SessionStatus.ON_BREAK, self._session.banked_seconds)
        log.info(f"Started break with {self._session.banked_seconds}s banked")
        self._persist_session()

    def resume(self):
        if self._status is not SessionStatus.ON_BREAK:
            log.warning(f"Ignored resume while {self._status.name}")
            return
        now = self._now()
        self._session.session_start_epoch = now
        self._session.on_break = False
        self._session.break_start_epoch = 0
        self._publish(SessionStatus.WORKING, self._session.banked_seconds)
        self._start_tick()
        log.info(f"Resumed from break with {self._session.banked_seconds}s banked")
        self._persist_session()

    # ------------------------------------------------------------------ #
    #  Manual edits                                                        #
    # ------------------------------------------------------------------ #

    def set_manual_time(self, day, hours, minutes):
        """Overwrite one day's total with ``hours``h ``minutes``m. Inputs are trusted to be non-negative ints."""
        day = Day.coerce(day)
        seconds = hours * 3600 + minutes * 60
        week = self._load_week()
        week.set(day, seconds)
        self._publish(week=week)
        log.info(f"Manually set {day.name} to {seconds}s")
        self._store.save_week_record(week)

    def reset_week(self):
        """Zero the whole week and discard any open session without crediting it."""
        self._stop_tick()
        if self._session.active:
            log.warning(f"Week reset while {self._status.name}, discarding {self.current_elapsed()}s of session time")
        self._session = SessionSnapshot()
        self._publish(SessionStatus.CLOCKED_OUT, 0)
        week = self._store.reset_week_record_to_zero()
        self._publish(week=week)
        log.info("Week reset")
        self._store.clear_session_snapshot()

    def shutdown(self):
        self._stop_tick()

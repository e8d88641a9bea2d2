"""Week and session records: plain data, no storage or timing logic."""

import time
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from enum import Enum


class Day(Enum):
    """Days of the week, valued to match ``date.weekday()``."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def of(cls, d: date):
        return cls(d.weekday())

    @classmethod
    def coerce(cls, value):
        """Accept a Day, its name ("MONDAY", case-insensitive) or its weekday index."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls[value.strip().upper()]
        return cls(value)


DAY_ORDER = list(Day)


def monday_of(d: date) -> date:
    return d - timedelta(days=d.weekday())


def now_ms(clock=time.time) -> int:
    return int(clock() * 1000)


def local_date(epoch_ms) -> date:
    return datetime.fromtimestamp(epoch_ms / 1000).date()


# Epoch ms of the local midnight that ends the given day.
def end_of_day_ms(d: date) -> int:
    midnight = datetime.combine(d + timedelta(days=1), datetime.min.time())
    return int(midnight.timestamp() * 1000)


def _zero_days():
    return {day.name: 0 for day in DAY_ORDER}


@dataclass
class WeekRecord:
    """Per-day accumulated seconds for the week starting on ``week_anchor`` (a Monday).

    ``rolled_over`` is set by the store when this record replaced a stale one. It is never persisted.
    """
    week_anchor: date
    daily_seconds: dict = field(default_factory=_zero_days)
    rolled_over: bool = field(default=False, compare=False)

    @classmethod
    def fresh(cls, anchor: date, rolled_over=False):
        return cls(week_anchor=anchor, daily_seconds=_zero_days(), rolled_over=rolled_over)

    @property
    def total_seconds(self):
        return sum(self.daily_seconds.values())

    def seconds_for(self, day) -> int:
        return self.daily_seconds[Day.coerce(day).name]

    def add(self, day, seconds):
        key = Day.coerce(day).name
        self.daily_seconds[key] = self.daily_seconds[key] + int(seconds)

    def set(self, day, seconds):
        self.daily_seconds[Day.coerce(day).name] = int(seconds)

    def to_dict(self):
        return {
            "week_anchor": self.week_anchor.isoformat(),
            "daily_seconds": {day.name: int(self.daily_seconds[day.name]) for day in DAY_ORDER},
        }

    @classmethod
    def from_dict(cls, data):
        """Build from a stored dict. Raises on an unusable anchor; bad day values are left for the caller."""
        anchor = date.fromisoformat(data["week_anchor"])
        days = data.get("daily_seconds")
        return cls(week_anchor=anchor, daily_seconds=dict(days) if isinstance(days, dict) else {})


@dataclass
class SessionSnapshot:
    """In-progress session. The default instance is the cleared, inactive session."""
    active: bool = False
    on_break: bool = False
    session_start_epoch: int = 0
    banked_seconds: int = 0
    break_start_epoch: int = 0

    def copy(self):
        return replace(self)

    def to_dict(self):
        return {
            "active": self.active,
            "on_break": self.on_break,
            "session_start_epoch": self.session_start_epoch,
            "banked_seconds": self.banked_seconds,
            "break_start_epoch": self.break_start_epoch,
        }

    @classmethod
    def from_dict(cls, data):
        values = {}
        for key in ("active", "on_break"):
            value = data.get(key, False)
            if not isinstance(value, bool):
                raise TypeError(f"'{key}' must be a bool, got {value!r}")
            values[key] = value
        for key in ("session_start_epoch", "banked_seconds", "break_start_epoch"):
            value = data.get(key, 0)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"'{key}' must be a non-negative int, got {value!r}")
            values[key] = value
        return cls(**values)

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from icalendar import vDuration

# Calendar months and years have no fixed length; approximate them
UNIT_DELTAS = {
    's': timedelta(seconds=1),
    'm': timedelta(minutes=1),
    'h': timedelta(hours=1),
    'd': timedelta(days=1),
    'w': timedelta(weeks=1),
    'M': timedelta(days=30),
    'y': timedelta(days=365),
}


@dataclass(frozen=True)
class Duration:
    """A signed amount of a single time unit, e.g. -15 minutes."""

    amount: int
    unit: str

    def __post_init__(self):
        if self.unit not in UNIT_DELTAS:
            raise ValueError(f"Unsupported time unit: {self.unit}")

    def __neg__(self) -> Duration:
        return Duration(-self.amount, self.unit)

    def to_timedelta(self) -> timedelta:
        return UNIT_DELTAS[self.unit] * self.amount

    def isoformat(self) -> str:
        """ISO 8601 duration text as used by iCalendar, e.g. '-PT15M'."""
        return vDuration(self.to_timedelta()).to_ical().decode('utf-8')


@dataclass(frozen=True)
class Event:
    start: datetime             # naive local time
    end: datetime               # naive local time
    all_day: bool = False
    reminder: Optional[Duration] = None
    title: str = ''
    tags: tuple[str, ...] = ()
    attachments: tuple[str, ...] = ()
    people: tuple[str, ...] = ()
    locations: tuple[str, ...] = ()
    description: str = ''

    @property
    def location(self) -> str:
        return self.locations[-1] if self.locations else ''


@dataclass(frozen=True)
class Day:
    source_id: str
    date: datetime              # midnight of the day
    title: Optional[str] = None
    events: tuple[Event, ...] = ()

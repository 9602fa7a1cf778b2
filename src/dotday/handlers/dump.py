"""
Debug JSON output handler
"""
import dataclasses
import json
import sys
from datetime import datetime
from typing import Sequence

from icalendar import Calendar

from ..models import Day, Duration


def _default(obj):
    if isinstance(obj, Duration):
        return obj.isoformat()
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def days_to_json(days: Sequence[Day], indent: int = 2) -> str:
    """Serialize parsed days, with instants and durations as ISO 8601 text."""
    # asdict would also expand Duration, which should stay one ISO string
    payload = [
        {
            'source_id': day.source_id,
            'date': day.date,
            'title': day.title,
            'events': [
                {f.name: getattr(event, f.name) for f in dataclasses.fields(event)}
                for event in day.events
            ],
        }
        for day in days
    ]
    return json.dumps(payload, default=_default, indent=indent, ensure_ascii=False)


class Handler:
    """Handler class printing the parsed days as JSON"""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def __call__(self, calendar: Calendar, days: Sequence[Day]) -> None:
        print(days_to_json(days, self.indent), flush=True, file=sys.stdout)

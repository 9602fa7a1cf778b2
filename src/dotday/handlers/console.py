"""
ICS format output handler
"""
import sys

from icalendar import Calendar


class Handler:
    """Console output handler class"""

    def __call__(self, calendar: Calendar, days) -> None:
        """
        Output ICS content to console

        Args:
            calendar: icalendar Calendar object
            days: Parsed days the calendar was built from
        """
        print(calendar.to_ical().decode('utf-8'), flush=True, end='', file=sys.stdout)

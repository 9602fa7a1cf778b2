"""
File output handler
"""
import logging
from pathlib import Path

from icalendar import Calendar


class Handler:
    """File writer handler class"""

    def __init__(self, output_file: str = 'calendar.ics'):
        """
        Initialize file output handler

        Args:
            output_file: Output file path
        """
        self.output_file = Path(output_file)

    def __call__(self, calendar: Calendar, days) -> None:
        """
        Write ICS content to file

        The content is written as bytes so the CRLF line endings survive
        on every platform.

        Args:
            calendar: icalendar Calendar object
            days: Parsed days the calendar was built from
        """
        try:
            self.output_file.parent.mkdir(parents=True, exist_ok=True)
            self.output_file.write_bytes(calendar.to_ical())
            logging.info(f"ICS content written to file: {self.output_file}")

        except OSError as e:
            logging.error(f"Failed to write file: {e}")

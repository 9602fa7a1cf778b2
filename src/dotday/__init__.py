"""DotDay: plain-text day notation and iCalendar export."""
from .errors import DotDayError, EncodingError, FormatError, MissingFieldError
from .exporter import build_calendar, event_uid, export_ics
from .models import Day, Duration, Event
from .parser import BatchResult, EmbeddedDate, ExternalDate, parse_batch, parse_day

__version__ = '1.0.0'

__all__ = [
    'BatchResult',
    'Day',
    'DotDayError',
    'Duration',
    'EmbeddedDate',
    'EncodingError',
    'Event',
    'ExternalDate',
    'FormatError',
    'MissingFieldError',
    'build_calendar',
    'event_uid',
    'export_ics',
    'parse_batch',
    'parse_day',
]

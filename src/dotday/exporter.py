"""
iCalendar export of parsed days
"""
from datetime import timedelta
from typing import Iterable

from icalendar import Alarm, Calendar, Event as VEvent, vDDDTypes, vDuration

from .models import Day, Event

PRODID = '-//DotDay//dotday 1.0.0//EN'
REFRESH_INTERVAL = timedelta(minutes=30)
ATTENDEE_PARAMS = {'CUTYPE': 'INDIVIDUAL', 'ROLE': 'REQ-PARTICIPANT'}


def string_hash(value: str) -> int:
    """32-bit signed rolling hash (h = 31 * h + c) over UTF-16 code units."""
    data = value.encode('utf-16-le')
    h = 0
    for i in range(0, len(data), 2):
        h = (h * 31 + int.from_bytes(data[i:i + 2], 'little')) & 0xFFFFFFFF
    return h - 0x100000000 if h & 0x80000000 else h


def event_uid(calendar_name: str, source_id: str, index: int) -> str:
    """Stable UID of the index-th event of a source.

    Re-exporting the same sources yields the same UIDs. The hash is not
    collision resistant and does not guarantee global uniqueness.
    """
    return str(string_hash(f"{calendar_name}{source_id}{index}"))


def build_event(event: Event, uid: str) -> VEvent:
    vevent = VEvent()
    vevent.add('UID', uid)

    if event.all_day:
        vevent.add('DTSTART', event.start.date())
        vevent.add('DTEND', event.end.date())
    else:
        vevent.add('DTSTART', event.start)
        vevent.add('DTEND', event.end)
    # Typed so the library keeps it local instead of coercing it to UTC
    vevent.add('DTSTAMP', vDDDTypes(event.start))

    vevent.add('SUMMARY', event.title)
    vevent.add('DESCRIPTION', event.description)
    vevent.add('LOCATION', event.location)
    if event.tags:
        vevent.add('CATEGORIES', list(event.tags))

    for person in event.people:
        vevent.add('ATTENDEE', person, parameters=ATTENDEE_PARAMS)
    for attachment in event.attachments:
        vevent.add('ATTACH', attachment)

    vevent.add('SEQUENCE', 0)
    vevent.add('STATUS', 'CONFIRMED')
    vevent.add('TRANSP', 'OPAQUE')

    if event.reminder is not None:
        alarm = Alarm()
        alarm.add('ACTION', 'DISPLAY')
        alarm.add('TRIGGER', event.reminder.to_timedelta())
        alarm.add('DESCRIPTION', event.title)
        vevent.add_component(alarm)

    return vevent


def build_calendar(days: Iterable[Day], calendar_name: str) -> Calendar:
    """Assemble one calendar holding the events of every day.

    Args:
        days: Parsed days, exported in order
        calendar_name: Calendar display name, also part of every UID

    Returns:
        icalendar Calendar object
    """
    calendar = Calendar()
    calendar.add('VERSION', '2.0')
    calendar.add('PRODID', PRODID)
    calendar.add('X-WR-CALNAME', calendar_name)
    refresh = vDuration(REFRESH_INTERVAL)
    refresh.params['VALUE'] = 'DURATION'
    calendar.add('REFRESH-INTERVAL', refresh)
    calendar.add('X-PUBLISHED-TTL', vDuration(REFRESH_INTERVAL))

    for day in days:
        for index, event in enumerate(day.events):
            uid = event_uid(calendar_name, day.source_id, index)
            calendar.add_component(build_event(event, uid))

    return calendar


def export_ics(days: Iterable[Day], calendar_name: str) -> str:
    """Serialize days to CRLF-terminated iCalendar text."""
    return build_calendar(days, calendar_name).to_ical().decode('utf-8')

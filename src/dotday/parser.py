"""
DotDay source parsing

A source is split into blocks separated by blank lines. Depending on the
date source, the first block may hold the day's title (and date); every
other block is one event::

    9:00--10:30!15m
    Planning meeting
    # work,urgent
    @ Office
    ~ Alice,Bob
    & agenda.pdf
    Bring the quarterly numbers.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import PurePath
from typing import Iterable, Iterator, Optional, Protocol

import dateutil.parser

from .blocks import Block, read_blocks
from .errors import DotDayError, FormatError, MissingFieldError
from .models import Day, Event
from .timeheader import parse_time_header

TITLE_UNDERLINE = re.compile(r'^={3,}\s*$')

TAG_PREFIX = '# '
ATTACHMENT_PREFIX = '& '
PEOPLE_PREFIX = '~ '
LOCATION_PREFIX = '@ '


class DateSource(Protocol):
    """Strategy recovering a day's date and title from a source.

    Returns the midnight of the day, the title (if any) and the blocks
    left over for events.
    """

    def __call__(
        self, source_id: str, blocks: list[Block]
    ) -> tuple[datetime, Optional[str], list[Block]]: ...


def _midnight(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None)


class ExternalDate:
    """Date taken from the source identifier, e.g. '2020-05-04.day'.

    The first block is a title block only when its second line is an
    underline of at least three '=' characters::

        CONFERENCE DAY 1
        ================
    """

    def __call__(self, source_id, blocks):
        stem = PurePath(source_id).name.split('.')[0]
        try:
            date = _midnight(dateutil.parser.isoparse(stem))
        except ValueError:
            raise FormatError(f"Cannot read a date from source name {stem!r}")

        if blocks and len(blocks[0]) > 1 and TITLE_UNDERLINE.match(blocks[0][1]):
            return date, blocks[0][0], blocks[1:]
        return date, None, blocks


class EmbeddedDate:
    """Date written in the title line of the first block, e.g. '= 4 May 2020 ='."""

    def __call__(self, source_id, blocks):
        if not blocks:
            raise FormatError("Missing title line")

        title = parse_title_line(blocks[0][0])
        try:
            date = _midnight(dateutil.parser.parse(title))
        except (ValueError, OverflowError):
            raise FormatError(f"Cannot read a date from title {title!r}")
        return date, title, blocks[1:]


DATE_SOURCES = {
    'external': ExternalDate,
    'embedded': EmbeddedDate,
}


def parse_title_line(line: str) -> str:
    """Return the text between the '= ' and ' =' markers of a title line."""
    line = line.rstrip()
    if not line.startswith('= '):
        raise FormatError(f"Title line must start with '= ': {line!r}", column=0)
    if not line.endswith(' =') or len(line) < 5:
        raise FormatError(f"Title line must end with ' =': {line!r}", column=len(line))
    return line[2:-2]


class LineCursor:
    """Reads the lines of one block in order."""

    def __init__(self, lines: Block):
        self.lines = lines
        self.index = 0

    def at_end(self) -> bool:
        return self.index >= len(self.lines)

    def next(self) -> Optional[str]:
        """Return the next line, or None once the block is exhausted."""
        if self.at_end():
            return None
        line = self.lines[self.index]
        self.index += 1
        return line

    def __iter__(self) -> Iterator[str]:
        while not self.at_end():
            yield self.next()


def parse_tags(text: str) -> list[str]:
    return text.split(',')


def parse_people(text: str) -> list[str]:
    # TODO: split 'John Doe <jdoe@example.com>' into name and address
    return text.split(',')


def parse_event(base: datetime, block: Block) -> Event:
    """Build an event from one block.

    Args:
        base: Midnight of the day
        block: Time header line, title line, then field lines

    Raises:
        MissingFieldError: If the block has no title line
        FormatError: If the time header is malformed
        EncodingError: If the reminder is malformed
    """
    cursor = LineCursor(block)
    header = parse_time_header(base, cursor.next())

    title = cursor.next()
    if title is None:
        raise MissingFieldError("Event has no title line")

    tags: list[str] = []
    attachments: list[str] = []
    people: list[str] = []
    locations: list[str] = []
    description: list[str] = []

    for line in cursor:
        prefix, rest = line[:2], line[2:]
        if prefix == TAG_PREFIX:
            tags.extend(parse_tags(rest))
        elif prefix == ATTACHMENT_PREFIX:
            attachments.append(rest)
        elif prefix == PEOPLE_PREFIX:
            people.extend(parse_people(rest))
        elif prefix == LOCATION_PREFIX:
            locations.append(rest)
        else:
            description.append(line)

    return Event(
        start=header.start,
        end=header.end,
        all_day=header.all_day,
        reminder=header.reminder,
        title=title,
        tags=tuple(tags),
        attachments=tuple(attachments),
        people=tuple(people),
        locations=tuple(locations),
        description='\n'.join(description),
    )


def parse_day(source_id: str, text: str, date_source: DateSource | None = None) -> Day:
    """Parse one DotDay source.

    Args:
        source_id: Identifier of the source, usually its file name
        text: Source text
        date_source: Strategy locating the day's date (default: ExternalDate)

    Returns:
        The parsed day

    Raises:
        DotDayError: If any part of the source is malformed; the error
            carries the source id and, for event failures, the event index
    """
    date_source = date_source or ExternalDate()
    blocks = read_blocks(text)

    try:
        date, title, body = date_source(source_id, blocks)
    except DotDayError as e:
        e.source_id = source_id
        raise

    events = []
    for index, block in enumerate(body):
        try:
            events.append(parse_event(date, block))
        except DotDayError as e:
            e.source_id = source_id
            e.event_index = index
            raise

    logging.debug(f"Parsed {source_id}: {len(events)} event(s) on {date.date()}")
    return Day(source_id=source_id, date=date, title=title, events=tuple(events))


@dataclass
class BatchResult:
    days: list[Day] = field(default_factory=list)
    errors: list[DotDayError] = field(default_factory=list)


def parse_batch(
    sources: Iterable[tuple[str, str]],
    date_source: DateSource | None = None,
    strict: bool = False,
) -> BatchResult:
    """Parse many sources, keeping input order.

    A malformed source is logged and collected in the result's errors
    while the remaining sources are still parsed, unless strict is set.

    Args:
        sources: (source_id, text) pairs
        date_source: Strategy shared by every source in the batch
        strict: Re-raise the first error instead of collecting it

    Returns:
        Parsed days and per-source errors
    """
    date_source = date_source or ExternalDate()
    result = BatchResult()

    for source_id, text in sources:
        try:
            result.days.append(parse_day(source_id, text, date_source))
        except DotDayError as e:
            if strict:
                raise
            logging.warning(f"Skipping malformed source: {e}")
            result.errors.append(e)

    logging.info(f"Parsed {len(result.days)} day(s), {len(result.errors)} failed")
    return result

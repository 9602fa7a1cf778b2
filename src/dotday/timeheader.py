"""
Time header parsing

The first line of every event block is a time header::

    TimeOfDay?   "--"   TimeOfDay?   ("!" Reminder)?
    ^^^^^^^^^           ^^^^^^^^^         ^^^^^^^^
    Start time          End time          Reminder

A start time without an end time lasts one hour. Without a start time
the event is all-day and any end time is ignored. A time of day is hours
with optional minutes separated by ':' or '.', e.g. '9', '9:30', '9.30'.
A reminder is an integer and a unit letter, e.g. '15m', and fires that
long before the start.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from .errors import EncodingError, FormatError
from .models import UNIT_DELTAS, Duration

DEFAULT_DURATION = timedelta(hours=1)


class TokenKind(Enum):
    NUMBER = 'number'
    SEPARATOR = 'separator'
    RANGE = "'--'"
    BANG = "'!'"
    WORD = 'word'
    END = 'end of line'


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    column: int


@dataclass(frozen=True)
class TimeHeader:
    start: datetime
    end: datetime
    all_day: bool
    reminder: Optional[Duration] = None


def tokenize(line: str) -> list[Token]:
    """Split a time header into tokens, skipping whitespace.

    Raises:
        FormatError: On a character that cannot start any token
    """
    tokens: list[Token] = []
    pos = 0

    while pos < len(line):
        char = line[pos]
        if char.isspace():
            pos += 1
        elif char.isdecimal():
            start = pos
            while pos < len(line) and line[pos].isdecimal():
                pos += 1
            tokens.append(Token(TokenKind.NUMBER, line[start:pos], start))
        elif char.isalpha():
            start = pos
            while pos < len(line) and line[pos].isalpha():
                pos += 1
            tokens.append(Token(TokenKind.WORD, line[start:pos], start))
        elif char in ':.':
            tokens.append(Token(TokenKind.SEPARATOR, char, pos))
            pos += 1
        elif line.startswith('--', pos):
            tokens.append(Token(TokenKind.RANGE, '--', pos))
            pos += 2
        elif char == '!':
            tokens.append(Token(TokenKind.BANG, char, pos))
            pos += 1
        else:
            raise FormatError(f"Unexpected character {char!r} in time header", column=pos)

    tokens.append(Token(TokenKind.END, '', len(line)))
    return tokens


class _HeaderParser:
    def __init__(self, tokens: list[Token], base: datetime):
        self.tokens = tokens
        self.pos = 0
        self.base = base

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.kind is not TokenKind.END:
            self.pos += 1
        return token

    def expect(self, kind: TokenKind) -> Token:
        token = self.peek()
        if token.kind is not kind:
            found = repr(token.text) if token.text else token.kind.value
            raise FormatError(f"Expected {kind.value}, found {found}", column=token.column)
        return self.advance()

    def header(self) -> TimeHeader:
        start = self.time_of_day() if self.peek().kind is TokenKind.NUMBER else None
        self.expect(TokenKind.RANGE)
        end = self.time_of_day() if self.peek().kind is TokenKind.NUMBER else None
        reminder = None
        if self.peek().kind is TokenKind.BANG:
            self.advance()
            reminder = self.reminder()
        self.expect(TokenKind.END)

        try:
            if start is None:
                return TimeHeader(
                    start=self.base,
                    end=self.base + timedelta(days=1),
                    all_day=True,
                    reminder=reminder,
                )
            return TimeHeader(
                start=start,
                end=end if end is not None else start + DEFAULT_DURATION,
                all_day=False,
                reminder=reminder,
            )
        except OverflowError:
            raise FormatError("Event ends after the last representable date", column=0)

    def time_of_day(self) -> datetime:
        hours = self.expect(TokenKind.NUMBER)
        minutes = None
        if self.peek().kind is TokenKind.SEPARATOR:
            self.advance()
            minutes = self.expect(TokenKind.NUMBER)
        # int() refuses very long digit runs with ValueError
        try:
            offset = timedelta(hours=int(hours.text), minutes=int(minutes.text) if minutes else 0)
            return self.base + offset
        except (OverflowError, ValueError):
            raise FormatError("Time of day out of range", column=hours.column)

    def reminder(self) -> Duration:
        amount = self.peek()
        if amount.kind is not TokenKind.NUMBER:
            raise EncodingError("Reminder must be an integer followed by a unit, e.g. '15m'",
                                column=amount.column)
        self.advance()
        unit = self.peek()
        if unit.kind is not TokenKind.WORD or unit.text not in UNIT_DELTAS:
            supported = ', '.join(UNIT_DELTAS)
            raise EncodingError(f"Unsupported reminder unit {unit.text!r}; expected one of {supported}",
                                column=unit.column)
        self.advance()
        try:
            reminder = -Duration(int(amount.text), unit.text)
            reminder.to_timedelta()
        except (OverflowError, ValueError):
            raise EncodingError("Reminder out of range", column=amount.column)
        return reminder


def parse_time_header(base: datetime, line: str) -> TimeHeader:
    """Parse the first line of an event block.

    Args:
        base: Midnight of the day the event belongs to
        line: Time header text, e.g. '9:00--10:30!15m'

    Returns:
        Start, end, all-day flag and reminder of the event

    Raises:
        FormatError: If a time of day or the '--' marker is malformed
        EncodingError: If the reminder is not an integer and a unit
    """
    return _HeaderParser(tokenize(line), base).header()

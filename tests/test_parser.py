from datetime import datetime, timedelta

import pytest

from dotday.errors import DotDayError, EncodingError, FormatError, MissingFieldError
from dotday.models import Duration
from dotday.parser import (
    EmbeddedDate,
    ExternalDate,
    LineCursor,
    parse_batch,
    parse_day,
    parse_event,
    parse_title_line,
)

BASE = datetime(2020, 5, 4)

SAMPLE = """\
CONFERENCE DAY 1
================

; registration opens early
8:00--9:00!15m
Registration
@ Lobby

--
Conference
# conf,travel
"""


def test_event_with_only_header_and_title_has_empty_fields():
    event = parse_event(BASE, ["9:00--", "Standup"])

    assert event.title == "Standup"
    assert event.description == ""
    assert event.tags == ()
    assert event.attachments == ()
    assert event.people == ()
    assert event.locations == ()


def test_field_lines_are_dispatched_by_prefix():
    event = parse_event(BASE, [
        "9:00--10:00",
        "Planning",
        "# work,urgent",
        "@ Office",
        "~ Alice,Bob",
        "& file.pdf",
        "Some note",
    ])

    assert event.tags == ("work", "urgent")
    assert event.locations == ("Office",)
    assert event.people == ("Alice", "Bob")
    assert event.attachments == ("file.pdf",)
    assert event.description == "Some note"


def test_repeated_prefixes_accumulate_in_order_without_dedup():
    event = parse_event(BASE, [
        "--",
        "Trip",
        "# a,b",
        "Line one",
        "# b",
        "@ Airport",
        "Line two",
        "@ Hotel",
    ])

    assert event.tags == ("a", "b", "b")
    assert event.locations == ("Airport", "Hotel")
    assert event.location == "Hotel"
    assert event.description == "Line one\nLine two"


def test_prefix_requires_the_trailing_space():
    event = parse_event(BASE, ["--", "Notes", "#hashtag", "@home"])

    assert event.tags == ()
    assert event.locations == ()
    assert event.description == "#hashtag\n@home"


def test_block_without_title_line_is_a_missing_field():
    with pytest.raises(MissingFieldError):
        parse_event(BASE, ["9:00--"])


def test_line_cursor_signals_end_of_block():
    cursor = LineCursor(["a", "b"])

    assert cursor.next() == "a"
    assert list(cursor) == ["b"]
    assert cursor.at_end()
    assert cursor.next() is None


def test_external_date_reads_day_from_source_name_and_title_block():
    day = parse_day("2020-05-04.day", SAMPLE, ExternalDate())

    assert day.date == BASE
    assert day.title == "CONFERENCE DAY 1"
    assert [e.title for e in day.events] == ["Registration", "Conference"]

    registration, conference = day.events
    assert registration.start == datetime(2020, 5, 4, 8)
    assert registration.reminder == Duration(-15, 'm')
    assert conference.all_day
    assert conference.end - conference.start == timedelta(days=1)


def test_external_date_without_underline_keeps_first_block_as_event():
    day = parse_day("2020-05-04.txt", "9:00--\nStandup\n", ExternalDate())

    assert day.title is None
    assert len(day.events) == 1


def test_external_date_accepts_directory_prefixed_source_ids():
    day = parse_day("notes/2021-12-31.day", "--\nParty\n", ExternalDate())

    assert day.date == datetime(2021, 12, 31)


def test_external_date_rejects_source_names_without_a_date():
    with pytest.raises(FormatError) as excinfo:
        parse_day("shopping.txt", "--\nGroceries\n", ExternalDate())

    assert excinfo.value.source_id == "shopping.txt"


def test_empty_source_yields_day_without_events():
    day = parse_day("2020-05-04.day", "; nothing planned\n\n")

    assert day.events == ()
    assert day.title is None


def test_embedded_date_reads_day_from_title_line():
    text = "= 4 May 2020 =\n\n9:00--\nStandup\n"

    day = parse_day("anything.txt", text, EmbeddedDate())

    assert day.date == BASE
    assert day.title == "4 May 2020"
    assert [e.title for e in day.events] == ["Standup"]
    assert day.events[0].start == datetime(2020, 5, 4, 9)


def test_embedded_date_always_consumes_the_title_block():
    text = "= 2020-05-04 =\nreserved\n\n--\nHoliday\n"

    day = parse_day("x", text, EmbeddedDate())

    assert len(day.events) == 1


@pytest.mark.parametrize("text", ["", "Monday\n\n--\nX\n", "= someday soon =\n"])
def test_embedded_date_rejects_missing_or_unreadable_titles(text):
    with pytest.raises(FormatError):
        parse_day("x", text, EmbeddedDate())


def test_parse_title_line_strips_markers():
    assert parse_title_line("= Monday, 4 May =") == "Monday, 4 May"
    with pytest.raises(FormatError):
        parse_title_line("=Monday=")


def test_event_errors_carry_source_and_event_index():
    text = "--\nFine\n\n9:00--10:00!soon\nBroken\n"

    with pytest.raises(EncodingError) as excinfo:
        parse_day("2020-05-04.day", text)

    assert excinfo.value.source_id == "2020-05-04.day"
    assert excinfo.value.event_index == 1
    assert "2020-05-04.day, event 1" in str(excinfo.value)


def test_batch_isolates_malformed_sources(caplog):
    sources = [
        ("2020-05-04.day", "9:00--\nStandup\n"),
        ("2020-05-05.day", "nine--ten\nBroken\n"),
        ("2020-05-06.day", "--\nHoliday\n"),
    ]

    result = parse_batch(sources)

    assert [d.source_id for d in result.days] == ["2020-05-04.day", "2020-05-06.day"]
    assert len(result.errors) == 1
    assert isinstance(result.errors[0], FormatError)
    assert result.errors[0].source_id == "2020-05-05.day"
    assert "Skipping malformed source" in caplog.text


def test_strict_batch_raises_the_first_error():
    sources = [
        ("2020-05-04.day", "9:00\nNo range marker\n"),
        ("2020-05-05.day", "--\nFine\n"),
    ]

    with pytest.raises(DotDayError):
        parse_batch(sources, strict=True)


def test_parse_title_line_ignores_trailing_whitespace():
    assert parse_title_line("= 4 May 2020 = \t") == "4 May 2020"

    day = parse_day("x", "= 4 May 2020 =  \n\n--\nHoliday\n", EmbeddedDate())
    assert day.date == BASE


def test_batch_isolates_out_of_range_numbers():
    sources = [
        ("2020-05-04.day", "--\nFine\n"),
        ("2020-05-05.day", "99999999999--\nBoom\n"),
        ("2020-05-06.day", "9:00--!99999999999d\nLate\n"),
    ]

    result = parse_batch(sources)

    assert [d.source_id for d in result.days] == ["2020-05-04.day"]
    assert isinstance(result.errors[0], FormatError)
    assert isinstance(result.errors[1], EncodingError)

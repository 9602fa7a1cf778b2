"""
Errors raised while reading DotDay sources
"""


class DotDayError(ValueError):
    """Base class for DotDay parse failures.

    Args:
        message: What went wrong
        source_id: Identifier of the source being parsed, if known
        event_index: Zero-based index of the event block, if known
        column: Zero-based column in the offending line, if known
    """

    def __init__(
        self,
        message: str,
        source_id: str | None = None,
        event_index: int | None = None,
        column: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.source_id = source_id
        self.event_index = event_index
        self.column = column

    def __str__(self) -> str:
        location = []
        if self.source_id is not None:
            location.append(self.source_id)
        if self.event_index is not None:
            location.append(f"event {self.event_index}")
        if self.column is not None:
            location.append(f"column {self.column}")
        if location:
            return f"{', '.join(location)}: {self.message}"
        return self.message


class FormatError(DotDayError):
    """A line does not match the time header or title header grammar."""


class MissingFieldError(DotDayError):
    """An event block has no title line."""


class EncodingError(DotDayError):
    """A reminder is not an integer followed by a unit letter."""

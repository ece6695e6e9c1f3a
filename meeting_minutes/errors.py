"""Exceptions raised while loading, validating and exporting meeting records."""
from typing import Optional


class FormatError(ValueError):
    """The text could not be read as a meeting record."""

    def __init__(self, message: str, section: Optional[str] = None, line_no: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.section = section
        self.line_no = line_no

    def __str__(self) -> str:
        where = []
        if self.line_no is not None:
            where.append(f"line {self.line_no}")
        if self.section:
            where.append(f"section {self.section}")
        if where:
            return f"{', '.join(where)}: {self.message}"
        return self.message


class UnexpectedSection(FormatError):
    """Unknown heading, or a heading out of order."""


class MalformedRow(FormatError):
    """A line inside a section does not have the expected shape."""


class UnknownOption(FormatError):
    """A checkbox line names an option the section does not have."""


class UnknownEntryKind(FormatError):
    """An entry row carries a kind label that does not exist."""


class RenderError(RuntimeError):
    """The printable document could not be produced."""


class FontUnavailable(RenderError):
    """No font family with both regular and bold weights was found."""


class LayoutFailure(RenderError):
    """Layout failed or the two render passes disagreed."""


class RecordError(ValueError):
    """The record is not complete enough to save or export."""


class RecorderMissing(RecordError):
    pass

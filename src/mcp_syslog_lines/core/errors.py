"""Errors raised by the line parsers."""

from __future__ import annotations

from collections.abc import Iterable


class LineParseError(ValueError):
    """Base class for lines that cannot be turned into a record."""


class TimestampFormatError(LineParseError):
    """The first token of a line is not an accepted timestamp."""

    def __init__(self, value: str) -> None:
        super().__init__(f"unsupported timestamp format: {value!r}")
        self.value = value


class UnsupportedTagError(LineParseError):
    """The program tag of a line does not belong to the adapter."""

    def __init__(self, tag: str, expected: Iterable[str] = ()) -> None:
        super().__init__(f"tag {tag!r} not supported")
        self.tag = tag
        self.expected = tuple(expected)

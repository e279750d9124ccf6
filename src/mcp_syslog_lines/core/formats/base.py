"""Record and parser interfaces."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import ClassVar, Protocol

from ..models import LogLevel, TagValue
from .envelope import SyslogLine


class LineRecord(Protocol):
    """A record that consumes one raw line and exposes its envelope."""

    @property
    def raw(self) -> str: ...

    @property
    def time(self) -> datetime | None: ...

    @property
    def host(self) -> str: ...

    @property
    def tag(self) -> str: ...

    @property
    def severity(self) -> str: ...

    @property
    def pid(self) -> int: ...

    @property
    def level(self) -> LogLevel: ...

    def parse(self, raw: str) -> LineRecord:
        """Parse ``raw`` into this record and return it."""
        ...

    def tags(self) -> Mapping[str, TagValue]:
        """Return the free-text ``key=value`` tags of the line."""
        ...


class FormatAdapter(LineRecord, Protocol):
    """A format-specific record built around an already parsed envelope."""

    TAGS: ClassVar[frozenset[str]]

    def __init__(self, envelope: SyslogLine = ...) -> None: ...


class LineParser(Protocol):
    """Parser interface: turn a raw line into the most specific record."""

    def parse(self, raw: str) -> LineRecord:
        """Parse a raw line into a record."""
        ...

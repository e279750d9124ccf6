"""Syslog envelope parser.

Every supported line starts with the same three whitespace-separated tokens::

    2024-03-05T10:11:12.123456+00:00 web-1 nginx.info[4242]: ...
    <timestamp>                      <host> <tag>[.<severity>][<pid>][:]
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

from ..errors import TimestampFormatError
from ..models import LogLevel, TagValue, level_from_severity
from .tags import parse_int, parse_tags

TIME_LAYOUT = "%Y-%m-%dT%H:%M:%S.%f%z"
TIME_LAYOUT_WITHOUT_MICRO = "%Y-%m-%dT%H:%M:%S%z"

_TIMESTAMP = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<offset>[+-]\d{2}:\d{2})$",
    re.ASCII,
)

_TAG_PID = re.compile(r"(.*?)\[(\d*)\]")


def parse_timestamp(value: str) -> datetime:
    """Parse an envelope timestamp.

    Accepts ``2006-01-02T15:04:05.000000-07:00`` and the same without the
    fraction. Fractions longer than microseconds are truncated.
    """
    m = _TIMESTAMP.match(value)
    if not m:
        raise TimestampFormatError(value)
    frac = m.group("frac")
    try:
        if frac is not None:
            return datetime.strptime(
                f"{m.group('base')}.{frac[:6]}{m.group('offset')}", TIME_LAYOUT
            )
        return datetime.strptime(f"{m.group('base')}{m.group('offset')}", TIME_LAYOUT_WITHOUT_MICRO)
    except ValueError:
        raise TimestampFormatError(value) from None


def format_timestamp(ts: datetime) -> str:
    """Format an aware datetime with the microsecond layout."""
    return ts.isoformat(timespec="microseconds")


def split_tag_and_pid(raw: str) -> tuple[str, int]:
    """Split ``name[1234]`` into name and pid; strip a trailing ``:`` otherwise."""
    m = _TAG_PID.search(raw)
    if m:
        return m.group(1), parse_int(m.group(2)) or 0
    if raw.endswith(":"):
        return raw[:-1], 0
    return raw, 0


def split_tag_and_severity(raw: str) -> tuple[str, str]:
    """Split ``nginx.info`` into tag and severity when there is exactly one dot."""
    parts = raw.split(".")
    if len(parts) == 2:
        return parts[0], parts[1]
    return raw, ""


def parse_tag(raw: str) -> tuple[str, str, int]:
    """Decompose the third envelope token into (tag, severity, pid)."""
    tag_and_severity, pid = split_tag_and_pid(raw)
    tag, severity = split_tag_and_severity(tag_and_severity)
    return tag, severity, pid


@dataclass(slots=True)
class SyslogLine:
    """A single syslog line: timestamp, host, program tag, severity and pid.

    Records are filled by :meth:`parse` exactly once. After a successful parse
    further calls return the record untouched, even for a different line.

    :meth:`tags` is computed on first access and cached. The cache assumes a
    single writer; call ``tags()`` once before sharing a record across threads.
    """

    raw: str = ""
    time: datetime | None = None
    host: str = ""
    tag: str = ""
    severity: str = ""
    pid: int = 0
    _fields: tuple[str, ...] = field(default=(), init=False, repr=False, compare=False)
    _parsed: bool = field(default=False, init=False, repr=False, compare=False)
    _tags: dict[str, TagValue] | None = field(default=None, init=False, repr=False, compare=False)

    @property
    def fields(self) -> tuple[str, ...]:
        """Whitespace-separated tokens of the raw line."""
        return self._fields

    @property
    def parsed(self) -> bool:
        return self._parsed

    @property
    def level(self) -> LogLevel:
        """Normalized level derived from the severity keyword."""
        return level_from_severity(self.severity)

    def parse(self, raw: str) -> SyslogLine:
        """Parse the envelope of ``raw``.

        Lines with fewer than three tokens are accepted and leave time, host
        and tag empty. Raises :class:`TimestampFormatError` when the first token
        is not a supported timestamp.
        """
        if self._parsed:
            return self

        fields = tuple(raw.split())
        if len(fields) >= 3:
            ts = parse_timestamp(fields[0])
            self.time = ts
            self.host = fields[1]
            self.tag, self.severity, self.pid = parse_tag(fields[2])

        self.raw = raw
        self._fields = fields
        self._parsed = True
        return self

    def tags(self) -> Mapping[str, TagValue]:
        """Return the ``key=value`` tags of the line (computed once after parse)."""
        if not self._parsed:
            return {}
        if self._tags is None:
            self._tags = parse_tags(self.raw)
        return self._tags


class EnvelopeFields:
    """Read-only access to an embedded :class:`SyslogLine` named ``envelope``."""

    __slots__ = ()

    envelope: SyslogLine

    @property
    def raw(self) -> str:
        return self.envelope.raw

    @property
    def time(self) -> datetime | None:
        return self.envelope.time

    @property
    def host(self) -> str:
        return self.envelope.host

    @property
    def tag(self) -> str:
        return self.envelope.tag

    @property
    def severity(self) -> str:
        return self.envelope.severity

    @property
    def pid(self) -> int:
        return self.envelope.pid

    @property
    def fields(self) -> tuple[str, ...]:
        return self.envelope.fields

    @property
    def level(self) -> LogLevel:
        return self.envelope.level

    def tags(self) -> Mapping[str, TagValue]:
        return self.envelope.tags()

"""Nginx and SSL endpoint access lines.

Example body (after the envelope)::

    method=GET status=200 host=a.com length=512 total=0.120 unicorn_time=0.100
    ua="Mozilla/5.0 (X11; Linux)" uri="/search?q=a b" ref="-"
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import ClassVar

from ..errors import UnsupportedTagError
from .envelope import EnvelopeFields, SyslogLine
from .tags import parse_float, parse_int

_QUOTED = re.compile(r'(ua|uri|ref)="(.*?)"')


@dataclass(slots=True)
class NginxLine(EnvelopeFields):
    """Access line written by nginx or the SSL endpoint in front of it."""

    TAGS: ClassVar[frozenset[str]] = frozenset({"ssl_endpoint", "nginx"})

    envelope: SyslogLine = field(default_factory=SyslogLine)
    method: str = ""
    status: str = ""
    length: int = 0
    total_time: float = 0.0
    unicorn_time: float = 0.0
    http_host: str = ""
    user_agent_name: str = ""
    uri: str = ""
    referer: str = ""
    _parsed: bool = field(default=False, init=False, repr=False, compare=False)

    def parse(self, raw: str) -> NginxLine:
        """Parse an nginx line; raises UnsupportedTagError for other programs."""
        if self._parsed:
            return self
        self.envelope.parse(raw)
        if self.tag not in self.TAGS:
            raise UnsupportedTagError(self.tag, self.TAGS)

        for token in self.fields:
            key, sep, value = token.partition("=")
            if not sep:
                continue
            if key == "method":
                self.method = value
            elif key == "status":
                self.status = value
            elif key == "host":
                self.http_host = value
            elif key == "length":
                self.length = parse_int(value) or 0
            elif key == "total":
                self.total_time = parse_float(value) or 0.0
            elif key == "unicorn_time":
                self.unicorn_time = parse_float(value) or 0.0

        # ua/uri/ref may contain spaces, so they are matched on the raw text.
        for name, value in _QUOTED.findall(self.raw):
            if name == "ua":
                self.user_agent_name = value
            elif name == "uri":
                self.uri = value
            elif name == "ref":
                self.referer = value

        self._parsed = True
        return self

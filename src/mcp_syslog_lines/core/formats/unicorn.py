"""Unicorn application server lines."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import ClassVar

from ..errors import UnsupportedTagError
from .envelope import EnvelopeFields, SyslogLine

_UUID = re.compile(r"([a-z0-9\-]{36})")


@dataclass(slots=True)
class UnicornLine(EnvelopeFields):
    """Unicorn request line carrying an optional request UUID."""

    TAGS: ClassVar[frozenset[str]] = frozenset({"unicorn"})

    envelope: SyslogLine = field(default_factory=SyslogLine)
    uuid: str = ""
    _parsed: bool = field(default=False, init=False, repr=False, compare=False)

    def parse(self, raw: str) -> UnicornLine:
        """Parse a unicorn line; raises UnsupportedTagError for other programs."""
        if self._parsed:
            return self
        self.envelope.parse(raw)
        if self.tag not in self.TAGS:
            raise UnsupportedTagError(self.tag, self.TAGS)

        if len(self.fields) >= 4:
            m = _UUID.search(self.raw)
            if m:
                self.uuid = m.group(1)
        self._parsed = True
        return self

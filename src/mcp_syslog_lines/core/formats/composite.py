"""Parser composition utilities."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..errors import UnsupportedTagError
from .base import FormatAdapter, LineRecord
from .envelope import SyslogLine
from .haproxy import HAProxyLine
from .nginx import NginxLine
from .unicorn import UnicornLine

DEFAULT_ADAPTERS: tuple[type[FormatAdapter], ...] = (UnicornLine, NginxLine, HAProxyLine)


@dataclass(frozen=True, slots=True)
class CompositeParser:
    """Try adapters in order and return the first that accepts the line's tag.

    The envelope is parsed once and handed to each adapter. Lines whose tag no
    adapter accepts come back as a plain :class:`SyslogLine`.
    """

    parsers: Sequence[type[FormatAdapter]] = DEFAULT_ADAPTERS

    def adapter_for(self, tag: str) -> type[FormatAdapter] | None:
        """Return the adapter registered for a program tag, if any."""
        for p in self.parsers:
            if tag in p.TAGS:
                return p
        return None

    def parse(self, raw: str) -> LineRecord:
        """Parse ``raw`` into the most specific record available."""
        envelope = SyslogLine().parse(raw)
        for p in self.parsers:
            try:
                return p(envelope=envelope).parse(raw)
            except UnsupportedTagError:
                continue
        return envelope


def default_parser() -> CompositeParser:
    """Default adapter chain (first match wins)."""
    return CompositeParser(parsers=DEFAULT_ADAPTERS)

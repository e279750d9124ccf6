"""Line formats.

Contains the syslog envelope parser, the free-text tag tokenizer and the
unicorn, nginx and haproxy adapters built on top of them.
"""

from __future__ import annotations

from .base import FormatAdapter, LineParser, LineRecord
from .composite import DEFAULT_ADAPTERS, CompositeParser, default_parser
from .envelope import (
    TIME_LAYOUT,
    TIME_LAYOUT_WITHOUT_MICRO,
    SyslogLine,
    format_timestamp,
    parse_timestamp,
)
from .haproxy import HAProxyLine
from .nginx import NginxLine
from .tags import parse_tags
from .unicorn import UnicornLine

__all__ = [
    "DEFAULT_ADAPTERS",
    "TIME_LAYOUT",
    "TIME_LAYOUT_WITHOUT_MICRO",
    "CompositeParser",
    "FormatAdapter",
    "HAProxyLine",
    "LineParser",
    "LineRecord",
    "NginxLine",
    "SyslogLine",
    "UnicornLine",
    "default_parser",
    "format_timestamp",
    "parse_tags",
    "parse_timestamp",
]

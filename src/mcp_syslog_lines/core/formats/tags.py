"""Helpers for free-text ``key=value`` tags embedded in log lines."""

from __future__ import annotations

import re
from enum import Enum

from ..models import TagValue

_VALID_KEY = re.compile(r"^[a-z]+(?:_[a-z]+)*$", re.IGNORECASE | re.ASCII)
_CALLS = re.compile(r"^([0-9.]+)/([0-9]+)$")
_INT = re.compile(r"[+-]?[0-9]+")


class _State(Enum):
    SCANNING = "scanning"
    IN_QUOTED_VALUE = "in_quoted_value"


def remove_quotes(raw: str) -> str:
    """Strip one pair of surrounding double quotes, if present."""
    if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
        return raw[1:-1]
    if raw == '"':
        return ""
    return raw


def parse_int(raw: str) -> int | None:
    """Parse a base-10 integer of ASCII digits, or return None."""
    if not _INT.fullmatch(raw):
        return None
    return int(raw, 10)


def parse_float(raw: str) -> float | None:
    """Parse a float, or return None.

    Digit separators (``1_000``) and non-ASCII digits are rejected.
    """
    if "_" in raw or not raw.isascii() or raw != raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def parse_tag_value(raw: str) -> TagValue:
    """Coerce a tag value to int, then float, then an unquoted string."""
    i = parse_int(raw)
    if i is not None:
        return i
    f = parse_float(raw)
    if f is not None:
        return f
    return remove_quotes(raw)


def parse_tags(raw: str) -> dict[str, TagValue]:
    """Extract ``key=value`` pairs from a line.

    Quoted values may span several whitespace tokens (``ua="Mozilla 5.0"``).
    A value of ``-`` marks an absent value and is skipped. Values shaped like
    ``<total>/<count>`` expand to ``<key>_time`` and ``<key>_calls``.
    Tokens with an invalid key are ignored.
    """
    tags: dict[str, TagValue] = {}
    state = _State.SCANNING
    current_key = ""
    value_parts: list[str] = []

    for token in raw.split():
        if state is _State.IN_QUOTED_VALUE:
            value_parts.append(token)
            if '"' in token:
                tags[current_key] = remove_quotes(" ".join(value_parts))
                state = _State.SCANNING
            continue

        key, sep, value = token.partition("=")
        if not sep or not _VALID_KEY.match(key):
            continue
        current_key = key

        if '"' in value and not value.endswith('"'):
            value_parts = [value]
            state = _State.IN_QUOTED_VALUE
        elif value == "-":
            continue
        elif m := _CALLS.match(value):
            total = parse_float(m.group(1))
            calls = parse_int(m.group(2))
            if total is not None and calls is not None:
                tags[f"{key}_time"] = total
                tags[f"{key}_calls"] = calls
        else:
            tags[key] = parse_tag_value(value)

    return tags

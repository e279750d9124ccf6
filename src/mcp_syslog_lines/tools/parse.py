"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, Field

from mcp_syslog_lines.core.config import safe_resolve
from mcp_syslog_lines.core.formats import LineRecord, SyslogLine, default_parser
from mcp_syslog_lines.core.log_service import get_records
from mcp_syslog_lines.core.models import LogLevel

DEFAULT_LIMIT = 200
HARD_LIMIT = 5000
ALL_LEVELS = [level.value for level in LogLevel]

_ENVELOPE_KEYS = ("time", "host", "tag", "severity", "pid")


class ParsedLine(BaseModel):
    format: str = Field(description="Record type: syslog, unicorn, nginx or haproxy.")
    level: str = Field(description="Normalized level derived from the syslog severity.")
    record: dict[str, Any] = Field(description="Envelope and format-specific fields.")
    tags: dict[str, str | int | float] | None = Field(
        default=None, description="Free-text key=value tags found in the line."
    )
    raw: str | None = Field(default=None, description="Original line.")


class ParseLogFileResponse(BaseModel):
    count: int = Field(description="Number of records returned.")
    records: list[ParsedLine] = Field(default_factory=list)
    truncated: bool = Field(default=False, description="True when the limit cut the result.")


def record_format(record: LineRecord) -> str:
    """Return a short format name for a record."""
    if isinstance(record, SyslogLine):
        return "syslog"
    return type(record).__name__.removesuffix("Line").lower()


def record_to_dict(record: LineRecord) -> dict[str, Any]:
    """Convert a record into a JSON-serializable dict (envelope first)."""
    d: dict[str, Any] = {
        "time": record.time.isoformat() if record.time is not None else None,
        "host": record.host,
        "tag": record.tag,
        "severity": record.severity,
        "pid": record.pid,
    }
    for f in dataclasses.fields(record):
        if f.name.startswith("_") or f.name == "envelope" or f.name == "raw":
            continue
        if f.name in _ENVELOPE_KEYS:
            continue
        d[f.name] = getattr(record, f.name)
    return d


def to_parsed_line(record: LineRecord, *, include_raw: bool, include_tags: bool) -> ParsedLine:
    return ParsedLine(
        format=record_format(record),
        level=record.level.value,
        record=record_to_dict(record),
        tags=dict(record.tags()) if include_tags else None,
        raw=record.raw if include_raw else None,
    )


def _parse_levels(levels: Sequence[str] | None) -> list[LogLevel] | None:
    """Parse user-supplied severity names into LogLevel enums."""
    if not levels:
        return None
    out: list[LogLevel] = []
    for s in levels:
        name = s.strip().upper()
        if not name:
            continue
        try:
            out.append(LogLevel[name])
        except KeyError as e:
            valid = ", ".join(ALL_LEVELS)
            raise ValueError(
                f"Unknown log level '{s}'. Valid values: {valid}. "
                "Tip: levels is case-insensitive (e.g., 'error', 'WARNING')."
            ) from e
    return out or None


def parse_line_impl(*, line: str, include_tags: bool = True) -> dict[str, Any]:
    """Implementation for the `parse_line` MCP tool."""
    record = default_parser().parse(line.rstrip("\r\n"))
    return to_parsed_line(record, include_raw=False, include_tags=include_tags).model_dump()


async def parse_log_file_impl(
    *,
    log_path: str,
    programs: Sequence[str] | None = None,
    levels: Sequence[str] | None = None,
    contains: str | None = None,
    limit: int | None = None,
    include_raw: bool = False,
    include_tags: bool = False,
) -> dict[str, Any]:
    """Implementation for the `parse_log_file` MCP tool.

    Notes
    -----
    - The path must resolve inside SYSLOG_LINES_BASE_DIR.
    - Lines with an unsupported timestamp are skipped.
    - limit defaults to DEFAULT_LIMIT and is capped at HARD_LIMIT; reading stops
      one record past the limit so truncation can be reported.
    """
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    if limit > HARD_LIMIT:
        limit = HARD_LIMIT

    path = safe_resolve(log_path)
    records = await get_records(
        path,
        programs=list(programs) if programs else None,
        levels=_parse_levels(levels),
        contains=contains,
        limit=limit + 1,
    )

    truncated = len(records) > limit
    records = records[:limit]
    response = ParseLogFileResponse(
        count=len(records),
        records=[
            to_parsed_line(r, include_raw=include_raw, include_tags=include_tags) for r in records
        ],
        truncated=truncated,
    )
    return response.model_dump()

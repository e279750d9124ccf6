"""Log loading, parsing and filtering utilities.

This module is the main integration point that reads log files and returns
parsed line records.
"""

from __future__ import annotations

import gzip
import logging
from collections.abc import AsyncIterator, Iterable
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap

from .config import resolve_max_workers
from .errors import TimestampFormatError
from .formats import LineParser, LineRecord, default_parser
from .models import LogLevel

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str, decode_errors: str):
    """Open a log file for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors) as f:
            yield f


def _normalize_ts(ts: datetime) -> datetime:
    """Normalize timestamps to timezone-aware UTC (naive values are taken as UTC)."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def _normalize_window(
    since: datetime | None, until: datetime | None
) -> tuple[datetime | None, datetime | None]:
    """Normalize a [since, until) window into UTC."""
    if since is not None:
        since = _normalize_ts(since)
    if until is not None:
        until = _normalize_ts(until)
    if since is not None and until is not None and since >= until:
        raise ValueError("since must be < until")
    return since, until


def _parse_or_none(parser: LineParser, line: str) -> LineRecord | None:
    try:
        return parser.parse(line)
    except TimestampFormatError as exc:
        logger.debug("Skipping line: %s", exc)
        return None


def parse_lines(
    lines: Iterable[str],
    *,
    parser: LineParser | None = None,
    max_workers: int | None = None,
) -> list[LineRecord | None]:
    """Parse lines on a thread pool, preserving order.

    Lines with an unsupported timestamp come back as ``None``.
    """
    parser = parser or default_parser()
    workers = resolve_max_workers(max_workers)
    stripped = [line.rstrip("\r\n") for line in lines]
    if workers == 1:
        return [_parse_or_none(parser, line) for line in stripped]

    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(lambda line: _parse_or_none(parser, line), stripped))


async def iter_records(
    log_path: str | Path,
    *,
    parser: LineParser | None = None,
    programs: Iterable[str] | None = None,
    levels: Iterable[LogLevel] | None = None,
    contains: str | None = None,
    since: datetime | None = None,
    until: datetime | None = None,
    strict: bool = False,
    limit: int | None = None,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> AsyncIterator[LineRecord]:
    """Yield parsed records from a log file after filtering.

    Lines whose first token is not a supported timestamp are skipped, or
    re-raised as :class:`TimestampFormatError` when ``strict`` is set. Records
    without a timestamp are dropped when a time window is given. Reading stops
    once ``limit`` records have been yielded.
    """
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")
    if limit is not None and limit <= 0:
        raise ValueError("limit must be > 0")

    parser = parser or default_parser()
    since, until = _normalize_window(since, until)
    has_window = since is not None or until is not None

    allowed_programs: set[str] | None = None
    if programs is not None:
        allowed_programs = set(programs)
        if not allowed_programs:
            return

    allowed_levels: set[LogLevel] | None = None
    if levels is not None:
        allowed_levels = set(levels)
        if not allowed_levels:
            return

    skipped = 0
    emitted = 0
    async with _open_text(path, encoding=encoding, decode_errors=decode_errors) as f:
        async for line in f:
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            if contains is not None and contains not in line:
                continue

            try:
                record = parser.parse(line)
            except TimestampFormatError:
                if strict:
                    raise
                skipped += 1
                logger.debug("Skipping line with unsupported timestamp: %r", line[:80])
                continue

            if allowed_programs is not None and record.tag not in allowed_programs:
                continue
            if allowed_levels is not None and record.level not in allowed_levels:
                continue
            if has_window:
                if record.time is None:
                    continue
                ts = _normalize_ts(record.time)
                if since is not None and ts < since:
                    continue
                if until is not None and ts >= until:
                    continue

            yield record
            emitted += 1
            if limit is not None and emitted >= limit:
                break

    if skipped:
        logger.info("Skipped %d line(s) with unsupported timestamps in %s", skipped, path)


async def get_records(
    log_path: str | Path,
    **iter_kwargs,
) -> list[LineRecord]:
    """Collect iter_records into a list."""
    return [record async for record in iter_records(log_path, **iter_kwargs)]

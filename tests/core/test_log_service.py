from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from mcp_syslog_lines.core.errors import TimestampFormatError
from mcp_syslog_lines.core.formats import HAProxyLine, NginxLine, SyslogLine, UnicornLine
from mcp_syslog_lines.core.log_service import get_records, iter_records, parse_lines
from mcp_syslog_lines.core.models import LogLevel


@pytest.mark.asyncio
async def test_iter_records_skips_bad_and_blank_lines(tmp_path: Path, write_log) -> None:
    path = tmp_path / "syslog.log"
    write_log(path)

    records = [r async for r in iter_records(path)]

    assert [type(r) for r in records] == [NginxLine, UnicornLine, HAProxyLine, SyslogLine]


@pytest.mark.asyncio
async def test_iter_records_strict_raises(tmp_path: Path, write_log) -> None:
    path = tmp_path / "syslog.log"
    write_log(path)

    with pytest.raises(TimestampFormatError):
        _ = [r async for r in iter_records(path, strict=True)]


@pytest.mark.asyncio
async def test_iter_records_program_and_level_filters(tmp_path: Path, write_log) -> None:
    path = tmp_path / "syslog.log"
    write_log(path)

    by_program = await get_records(path, programs=["haproxy", "unicorn"])
    assert [r.tag for r in by_program] == ["unicorn", "haproxy"]

    by_level = await get_records(path, levels=[LogLevel.ERROR])
    assert [r.tag for r in by_level] == ["cron"]

    assert await get_records(path, programs=[]) == []


@pytest.mark.asyncio
async def test_iter_records_contains(tmp_path: Path, write_log) -> None:
    path = tmp_path / "syslog.log"
    write_log(path)

    records = await get_records(path, contains="host=a.com")
    assert len(records) == 1
    assert isinstance(records[0], NginxLine)


@pytest.mark.asyncio
async def test_iter_records_time_window(tmp_path: Path, write_log) -> None:
    path = tmp_path / "syslog.log"
    write_log(path)

    records = await get_records(
        path,
        since=datetime(2024, 3, 5, 10, 11, 13, tzinfo=UTC),
        until=datetime(2024, 3, 5, 12, 0, 0, tzinfo=UTC),
    )
    assert [r.tag for r in records] == ["haproxy"]


@pytest.mark.asyncio
async def test_iter_records_invalid_window(tmp_path: Path, write_log) -> None:
    path = tmp_path / "syslog.log"
    write_log(path)
    ts = datetime(2024, 3, 5, tzinfo=UTC)

    with pytest.raises(ValueError):
        await get_records(path, since=ts, until=ts)


@pytest.mark.asyncio
async def test_iter_records_gzip(tmp_path: Path, write_gz_log) -> None:
    path = tmp_path / "syslog.log.gz"
    write_gz_log(path)

    records = await get_records(path, programs=["nginx"])
    assert len(records) == 1
    assert records[0].user_agent_name == "Mozilla 5"


@pytest.mark.asyncio
async def test_iter_records_limit_stops_early(tmp_path: Path, write_log) -> None:
    path = tmp_path / "syslog.log"
    write_log(path)

    records = await get_records(path, limit=2)
    assert [r.tag for r in records] == ["nginx", "unicorn"]

    records = await get_records(path, programs=["haproxy", "cron"], limit=1)
    assert [r.tag for r in records] == ["haproxy"]


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [0, -1])
async def test_iter_records_rejects_non_positive_limit(tmp_path: Path, write_log, limit: int) -> None:
    path = tmp_path / "syslog.log"
    write_log(path)

    with pytest.raises(ValueError):
        await get_records(path, limit=limit)


@pytest.mark.asyncio
async def test_iter_records_missing_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "missing.log"
    with pytest.raises(FileNotFoundError):
        _ = [r async for r in iter_records(path)]


@pytest.mark.parametrize("max_workers", [1, 4])
def test_parse_lines_preserves_order(sample_lines: list[str], max_workers: int) -> None:
    lines = [*sample_lines, "yesterday web-1 nginx: status=200\n"]
    records = parse_lines(lines, max_workers=max_workers)

    assert [type(r) for r in records] == [NginxLine, UnicornLine, HAProxyLine, SyslogLine, type(None)]


def test_parse_lines_rejects_bad_worker_count(sample_lines: list[str]) -> None:
    with pytest.raises(ValueError):
        parse_lines(sample_lines, max_workers=0)


def test_parse_lines_worker_env(monkeypatch: pytest.MonkeyPatch, sample_lines: list[str]) -> None:
    monkeypatch.setenv("SYSLOG_LINES_MAX_WORKERS", "two")
    with pytest.raises(ValueError, match="SYSLOG_LINES_MAX_WORKERS"):
        parse_lines(sample_lines)

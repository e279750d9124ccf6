from __future__ import annotations

from pathlib import Path

import pytest

from mcp_syslog_lines.core.config import BASE_DIR_ENV
from mcp_syslog_lines.tools.parse import parse_line_impl, parse_log_file_impl

NGINX_LINE = (
    "2024-03-05T10:11:12.123456+00:00 web-1 nginx.info[4242]: method=GET host=a.com "
    'status=200 length=512 total=0.12 unicorn_time=0.1 ua="Mozilla 5" uri="/x" ref="-"'
)


def test_parse_line_impl_nginx() -> None:
    out = parse_line_impl(line=NGINX_LINE + "\n")

    assert out["format"] == "nginx"
    assert out["level"] == "INFO"
    assert out["raw"] is None
    record = out["record"]
    assert record["time"] == "2024-03-05T10:11:12.123456+00:00"
    assert record["host"] == "web-1"
    assert record["tag"] == "nginx"
    assert record["pid"] == 4242
    assert record["http_host"] == "a.com"
    assert record["total_time"] == 0.12
    assert record["user_agent_name"] == "Mozilla 5"
    assert "envelope" not in record
    assert "_parsed" not in record
    assert out["tags"]["status"] == 200
    assert out["tags"]["ua"] == "Mozilla 5"


def test_parse_line_impl_plain_syslog() -> None:
    out = parse_line_impl(line="2024-03-05T12:00:00+00:00 worker-1 cron.err: rc=1", include_tags=False)

    assert out["format"] == "syslog"
    assert out["level"] == "ERROR"
    assert out["tags"] is None
    assert set(out["record"]) == {"time", "host", "tag", "severity", "pid"}


@pytest.mark.asyncio
async def test_parse_log_file_impl_filters(
    tmp_path: Path, write_log, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(BASE_DIR_ENV, str(tmp_path))
    write_log(tmp_path / "syslog.log")

    out = await parse_log_file_impl(log_path="syslog.log", programs=["haproxy"], include_raw=True)

    assert out["count"] == 1
    assert out["truncated"] is False
    rec = out["records"][0]
    assert rec["format"] == "haproxy"
    assert rec["record"]["backend_container_id"] == "cid"
    assert rec["raw"].startswith("2024-03-05T10:11:13.000001+00:00 lb-1 haproxy[5]:")


@pytest.mark.asyncio
async def test_parse_log_file_impl_limit(
    tmp_path: Path, write_log, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(BASE_DIR_ENV, str(tmp_path))
    write_log(tmp_path / "syslog.log")

    out = await parse_log_file_impl(log_path="syslog.log", limit=2)
    assert out["count"] == 2
    assert out["truncated"] is True

    out = await parse_log_file_impl(log_path="syslog.log", limit=4)
    assert out["count"] == 4
    assert out["truncated"] is False

    with pytest.raises(ValueError):
        await parse_log_file_impl(log_path="syslog.log", limit=0)


@pytest.mark.asyncio
async def test_parse_log_file_impl_levels(
    tmp_path: Path, write_log, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(BASE_DIR_ENV, str(tmp_path))
    write_log(tmp_path / "syslog.log")

    out = await parse_log_file_impl(log_path="syslog.log", levels=["error"])
    assert [r["record"]["tag"] for r in out["records"]] == ["cron"]

    with pytest.raises(ValueError, match="Unknown log level"):
        await parse_log_file_impl(log_path="syslog.log", levels=["loud"])


@pytest.mark.asyncio
async def test_parse_log_file_impl_rejects_escaping_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    base = tmp_path / "logs"
    base.mkdir()
    monkeypatch.setenv(BASE_DIR_ENV, str(base))
    (tmp_path / "secret.log").write_text("x\n", encoding="utf-8")

    with pytest.raises(ValueError, match="escapes"):
        await parse_log_file_impl(log_path="../secret.log")

from __future__ import annotations

import gzip
from collections.abc import Callable
from pathlib import Path

import pytest

NGINX_LINE = (
    "2024-03-05T10:11:12.123456+00:00 web-1 nginx.info[4242]: method=GET host=a.com "
    'status=200 length=512 total=0.12 unicorn_time=0.1 ua="Mozilla 5" uri="/x" ref="-"'
)
UNICORN_LINE = (
    "2024-03-05T10:11:12+00:00 app-1 unicorn[77]: 0f8fad5b-d9cb-469f-a165-70867728950e "
    "Completed 200 OK"
)
HAPROXY_LINE = (
    "2024-03-05T10:11:13.000001+00:00 lb-1 haproxy[5]: 10.0.0.1:5000 "
    "[05/Mar/2024:10:11:13.000] http-in web/web-1:img:cid 0/1/2/3/4 200 512 - - ---- "
    '10/9/8/7/0 0/0 "GET /x HTTP/1.1"'
)
CRON_LINE = "2024-03-05T12:00:00+00:00 worker-1 cron.err: job failed rc=1"
BAD_TIMESTAMP_LINE = "yesterday worker-1 cron: job failed"


@pytest.fixture
def sample_lines() -> list[str]:
    return [NGINX_LINE, UNICORN_LINE, HAPROXY_LINE, CRON_LINE]


@pytest.fixture
def write_log(sample_lines: list[str]) -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        lines = [*sample_lines[:2], "", BAD_TIMESTAMP_LINE, *sample_lines[2:]]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    return _write


@pytest.fixture
def write_gz_log(sample_lines: list[str]) -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        with gzip.open(path, mode="wt", encoding="utf-8") as f:
            f.write("\n".join(sample_lines) + "\n")

    return _write

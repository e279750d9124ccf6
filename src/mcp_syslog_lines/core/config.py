"""Environment configuration."""

from __future__ import annotations

import os
from pathlib import Path

LOG_LEVEL_ENV = "SYSLOG_LINES_LOG_LEVEL"
MAX_WORKERS_ENV = "SYSLOG_LINES_MAX_WORKERS"
BASE_DIR_ENV = "SYSLOG_LINES_BASE_DIR"


def resolve_log_level() -> str:
    """Return the configured log level name (default INFO)."""
    return os.getenv(LOG_LEVEL_ENV, "INFO").upper()


def resolve_max_workers(max_workers: int | None) -> int:
    """Return an explicit worker count, the env override, or a CPU-based default."""
    if max_workers is not None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        return max_workers

    env = os.getenv(MAX_WORKERS_ENV)
    if env:
        try:
            value = int(env)
        except ValueError as exc:
            raise ValueError(f"{MAX_WORKERS_ENV} must be an integer") from exc
        if value < 1:
            raise ValueError(f"{MAX_WORKERS_ENV} must be >= 1")
        return value

    cpu_count = os.cpu_count() or 1
    return min(32, cpu_count)


def base_dir() -> Path:
    """Return the resolved directory file access is restricted to."""
    raw = os.getenv(BASE_DIR_ENV, os.getcwd())
    return Path(raw).resolve()


def safe_resolve(path: str) -> Path:
    """Resolve a path under the configured base directory."""
    base = base_dir()
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = base / p
    p = p.resolve()
    if base not in p.parents and p != base:
        raise ValueError("Path escapes base dir")
    return p

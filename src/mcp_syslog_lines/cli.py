from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

from mcp_syslog_lines.core.errors import TimestampFormatError
from mcp_syslog_lines.core.log_service import get_records
from mcp_syslog_lines.core.models import LogLevel
from mcp_syslog_lines.tools.parse import to_parsed_line


def _parse_levels(s: str) -> list[LogLevel]:
    out: list[LogLevel] = []
    for part in s.split(","):
        name = part.strip().upper()
        if not name:
            continue
        try:
            out.append(LogLevel(name))
        except ValueError as e:
            raise argparse.ArgumentTypeError(
                "Invalid level. Allowed: CRITICAL, ERROR, WARNING, INFO, DEBUG, UNKNOWN"
            ) from e
    if not out:
        raise argparse.ArgumentTypeError("At least one level must be provided")
    return out


def _parse_iso_dt(s: str) -> datetime:
    dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Parse syslog lines (unicorn, nginx, haproxy) into JSON records."
    )
    p.add_argument("log_path")
    p.add_argument(
        "--program",
        dest="programs",
        action="append",
        default=None,
        help="Only keep lines with this program tag (repeatable, e.g. --program nginx)",
    )
    p.add_argument("--levels", type=_parse_levels, default=None, help="Comma-separated (e.g., ERROR,WARNING)")
    p.add_argument("--contains", default=None, help="Substring filter applied to the raw line")
    p.add_argument("--max", dest="max_results", type=int, default=None, help="Max records to print (default: no cap)")
    p.add_argument("--since", default=None, help="ISO8601 start time (assumes UTC if tz missing)")
    p.add_argument("--until", default=None, help="ISO8601 end time (assumes UTC if tz missing)")
    p.add_argument("--tags", dest="include_tags", action="store_true", help="Include key=value tags")
    p.add_argument("--raw", dest="include_raw", action="store_true", help="Include raw line in output")
    p.add_argument("--strict", action="store_true", help="Fail on lines with an unsupported timestamp")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    path = Path(args.log_path)

    try:
        since = _parse_iso_dt(args.since) if args.since else None
        until = _parse_iso_dt(args.until) if args.until else None
        if args.max_results is not None and args.max_results <= 0:
            raise ValueError("max_results must be > 0")
        records = asyncio.run(
            get_records(
                path,
                programs=args.programs,
                levels=args.levels,
                contains=args.contains,
                since=since,
                until=until,
                strict=args.strict,
                limit=args.max_results,
            )
        )
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except (TimestampFormatError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    for r in records:
        out = to_parsed_line(r, include_raw=args.include_raw, include_tags=args.include_tags)
        print(json.dumps(out.model_dump(exclude_none=True)))

    print(f"Parsed {len(records)} records.", file=sys.stderr)


if __name__ == "__main__":
    main()

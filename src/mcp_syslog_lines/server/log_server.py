"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: parse a single line or a whole log file into structured records
- Resources: help text, supported formats, sample lines, response schema

Run locally (stdio):
    python -m mcp_syslog_lines.server.log_server
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_syslog_lines.core.config import resolve_log_level
from mcp_syslog_lines.resources.registry import register_resources
from mcp_syslog_lines.tools.parse import parse_line_impl, parse_log_file_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; keeping logs concise makes them easier to consume.
    """
    level = getattr(logging, resolve_log_level(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("syslog-lines", json_response=True)

register_resources(mcp)


@mcp.tool()
def parse_line(line: str, include_tags: bool = True) -> dict[str, Any]:
    """Parse one syslog line into a structured record.

    Parameters
    ----------
    line:
        A single log line, e.g.
        ``2024-03-05T10:11:12.123456+00:00 web-1 nginx.info[42]: method=GET status=200``.
    include_tags:
        Whether to include the free-text key=value tags of the line.

    Returns
    -------
    dict:
        {"format": str, "level": str, "record": dict, "tags": dict | None, "raw": None}
    """
    return parse_line_impl(line=line, include_tags=include_tags)


@mcp.tool()
async def parse_log_file(
    log_path: str,
    programs: Sequence[str] | None = None,
    levels: Sequence[str] | None = None,
    contains: str | None = None,
    limit: int | None = None,
    include_raw: bool = False,
    include_tags: bool = False,
) -> dict[str, Any]:
    """Parse a local log file into structured records.

    Parameters
    ----------
    log_path:
        Path to a log file inside SYSLOG_LINES_BASE_DIR. Supports plain text and .gz.
    programs:
        Only keep lines whose program tag is listed (e.g., ["nginx", "haproxy"]).
    levels:
        Filter by severity names (e.g., ["error", "warning"]). Case-insensitive.
    contains:
        Substring filter applied to the raw line.
    limit:
        Maximum number of records returned (hard-capped in the implementation).
    include_raw:
        Whether to include the original raw log line in each record.
    include_tags:
        Whether to include the free-text key=value tags of each line.

    Returns
    -------
    dict:
        {"count": int, "records": list[dict], "truncated": bool}
    """
    return await parse_log_file_impl(
        log_path=log_path,
        programs=programs,
        levels=levels,
        contains=contains,
        limit=limit,
        include_raw=include_raw,
        include_tags=include_tags,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

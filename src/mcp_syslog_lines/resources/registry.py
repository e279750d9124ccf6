"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_syslog_lines.core.config import BASE_DIR_ENV, base_dir
from mcp_syslog_lines.core.formats import DEFAULT_ADAPTERS, TIME_LAYOUT, TIME_LAYOUT_WITHOUT_MICRO
from mcp_syslog_lines.tools.parse import ParseLogFileResponse

SAMPLE_LOG = (
    "2024-03-05T10:11:12.123456+00:00 web-1 nginx.info[4242]: method=GET status=200 "
    'host=a.com length=512 total=0.120 unicorn_time=0.100 ua="Mozilla 5" uri="/x" ref="-"\n'
    "2024-03-05T10:11:12+00:00 app-1 unicorn[77]: 0f8fad5b-d9cb-469f-a165-70867728950e "
    "Completed 200 OK\n"
    "2024-03-05T10:11:13.000001+00:00 lb-1 haproxy[5]: 10.0.0.1:5000 [05/Mar/2024:10:11:13.000] "
    "http-in web/web-1:img:cid 0/1/2/3/4 200 512 - - ---- 10/9/8/7/0 0/0 "
    '"GET /x HTTP/1.1"\n'
)


def _adapter_fields(cls: type) -> list[str]:
    return [
        f.name for f in dataclasses.fields(cls) if f.name != "envelope" and not f.name.startswith("_")
    ]


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://syslog-lines/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        return (
            "Resources:\n"
            "- app://syslog-lines/help\n"
            "- app://syslog-lines/formats\n"
            "- app://syslog-lines/examples/sample-log\n"
            "- app://syslog-lines/schemas/parse-response\n"
            f"\nFiles passed to parse_log_file must live under {BASE_DIR_ENV}.\n"
            f"Base directory: {base_dir()}\n"
        )

    @mcp.resource("app://syslog-lines/formats")
    def formats() -> dict[str, Any]:
        """Return the accepted timestamp layouts and the program tags per format."""
        return {
            "timestamp_layouts": [TIME_LAYOUT, TIME_LAYOUT_WITHOUT_MICRO],
            "formats": {
                cls.__name__: {"tags": sorted(cls.TAGS), "fields": _adapter_fields(cls)}
                for cls in DEFAULT_ADAPTERS
            },
        }

    @mcp.resource("app://syslog-lines/examples/sample-log")
    def sample_log() -> str:
        """Return a tiny sample log for demos and tests."""
        return SAMPLE_LOG

    @mcp.resource("app://syslog-lines/schemas/parse-response")
    def parse_response_schema() -> dict[str, Any]:
        """Return the JSON schema for parse_log_file responses."""
        return ParseLogFileResponse.model_json_schema()

"""Module entrypoint.

Allows:
    python -m mcp_syslog_lines
"""

from __future__ import annotations

from mcp_syslog_lines.server.log_server import main

if __name__ == "__main__":
    main()

"""HAProxy HTTP log lines.

Fields are positional (see the HAProxy "HTTP log format")::

    0  timestamp          6  backend/host:image:container   13 act/fe/be/srv/retries
    1  host               7  Tq/Tw/Tc/Tr/Tt                 14 srv_queue/backend_queue
    2  haproxy[pid]:      8  status                         15 "METHOD
    3  client_ip:port     9  bytes read                     16 uri
    4  [accept date]      10-12 cookies and termination state
    5  frontend
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from ..errors import UnsupportedTagError
from .envelope import EnvelopeFields, SyslogLine
from .tags import parse_int

_MIN_FIELDS = 17


def _ints(raw: str, count: int) -> list[int] | None:
    """Split a '/'-joined tuple into ``count`` best-effort integers."""
    parts = raw.split("/")
    if len(parts) != count:
        return None
    return [parse_int(p) or 0 for p in parts]


@dataclass(slots=True)
class HAProxyLine(EnvelopeFields):
    """HAProxy request line with backend topology, timers and counters."""

    TAGS: ClassVar[frozenset[str]] = frozenset({"haproxy"})

    envelope: SyslogLine = field(default_factory=SyslogLine)
    frontend: str = ""
    backend: str = ""
    backend_host: str = ""
    backend_image_id: str = ""
    backend_container_id: str = ""
    status: str = ""
    length: int = 0
    client_request_time: int = 0
    connection_queue_time: int = 0
    tcp_connect_time: int = 0
    server_response_time: int = 0
    session_duration_time: int = 0
    active_connections: int = 0
    frontend_connections: int = 0
    backend_connections: int = 0
    server_connections: int = 0
    retries: int = 0
    server_queue: int = 0
    backend_queue: int = 0
    method: str = ""
    uri: str = ""
    _parsed: bool = field(default=False, init=False, repr=False, compare=False)

    def parse(self, raw: str) -> HAProxyLine:
        """Parse an haproxy line; raises UnsupportedTagError for other programs.

        Lines with fewer than 17 tokens keep every haproxy field at its zero value.
        """
        if self._parsed:
            return self
        self.envelope.parse(raw)
        if self.tag not in self.TAGS:
            raise UnsupportedTagError(self.tag, self.TAGS)

        fields = self.fields
        if len(fields) >= _MIN_FIELDS:
            self.frontend = fields[5]
            self._parse_backend(fields[6])

            times = _ints(fields[7], 5)
            if times is not None:
                (
                    self.client_request_time,
                    self.connection_queue_time,
                    self.tcp_connect_time,
                    self.server_response_time,
                    self.session_duration_time,
                ) = times

            self.status = fields[8]
            self.length = parse_int(fields[9]) or 0

            connections = _ints(fields[13], 5)
            if connections is not None:
                (
                    self.active_connections,
                    self.frontend_connections,
                    self.backend_connections,
                    self.server_connections,
                    self.retries,
                ) = connections

            queues = _ints(fields[14], 2)
            if queues is not None:
                self.server_queue, self.backend_queue = queues

            # Strip the opening quote of the request line.
            self.method = fields[15][1:]
            self.uri = fields[16]

        self._parsed = True
        return self

    def _parse_backend(self, raw: str) -> None:
        backend, sep, container = raw.partition("/")
        if not sep:
            return
        self.backend = backend
        parts = container.split(":")
        if len(parts) == 3:
            self.backend_host, self.backend_image_id, self.backend_container_id = parts

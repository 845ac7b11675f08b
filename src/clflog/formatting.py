# SPDX-License-Identifier: HRUL-1.0
# Copyright (c) 2026 Gabriel Galán Pelayo
"""
Apache Common Log Format lines.

See http://httpd.apache.org/docs/2.2/logs.html#common for the base format.
Each line carries one extension: the time to first byte in microseconds,
appended in parentheses.

    203.0.113.5 - - [16/Oct/2026:10:00:00 +0200] "GET /dowork HTTP/1.1" 200 6 (300000µs)

The ident field is always "-".
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from urllib.parse import urlsplit

from starlette.datastructures import Headers
from starlette.types import Scope

# strftime("%b") follows the process locale, CLF does not
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_MICROSECOND = timedelta(microseconds=1)


@dataclass(frozen=True)
class RequestContext:
    """Per-request facts needed to build the log line."""

    remote_addr: str
    username: str | None
    method: str
    uri: str
    proto: str
    timestamp: datetime

    @classmethod
    def from_scope(cls, scope: Scope, timestamp: datetime) -> "RequestContext":
        client = scope.get("client")
        remote_addr = client[0] if client else ""

        path = scope.get("raw_path") or scope.get("path", "").encode("utf-8")
        uri = path.decode("latin-1")
        query = scope.get("query_string", b"")
        if query:
            uri += "?" + query.decode("latin-1")

        username = None
        host = Headers(scope=scope).get("host")
        if host and "@" in host:
            # Servers and Starlette drop user-info, so parse the raw header
            try:
                username = urlsplit("//" + host).username
            except ValueError:
                # Malformed Host header, not our problem to report
                pass

        return cls(
            remote_addr=remote_addr,
            username=username,
            method=scope.get("method", "-"),
            uri=uri,
            proto=f"HTTP/{scope.get('http_version', '1.1')}",
            timestamp=timestamp,
        )


def strip_port(addr: str) -> str:
    """Removes a trailing :port from a remote address.

    Handles "host:port", "[v6]:port" and bare addresses (IPv4 or IPv6).
    """
    if not addr:
        return "-"
    if addr.startswith("["):
        end = addr.find("]")
        if end != -1:
            return addr[1:end]
    host, sep, port = addr.rpartition(":")
    if sep and ":" not in host and port.isdigit():
        return host
    return addr


def format_timestamp(ts: datetime) -> str:
    """Formats ts as DD/Mon/YYYY:HH:MM:SS ±HHMM."""
    offset = ts.strftime("%z") or "+0000"
    return (
        f"{ts.day:02d}/{_MONTHS[ts.month - 1]}/{ts.year:04d}:"
        f"{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d} {offset}"
    )


def duration_micros(duration: timedelta | None) -> int:
    if duration is None:
        return 0
    return duration // _MICROSECOND


def build_common_log_line(
    ctx: RequestContext,
    status: int,
    size: int,
    duration: timedelta | None,
) -> str:
    """Builds a log entry for one request, without the trailing newline.

    A status of 0 means the handler never set one, which HTTP servers send
    as 200. A duration of None means no body byte was ever written.
    """
    return '%s - %s [%s] "%s %s %s" %d %d (%dµs)' % (
        strip_port(ctx.remote_addr),
        ctx.username or "-",
        format_timestamp(ctx.timestamp),
        ctx.method,
        ctx.uri,
        ctx.proto,
        status or 200,
        size,
        duration_micros(duration),
    )

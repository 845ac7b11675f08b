# SPDX-License-Identifier: HRUL-1.0
# Copyright (c) 2026 Gabriel Galán Pelayo
"""
Access log middleware in Apache Common Log Format.

Wraps any ASGI application. For every HTTP request it writes exactly one
line to the configured sink once the application has returned, and, if a
stats sink is configured, one timing sample and one counter increment:

    stats.timing("<stat>", duration)
    stats.incr_by("<stat>.<status>", 1)

Handlers name their stat through the reserved response header (see
set_stat). The header is consumed here and never reaches the client.

Usage:
    app.add_middleware(LoggingMiddleware, out=sys.stdout.buffer, stats=MemoryStats())
"""

import io
import logging
import threading
from datetime import datetime, timedelta
from typing import Any, BinaryIO, TextIO

from starlette.types import ASGIApp, Receive, Scope, Send

from clflog.config import STAT_NAME_HEADER, config
from clflog.formatting import RequestContext, build_common_log_line
from clflog.stats import StatsSink
from clflog.tracker import ResponseTracker

logger = logging.getLogger("clflog")


def set_stat(response: Any, name: str, header: str | None = None) -> None:
    """Tags a response with the stat name used for timing and counters.

    Must be called before the response body starts. Accepts a Starlette
    Response or anything with a mutable ``headers`` mapping. ``header`` must
    match the middleware's ``stat_header`` when that one is not the default.
    """
    headers = getattr(response, "headers", response)
    headers[header or config.stat_header] = name


def stat_headers(name: str, header: str | None = None) -> list[tuple[bytes, bytes]]:
    """Raw ASGI header pair for applications that build messages by hand."""
    key = (header or config.stat_header).lower()
    return [(key.encode("latin-1"), name.encode("latin-1"))]


class LoggingMiddleware:
    """Logs every request to ``out`` and optionally emits stats."""

    def __init__(
        self,
        app: ASGIApp,
        out: BinaryIO | TextIO,
        stats: StatsSink | None = None,
        stat_header: str | None = None,
    ):
        self.app = app
        self.out = out
        self.stats = stats
        self.stat_header = stat_header or config.stat_header
        # The sink is shared by every request, one write per line under lock
        self._lock = threading.Lock()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        arrived = datetime.now().astimezone()
        tracker = ResponseTracker(send, receive, stat_header=self.stat_header)
        failed = False
        try:
            await self.app(scope, tracker.receive, tracker)
        except Exception:
            failed = True
            raise
        finally:
            status = tracker.status
            if failed and not tracker.status_set:
                # Nothing was sent; the server answers 500 on our behalf
                status = 500
            self._emit(RequestContext.from_scope(scope, arrived), tracker, status)

    def _emit(self, ctx: RequestContext, tracker: ResponseTracker, status: int) -> None:
        stat_name = tracker.stat_name
        line = build_common_log_line(ctx, status, tracker.size, tracker.duration)
        self._write_line(line)

        if self.stats is None:
            return
        # The counter is emitted even when timing fails
        try:
            self.stats.timing(stat_name, tracker.duration or timedelta(0))
        except Exception as e:
            logger.warning("stats timing failed for %r: %s", stat_name, e)
        try:
            self.stats.incr_by(f"{stat_name}.{status or 200}", 1)
        except Exception as e:
            logger.warning("stats counter failed for %r: %s", stat_name, e)

    def _write_line(self, line: str) -> None:
        data = line + "\n"
        payload = data if isinstance(self.out, io.TextIOBase) else data.encode("utf-8")
        with self._lock:
            try:
                self.out.write(payload)
            except (OSError, ValueError) as e:
                # Response already sent; the access log is best effort
                logger.warning("could not write access log line: %s", e)

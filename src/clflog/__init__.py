# SPDX-License-Identifier: HRUL-1.0
# Copyright (c) 2026 Gabriel Galán Pelayo
"""
clflog: Common Log Format access logging for ASGI applications.

Usage:
    from clflog import LoggingMiddleware, MemoryStats, set_stat

    app.add_middleware(LoggingMiddleware, out=sys.stdout.buffer, stats=MemoryStats())

    @app.get("/dowork")
    async def dowork():
        response = PlainTextResponse("Hello!")
        set_stat(response, "do.work")
        return response
"""

from clflog.middleware import STAT_NAME_HEADER, LoggingMiddleware, set_stat, stat_headers
from clflog.stats import MemoryStats, PrometheusStats, StatsSink
from clflog.tracker import ResponseTracker

__version__ = "0.1.0"

__all__ = [
    "STAT_NAME_HEADER",
    "LoggingMiddleware",
    "MemoryStats",
    "PrometheusStats",
    "ResponseTracker",
    "StatsSink",
    "set_stat",
    "stat_headers",
]

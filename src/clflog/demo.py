# SPDX-License-Identifier: HRUL-1.0
# Copyright (c) 2026 Gabriel Galán Pelayo
"""
Demo server: one tagged endpoint behind the access log middleware.

    python -m clflog.demo
    curl localhost:8080/dowork
"""

import asyncio

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from clflog.config import config
from clflog.middleware import LoggingMiddleware, set_stat
from clflog.stats import MemoryStats

stats = MemoryStats()

# Simulated work per /dowork request, in seconds
DOWORK_DELAY = 0.3


def create_app(out=None) -> FastAPI:
    app = FastAPI(title="clflog demo", version="0.1.0")
    app.add_middleware(
        LoggingMiddleware,
        out=out if out is not None else config.open_access_log(),
        stats=stats,
    )

    @app.get("/dowork")
    async def dowork():
        response = PlainTextResponse("Hello!")
        set_stat(response, "do.work")
        await asyncio.sleep(DOWORK_DELAY)
        return response

    @app.get("/stats")
    async def show_stats():
        return stats.snapshot()

    return app


def main(host: str | None = None, port: int | None = None):
    config.validate()
    uvicorn.run(
        create_app(),
        host=host or config.host,
        port=port or config.port,
        access_log=False,
        log_level="info",
    )


if __name__ == "__main__":
    main()

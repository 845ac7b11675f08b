# SPDX-License-Identifier: HRUL-1.0
# Copyright (c) 2026 Gabriel Galán Pelayo
"""
Response tracker: a transparent wrapper around the ASGI ``send`` callable.

The tracker forwards every message to the real sink and records, on the way:
- the status code of the last ``http.response.start`` the server accepted
- the number of body bytes actually forwarded
- the time from request start to the first body write
- the response headers, including the reserved stat header, which is
  removed from what the client receives

One tracker belongs to exactly one request and is never reused, so none of
its state needs locking.
"""

import asyncio
import logging
import time
from datetime import timedelta
from typing import Iterable

from starlette.datastructures import MutableHeaders
from starlette.requests import ClientDisconnect
from starlette.types import Message, Receive, Send

from clflog.config import STAT_NAME_HEADER
from clflog.exceptions import WriteError

logger = logging.getLogger("clflog")

RawHeaders = Iterable[tuple[bytes, bytes]]


class ResponseTracker:
    """Observes one response without altering it."""

    def __init__(
        self,
        send: Send,
        receive: Receive | None = None,
        start: float | None = None,
        stat_header: str = STAT_NAME_HEADER,
    ):
        self._send = send
        self._receive = receive
        self._stat_header = stat_header.lower().encode("latin-1")
        self._headers = MutableHeaders()
        self._disconnected = asyncio.Event() if receive is not None else None

        self.start = time.perf_counter() if start is None else start
        self.status = 0
        self.status_set = False
        self.size = 0
        self.duration: timedelta | None = None

    @property
    def headers(self) -> MutableHeaders:
        """Captured response headers, stat header included."""
        return self._headers

    @property
    def stat_name(self) -> str:
        return self._headers.get(self._stat_header.decode("latin-1"), "")

    async def __call__(self, message: Message) -> None:
        """ASGI send entry point."""
        kind = message["type"]
        if kind == "http.response.start":
            await self.write_header(
                message["status"],
                message.get("headers", ()),
                trailers=message.get("trailers", False),
            )
        elif kind == "http.response.body":
            await self.write(
                message.get("body", b""),
                more_body=message.get("more_body", False),
            )
        else:
            await self._send(message)

    async def write_header(
        self, status: int, headers: RawHeaders = (), trailers: bool = False
    ) -> None:
        raw = list(headers)
        message: Message = {
            "type": "http.response.start",
            "status": status,
            "headers": [(k, v) for k, v in raw if k.lower() != self._stat_header],
        }
        if trailers:
            message["trailers"] = True
        if self.status_set:
            logger.debug("superfluous response start: status=%d", status)

        # A start the server rejects never took effect, so it is not tracked
        await self._send(message)

        # MutableHeaders lookups expect lowercased names
        self._headers = MutableHeaders(raw=[(k.lower(), v) for k, v in raw])
        self.status = status
        self.status_set = True

    async def write(self, data: bytes, more_body: bool = False) -> int:
        """Forwards one body chunk and returns the number of bytes sent."""
        if self.duration is None:
            if not self.status_set:
                self.status = 200
            self.duration = timedelta(seconds=time.perf_counter() - self.start)

        try:
            await self._send(
                {"type": "http.response.body", "body": data, "more_body": more_body}
            )
        except (OSError, ClientDisconnect) as e:
            raise WriteError(len(data), str(e) or type(e).__name__) from e

        self.size += len(data)
        return len(data)

    async def receive(self) -> Message:
        """Proxies the real receive, noting client disconnects."""
        message = await self._receive()
        if message["type"] == "http.disconnect":
            self._disconnected.set()
        return message

    def close_notify(self) -> asyncio.Event | None:
        """Event set once the client goes away, or None when unsupported."""
        return self._disconnected

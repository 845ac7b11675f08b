"""
Global pytest configuration and shared fixtures.
"""

import io

import pytest


def make_scope(
    path: str = "/dowork",
    method: str = "GET",
    query: bytes = b"",
    client: tuple[str, int] | None = ("203.0.113.5", 54321),
    headers: list[tuple[bytes, bytes]] | None = None,
    http_version: str = "1.1",
) -> dict:
    """Builds a minimal ASGI HTTP scope."""
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": http_version,
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": query,
        "root_path": "",
        "headers": headers if headers is not None else [(b"host", b"example.com")],
        "client": client,
        "server": ("example.com", 80),
    }


class RecordingSend:
    """ASGI send that keeps every message it receives."""

    def __init__(self):
        self.messages = []

    async def __call__(self, message):
        self.messages.append(message)

    def of_type(self, kind):
        return [m for m in self.messages if m["type"] == kind]


class LineRecordingSink:
    """Log sink that keeps each write() call separately."""

    def __init__(self):
        self.writes = []

    def write(self, data):
        self.writes.append(data)
        return len(data)


@pytest.fixture
def scope():
    return make_scope()


@pytest.fixture
def send():
    return RecordingSend()


@pytest.fixture
def receive():
    async def _receive():
        return {"type": "http.request", "body": b"", "more_body": False}

    return _receive


@pytest.fixture
def log_sink():
    return io.BytesIO()


@pytest.fixture
def line_sink():
    return LineRecordingSink()

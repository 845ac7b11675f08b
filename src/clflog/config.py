# SPDX-License-Identifier: HRUL-1.0
# Copyright (c) 2026 Gabriel Galán Pelayo
"""Central clflog configuration."""

from dataclasses import dataclass, field
from typing import BinaryIO
import os
import sys

from clflog.exceptions import InvalidConfigError

STDOUT = "-"
STAT_NAME_HEADER = "X-Stat"


@dataclass
class ClfLogConfig:
    """Global settings, read from the environment at creation time."""

    # Reserved response header carrying the stat name
    stat_header: str = field(
        default_factory=lambda: os.environ.get("CLFLOG_STAT_HEADER", STAT_NAME_HEADER)
    )

    # Access log destination ("-" = stdout)
    access_log: str = field(
        default_factory=lambda: os.environ.get("CLFLOG_ACCESS_LOG", STDOUT)
    )

    # Demo server
    host: str = field(default_factory=lambda: os.environ.get("CLFLOG_HOST", "127.0.0.1"))
    port: int | str = field(default_factory=lambda: os.environ.get("CLFLOG_PORT", 8080))

    def validate(self):
        """Checks values that come from the environment as free text."""
        if not self.stat_header.strip():
            raise InvalidConfigError("stat_header", repr(self.stat_header))
        try:
            port = int(self.port)
        except (TypeError, ValueError):
            raise InvalidConfigError("port", str(self.port)) from None
        if not 0 < port < 65536:
            raise InvalidConfigError("port", str(self.port))
        self.port = port

    def open_access_log(self) -> BinaryIO:
        """Opens the access log sink in binary append mode."""
        if self.access_log == STDOUT:
            return sys.stdout.buffer
        return open(self.access_log, "ab")


# Global instance, validated by whoever serves with it
config = ClfLogConfig()

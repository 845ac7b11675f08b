# SPDX-License-Identifier: HRUL-1.0
# Copyright (c) 2026 Gabriel Galán Pelayo
"""
Exception hierarchy for clflog.

Only response-side failures are raised to the wrapped application. Failures
on the observability path (log sink, stats sink) never reach the client.
"""


class ClfLogError(Exception):
    """Base exception for all clflog errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n{self.details}"
        return self.message


# --- Response errors ---


class WriteError(ClfLogError, OSError):
    """The real response sink rejected a body write.

    Subclasses OSError so handlers that already catch connection errors
    keep working when wrapped by the logging middleware.
    """

    def __init__(self, size: int, reason: str):
        super().__init__(
            f"Could not write {size} bytes to the response",
            reason,
        )
        self.size = size
        self.reason = reason


# --- Configuration errors ---


class ConfigurationError(ClfLogError):
    """Configuration error."""

    pass


class InvalidConfigError(ConfigurationError):
    """Invalid configuration value."""

    def __init__(self, key: str, value: str):
        super().__init__("Configuration error", f"Invalid value for '{key}': {value}")
        self.key = key
        self.value = value

# SPDX-License-Identifier: HRUL-1.0
# Copyright (c) 2026 Gabriel Galán Pelayo
"""Tests for the exceptions module."""


class TestClfLogError:
    """Tests for the base exception."""

    def test_basic_message(self):
        """Message without details."""
        from clflog.exceptions import ClfLogError

        err = ClfLogError("Test error")
        assert str(err) == "Test error"
        assert err.message == "Test error"
        assert err.details is None

    def test_message_with_details(self):
        """Message with extra details."""
        from clflog.exceptions import ClfLogError

        err = ClfLogError("Test error", "Additional details")
        assert str(err) == "Test error\nAdditional details"
        assert err.details == "Additional details"


class TestWriteError:
    """Tests for WriteError."""

    def test_write_error_fields(self):
        from clflog.exceptions import WriteError

        err = WriteError(6, "Broken pipe")
        assert "6 bytes" in str(err)
        assert "Broken pipe" in str(err)
        assert err.size == 6
        assert err.reason == "Broken pipe"

    def test_write_error_is_oserror(self):
        """Handlers catching OSError also catch WriteError."""
        from clflog.exceptions import ClfLogError, WriteError

        err = WriteError(1, "reset")
        assert isinstance(err, OSError)
        assert isinstance(err, ClfLogError)


class TestConfigErrors:
    """Tests for configuration errors."""

    def test_invalid_config(self):
        from clflog.exceptions import ConfigurationError, InvalidConfigError

        err = InvalidConfigError("port", "abc")
        assert isinstance(err, ConfigurationError)
        assert "port" in str(err)
        assert "abc" in str(err)
        assert err.key == "port"
        assert err.value == "abc"

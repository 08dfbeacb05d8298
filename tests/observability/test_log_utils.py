"""
Unit tests for safe structured logging helpers.
"""

import logging

from cms_cloud.core.capability import Capability
from cms_cloud.core.exceptions import RemoteCallFailedError
from cms_cloud.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)

logger = logging.getLogger("tests.log_utils")


class TestSafeLogValue:
    """Test suite for safe_log_value."""

    def test_none(self):
        assert safe_log_value(None) == "-"

    def test_payloads_reduced_to_size(self):
        """Test file bodies and attribute maps are never logged verbatim."""
        assert safe_log_value(b"\x89PNG") == "<4 bytes>"
        assert safe_log_value({"email": "u@example.com"}) == "<1 keys>"
        assert safe_log_value(["a", "b"]) == "<2 items>"

    def test_enum_logs_value(self):
        assert safe_log_value(Capability.STORAGE) == "storage"

    def test_whitespace_collapsed(self):
        assert safe_log_value("line one\n  line two") == "line one line two"

    def test_long_value_truncated(self):
        assert safe_log_value("x" * 20, max_length=5) == "xxxxx...(+15)"


class TestLogWithContext:
    """Test suite for the context-rendering log helpers."""

    def test_context_rendered(self, caplog):
        with caplog.at_level(logging.INFO):
            log_with_context(logger, logging.INFO, "Uploaded", key="posts/r1/a.png")

        assert "Uploaded | key=posts/r1/a.png" in caplog.text
        assert caplog.records[-1].key == "posts/r1/a.png"

    def test_secrets_redacted(self, caplog):
        """Test credential-like keys never reach the log output."""
        with caplog.at_level(logging.INFO):
            log_with_context(
                logger,
                logging.INFO,
                "Auth",
                password="pw-value",
                client_secret="secret-value",
                access_token="token-value",
            )

        assert "pw-value" not in caplog.text
        assert "secret-value" not in caplog.text
        assert "token-value" not in caplog.text
        assert "password=***" in caplog.text

    def test_exception_context(self, caplog):
        error = RemoteCallFailedError("S3 put failed", operation="put")

        with caplog.at_level(logging.WARNING):
            log_exception_with_context(
                logger, "Upload failed", error, level=logging.WARNING, key="k"
            )

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.error_type == "RemoteCallFailedError"
        assert record.exc_info is None
        assert "error_msg=S3 put failed" in caplog.text

    def test_traceback_attached_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG):
            log_exception_with_context(logger, "Upload failed", ValueError("bad"))

        assert caplog.records[-1].exc_info is not None

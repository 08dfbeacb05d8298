"""
Logging utilities for safe structured logging.

Provides helpers that render context values safely and keep credentials
out of log output.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

from collections.abc import Mapping
from enum import Enum
import logging
from typing import Any

SENSITIVE_MARKERS = ("password", "secret", "token")


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Render a context value as one short log token.

    Payload-like values (bytes, collections) are reduced to their size so
    file contents and user attribute maps never reach the log. Enums log
    their value; whitespace is collapsed to keep ``key=value`` pairs on one
    line.

    Args:
        value: Context value
        max_length: Characters kept before the value is cut

    Returns:
        str: Log-safe token
    """
    if value is None:
        return "-"
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, Mapping):
        return f"<{len(value)} keys>"
    if isinstance(value, (list, tuple, set, frozenset)):
        return f"<{len(value)} items>"
    try:
        text = " ".join(str(value).split())
    except Exception as e:  # pylint: disable=broad-except
        return f"<unprintable {type(e).__name__}>"
    if len(text) > max_length:
        return f"{text[:max_length]}...(+{len(text) - max_length})"
    return text


def _safe_context(context: dict[str, Any]) -> dict[str, str]:
    safe = {}
    for key, val in context.items():
        if any(marker in key.lower() for marker in SENSITIVE_MARKERS):
            safe[key] = "***"
        else:
            safe[key] = safe_log_value(val)
    return safe


def _render(message: str, safe_context: dict[str, str]) -> str:
    if not safe_context:
        return message
    rendered = " ".join(f"{key}={val}" for key, val in safe_context.items())
    return f"{message} | {rendered}"


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """
    Log a message with structured context, safely converting all values.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Context dict with arbitrary key-value pairs
    """
    safe_context = _safe_context(context)
    logger.log(level, _render(message, safe_context), extra=safe_context)


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    level: int = logging.ERROR,
    **context,
) -> None:
    """
    Log a failure with its error type and message.

    Tracebacks are attached only at DEBUG verbosity; capability failures
    are expected operational events.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        level: Log level (ERROR by default, WARNING for degradation)
        **context: Additional context dict
    """
    safe_context = _safe_context(context)
    safe_context.update({
        "error_type": type(exc).__name__,
        "error_msg": safe_log_value(str(exc)),
    })
    logger.log(
        level,
        _render(message, safe_context),
        extra=safe_context,
        exc_info=exc if logger.isEnabledFor(logging.DEBUG) else None,
    )

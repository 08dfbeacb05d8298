"""
Observability module.

Provides logging configuration and safe structured logging helpers.
"""

from cms_cloud.observability.log_utils import log_exception_with_context, log_with_context
from cms_cloud.observability.logger import configure_logging

__all__ = [
    "configure_logging",
    "log_exception_with_context",
    "log_with_context",
]

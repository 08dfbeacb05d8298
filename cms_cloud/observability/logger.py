"""
Logger configuration.

Provides configured root logger for hosts that do not set up logging
themselves. Degraded capabilities are only visible through these logs.

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import sys

NOISY_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3")


def configure_logging(level: str | int = logging.INFO) -> None:
    """
    Configure Python logging with timestamp and structured format.

    Args:
        level: Root log level name or number
    """
    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    # Vendor SDK debug output would include request payloads
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

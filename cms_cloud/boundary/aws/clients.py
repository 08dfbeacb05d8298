"""
Shared boto3 client construction and error translation.

Each adapter builds its clients once from a dedicated session, with
per-client timeouts, and translates botocore failures into the layer's
exception hierarchy.

Dependencies: boto3, botocore
System role: Common plumbing for the AWS boundary adapters
"""

from collections.abc import Iterator
from contextlib import contextmanager
import logging
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from cms_cloud.core.exceptions import ConstructionFailedError, RemoteCallFailedError

logger = logging.getLogger(__name__)

# Per-attempt socket budgets: metadata/reads, single writes, large stream uploads
READ_TIMEOUT = 10
WRITE_TIMEOUT = 30
STREAM_TIMEOUT = 300

# Attempts per call including the first; worst case is
# MAX_ATTEMPTS * (connect + read timeout) plus retry backoff
MAX_ATTEMPTS = 2
RETRY_MODE = "standard"


def build_session(
    capability: str,
    region: str,
    access_key: str = "",
    secret_key: str = "",
) -> boto3.session.Session:
    """
    Create a boto3 session for one capability.

    Static credentials are used only when both halves are set; otherwise the
    default credential chain applies.

    Raises:
        ConstructionFailedError: Session could not be created
    """
    try:
        if access_key and secret_key:
            return boto3.session.Session(
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
            )
        return boto3.session.Session(region_name=region)
    except (BotoCoreError, ValueError) as e:
        raise ConstructionFailedError(
            capability, f"Failed to load AWS config for {capability}: {e}"
        ) from e


def build_client(
    session: Any,
    service: str,
    capability: str,
    region: str,
    timeout: int,
    endpoint_url: str | None = None,
    path_style: bool = False,
) -> Any:
    """
    Create a service client with a bounded connect/read timeout.

    Args:
        session: boto3 session
        service: Service name (s3, ses, cognito-idp)
        capability: Capability name for error context
        region: AWS region
        timeout: Seconds applied to connect and read on each attempt
        endpoint_url: Custom endpoint (S3-compatible stores)
        path_style: Force path-style bucket addressing

    Returns:
        botocore client

    Raises:
        ConstructionFailedError: Client could not be created
    """
    config_kwargs: dict[str, Any] = {
        "connect_timeout": timeout,
        "read_timeout": timeout,
        "retries": {"total_max_attempts": MAX_ATTEMPTS, "mode": RETRY_MODE},
    }
    if path_style:
        config_kwargs["s3"] = {"addressing_style": "path"}

    try:
        return session.client(
            service,
            region_name=region,
            endpoint_url=endpoint_url or None,
            config=Config(**config_kwargs),
        )
    except (BotoCoreError, ValueError) as e:
        raise ConstructionFailedError(
            capability, f"Failed to create {service} client: {e}"
        ) from e


def error_code(exc: ClientError) -> str:
    """Vendor error code of a ClientError ("" when absent)."""
    return str(exc.response.get("Error", {}).get("Code", ""))


@contextmanager
def remote_call(service: str, operation: str, **context: Any) -> Iterator[None]:
    """
    Translate botocore failures raised inside the block.

    Args:
        service: Human-readable service name for the message
        operation: Adapter operation name
        **context: Extra details attached to the raised error

    Raises:
        RemoteCallFailedError: Wrapping ClientError or BotoCoreError
    """
    try:
        yield
    except ClientError as e:
        raise RemoteCallFailedError(
            f"{service} {operation} failed: {e}",
            operation=operation,
            error_code=error_code(e),
            details=dict(context),
        ) from e
    except BotoCoreError as e:
        # Timeouts, connection and credential resolution errors
        raise RemoteCallFailedError(
            f"{service} {operation} failed: {e}",
            operation=operation,
            error_code=type(e).__name__,
            details=dict(context),
        ) from e


def close_clients(*clients: Any) -> None:
    """Release connection pools held by the given clients."""
    for client in clients:
        close = getattr(client, "close", None)
        if callable(close):
            close()

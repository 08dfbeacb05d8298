"""
S3 object storage adapter.

Stores record files under deterministic keys and exposes put/get/delete/
exists/copy plus offline public URL composition.

Dependencies: boto3, botocore
System role: Object storage capability backing the host's file hooks
"""

import logging
from typing import Any, BinaryIO

from botocore.exceptions import BotoCoreError, ClientError

from cms_cloud.boundary.aws.clients import (
    READ_TIMEOUT,
    STREAM_TIMEOUT,
    WRITE_TIMEOUT,
    build_client,
    build_session,
    close_clients,
    error_code,
    remote_call,
)
from cms_cloud.configs.capabilities import StorageConfig
from cms_cloud.core.exceptions import (
    ConfigInvalidError,
    ConstructionFailedError,
    ObjectNotFoundError,
    RemoteCallFailedError,
)
from cms_cloud.core.storage_keys import content_type_for

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class S3FileStorage:
    """S3 client for record file operations."""

    def __init__(self, config: StorageConfig, session: Any = None) -> None:
        """
        Initialize S3 clients for the configured bucket.

        Args:
            config: Storage configuration snapshot
            session: Optional boto3 session (built from config when omitted)

        Raises:
            ConstructionFailedError: Storage disabled or client setup failed
            ConfigInvalidError: Bucket or region missing
        """
        if not config.enabled:
            raise ConstructionFailedError("storage", "S3 is not enabled")
        missing = config.missing_fields()
        if missing:
            raise ConfigInvalidError("storage", missing)

        self._bucket = config.bucket
        self._region = config.region
        self._public_url = config.resolved_public_url.rstrip("/")

        if session is None:
            session = build_session(
                "storage", config.region, config.access_key, config.secret_key
            )

        client_options = {
            "endpoint_url": config.endpoint or None,
            "path_style": bool(config.endpoint),
        }
        self._read_client = build_client(
            session, "s3", "storage", config.region, READ_TIMEOUT, **client_options
        )
        self._write_client = build_client(
            session, "s3", "storage", config.region, WRITE_TIMEOUT, **client_options
        )
        self._stream_client = build_client(
            session, "s3", "storage", config.region, STREAM_TIMEOUT, **client_options
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def region(self) -> str:
        return self._region

    def put(self, data: bytes, key: str) -> None:
        """
        Upload bytes at ``key`` in a single PutObject call.

        Raises:
            RemoteCallFailedError: Upload failed or timed out
        """
        with remote_call("S3", "put", key=key):
            self._write_client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type_for(key),
            )
        logger.debug(f"{__name__}:put - Uploaded key={key} size={len(data)}")

    def put_stream(self, reader: BinaryIO, key: str) -> None:
        """
        Upload the full content of ``reader`` at ``key``.

        The stream is drained first so the object is written by a single
        PutObject call under the extended timeout.

        Raises:
            RemoteCallFailedError: Read or upload failed
        """
        try:
            data = reader.read()
        except OSError as e:
            raise RemoteCallFailedError(
                f"Failed to read data for {key}: {e}",
                operation="put_stream",
                details={"key": key},
            ) from e

        with remote_call("S3", "put_stream", key=key):
            self._stream_client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type_for(key),
            )
        logger.debug(f"{__name__}:put_stream - Uploaded key={key} size={len(data)}")

    def get(self, key: str) -> bytes:
        """
        Download an object's content.

        Raises:
            ObjectNotFoundError: Key does not exist
            RemoteCallFailedError: Any other failure
        """
        content, _ = self.get_with_content_type(key)
        return content

    def get_with_content_type(self, key: str) -> tuple[bytes, str]:
        """
        Download an object with the content type it was stored under.

        The type falls back to the key's extension when the object has none.

        Raises:
            ObjectNotFoundError: Key does not exist
            RemoteCallFailedError: Any other failure
        """
        try:
            response = self._read_client.get_object(Bucket=self._bucket, Key=key)
            content = response["Body"].read()
            return content, response.get("ContentType") or content_type_for(key)
        except ClientError as e:
            if error_code(e) in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(key) from e
            raise RemoteCallFailedError(
                f"S3 get failed: {e}", operation="get", error_code=error_code(e),
                details={"key": key},
            ) from e
        except BotoCoreError as e:
            raise RemoteCallFailedError(
                f"S3 get failed: {e}", operation="get", error_code=type(e).__name__,
                details={"key": key},
            ) from e

    def delete(self, key: str) -> None:
        """
        Delete an object. Deleting a missing key succeeds.

        Raises:
            RemoteCallFailedError: Delete failed for another reason
        """
        try:
            self._write_client.delete_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            if error_code(e) in _NOT_FOUND_CODES:
                logger.debug(f"{__name__}:delete - Key already absent key={key}")
                return
            raise RemoteCallFailedError(
                f"S3 delete failed: {e}", operation="delete", error_code=error_code(e),
                details={"key": key},
            ) from e
        except BotoCoreError as e:
            raise RemoteCallFailedError(
                f"S3 delete failed: {e}", operation="delete", error_code=type(e).__name__,
                details={"key": key},
            ) from e

    def exists(self, key: str) -> bool:
        """
        Check if an object exists.

        Returns:
            bool: True if present, False if the service reports not-found

        Raises:
            RemoteCallFailedError: Network, permission or other failure
        """
        try:
            self._read_client.head_object(Bucket=self._bucket, Key=key)
            return True
        except ClientError as e:
            if error_code(e) in _NOT_FOUND_CODES:
                return False
            raise RemoteCallFailedError(
                f"S3 exists failed: {e}", operation="exists", error_code=error_code(e),
                details={"key": key},
            ) from e
        except BotoCoreError as e:
            raise RemoteCallFailedError(
                f"S3 exists failed: {e}", operation="exists", error_code=type(e).__name__,
                details={"key": key},
            ) from e

    def copy(self, source_key: str, dest_key: str) -> None:
        """
        Server-side copy within the bucket.

        Raises:
            RemoteCallFailedError: Copy failed
        """
        with remote_call("S3", "copy", source_key=source_key, dest_key=dest_key):
            self._write_client.copy_object(
                Bucket=self._bucket,
                CopySource={"Bucket": self._bucket, "Key": source_key},
                Key=dest_key,
            )

    def public_url(self, key: str) -> str:
        """Public URL of ``key``; pure string composition."""
        return f"{self._public_url}/{key}"

    def close(self) -> None:
        close_clients(self._read_client, self._write_client, self._stream_client)

"""
Hook bindings for active capabilities.

Each binder closes over exactly the adapter handle it needs and registers
handlers on the hook registry. This is the only place where adapter errors
are swallowed: a failing handler logs and returns PASS_THROUGH so the host's
default path completes the request.

Dependencies: cms_cloud.core, cms_cloud.observability
System role: Fallback policy between host hooks and adapters
"""

import logging
from typing import Any

from cms_cloud.core.hooks import (
    AuthEvent,
    FileDownloadEvent,
    HookEvent,
    HookRegistry,
    HookResult,
    MailEvent,
    RecordEvent,
)
from cms_cloud.core.host import LocalFileSource, UserRecord, UserStore
from cms_cloud.core.storage_keys import storage_key
from cms_cloud.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)


def bind_storage_hooks(
    registry: HookRegistry,
    storage: Any,
    local_files: LocalFileSource | None,
) -> None:
    """
    Mirror record files to object storage and serve downloads from it.

    Args:
        registry: Hook registry to bind into
        storage: Active storage adapter
        local_files: Host's local file source; without it uploads are not bound
    """

    def upload_record_files(event: RecordEvent) -> HookResult:
        record = event.record
        for file_name in record.file_names():
            if not file_name:
                continue
            try:
                key = storage_key(record.collection_name, record.id, file_name)
                with local_files.open(record, file_name) as reader:
                    storage.put_stream(reader, key)
            except Exception as e:  # pylint: disable=broad-except
                log_exception_with_context(
                    logger,
                    f"{__name__}:upload_record_files - Failed to upload file to S3",
                    e,
                    collection=record.collection_name,
                    record_id=record.id,
                    file=file_name,
                )
                continue
            log_with_context(
                logger,
                logging.INFO,
                f"{__name__}:upload_record_files - Uploaded file to S3",
                file=file_name,
                key=key,
            )
        return HookResult.PASS_THROUGH

    def delete_record_files(event: RecordEvent) -> HookResult:
        record = event.record
        for file_name in record.file_names():
            if not file_name:
                continue
            try:
                key = storage_key(record.collection_name, record.id, file_name)
                storage.delete(key)
            except Exception as e:  # pylint: disable=broad-except
                log_exception_with_context(
                    logger,
                    f"{__name__}:delete_record_files - Failed to delete file from S3",
                    e,
                    collection=record.collection_name,
                    record_id=record.id,
                    file=file_name,
                )
                continue
            log_with_context(
                logger,
                logging.INFO,
                f"{__name__}:delete_record_files - Deleted file from S3",
                key=key,
            )
        return HookResult.PASS_THROUGH

    def serve_file_download(event: FileDownloadEvent) -> HookResult:
        record = event.record
        try:
            key = storage_key(record.collection_name, record.id, event.served_name)
            if not storage.exists(key):
                return HookResult.PASS_THROUGH
            content, content_type = storage.get_with_content_type(key)
        except Exception as e:  # pylint: disable=broad-except
            log_exception_with_context(
                logger,
                f"{__name__}:serve_file_download - Failed to serve file from S3, using local storage",
                e,
                level=logging.WARNING,
                collection=record.collection_name,
                record_id=record.id,
                file=event.served_name,
            )
            return HookResult.PASS_THROUGH

        event.content = content
        event.content_type = content_type
        return HookResult.HANDLED

    if local_files is not None:
        registry.bind(HookEvent.RECORD_CREATED, upload_record_files, "s3_upload_record_files")
    else:
        logger.warning(
            f"{__name__}:bind_storage_hooks - No local file source, new files will not be uploaded"
        )
    registry.bind(HookEvent.RECORD_DELETED, delete_record_files, "s3_delete_record_files")
    registry.bind(HookEvent.FILE_DOWNLOAD_REQUESTED, serve_file_download, "s3_serve_file_download")
    logger.info(f"{__name__}:bind_storage_hooks - S3 file hooks installed")


def bind_mail_hook(registry: HookRegistry, mailer: Any) -> None:
    """Route host mail through the mail adapter, falling back to the default mailer."""

    def send_mail(event: MailEvent) -> HookResult:
        try:
            mailer.send(event.message)
        except Exception as e:  # pylint: disable=broad-except
            log_exception_with_context(
                logger,
                f"{__name__}:send_mail - SES send failed, falling back to default mailer",
                e,
                level=logging.WARNING,
                subject=event.message.subject,
                recipients=len(event.message.to),
            )
            return HookResult.PASS_THROUGH
        return HookResult.HANDLED

    registry.bind(HookEvent.MAIL_SEND_REQUESTED, send_mail, "ses_send_mail")
    logger.info(f"{__name__}:bind_mail_hook - SES mailer hook installed")


def _find_or_create_user(users: UserStore, collection: str, email: str) -> UserRecord:
    record = users.find_by_email(collection, email)
    if record is not None:
        return record
    try:
        record = users.create(collection, email, verified=True)
    except Exception:
        # A concurrent request may have created it first
        record = users.find_by_email(collection, email)
        if record is None:
            raise
        return record
    record.set("emailVisibility", True)
    logger.info(f"{__name__}:_find_or_create_user - Created new user from Cognito: {email}")
    return record


def bind_identity_hook(
    registry: HookRegistry,
    bridge: Any,
    users: UserStore,
    collection: str = "users",
) -> None:
    """
    Authenticate ``collection`` logins against the identity provider first.

    On success the local user is looked up by email (or created, verified),
    the provider tokens are attached and the request is short-circuited. On
    any failure the host's local authentication runs instead.

    Args:
        registry: Hook registry to bind into
        bridge: Active identity adapter
        users: Host's user store
        collection: Auth collection whose requests are bridged
    """

    def authenticate_user(event: AuthEvent) -> HookResult:
        if event.collection != collection:
            return HookResult.PASS_THROUGH

        try:
            auth_result = bridge.authenticate(event.identity, event.password)
        except Exception as e:  # pylint: disable=broad-except
            log_exception_with_context(
                logger,
                f"{__name__}:authenticate_user - Cognito authentication failed, falling back to local auth",
                e,
                level=logging.WARNING,
                identity=event.identity,
            )
            return HookResult.PASS_THROUGH

        try:
            record = _find_or_create_user(users, collection, event.identity)
            for field_name, value in auth_result.token_fields().items():
                record.set(field_name, value)
            users.save(record)
        except Exception as e:  # pylint: disable=broad-except
            log_exception_with_context(
                logger,
                f"{__name__}:authenticate_user - Failed to sync local user, falling back to local auth",
                e,
                identity=event.identity,
            )
            return HookResult.PASS_THROUGH

        event.record = record
        logger.info(f"{__name__}:authenticate_user - User authenticated via Cognito: {event.identity}")
        return HookResult.HANDLED

    registry.bind(HookEvent.AUTH_REQUESTED, authenticate_user, "cognito_authenticate_user")
    logger.info(f"{__name__}:bind_identity_hook - Cognito authentication hook installed")

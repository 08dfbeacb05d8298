"""
SES mail transport adapter.

Translates a generic Message into a single SES SendEmail call.

Dependencies: boto3
System role: Mail capability backing the host's mail-send hook
"""

import logging
from typing import Any

from cms_cloud.boundary.aws.clients import (
    WRITE_TIMEOUT,
    build_client,
    build_session,
    close_clients,
    remote_call,
)
from cms_cloud.configs.capabilities import MailConfig
from cms_cloud.core.exceptions import ConfigInvalidError, ConstructionFailedError
from cms_cloud.models.message import Message

logger = logging.getLogger(__name__)

CHARSET = "UTF-8"


class SESMailer:
    """Send host emails through Amazon SES."""

    def __init__(self, config: MailConfig, session: Any = None) -> None:
        """
        Initialize SES client.

        Args:
            config: Mail configuration snapshot
            session: Optional boto3 session (built from config when omitted)

        Raises:
            ConstructionFailedError: Mail disabled or client setup failed
            ConfigInvalidError: Region or from-address missing
        """
        if not config.enabled:
            raise ConstructionFailedError("mail", "SES is not enabled")
        missing = config.missing_fields()
        if missing:
            raise ConfigInvalidError("mail", missing)

        self._from_address = config.from_address
        self._region = config.region

        if session is None:
            session = build_session("mail", config.region, config.access_key, config.secret_key)
        self._client = build_client(session, "ses", "mail", config.region, WRITE_TIMEOUT)

    @property
    def from_address(self) -> str:
        return self._from_address

    @property
    def region(self) -> str:
        return self._region

    def build_request(self, message: Message) -> dict[str, Any]:
        """
        Map a Message onto SendEmail parameters.

        Empty body parts and empty cc/bcc lists are omitted.

        Args:
            message: Outgoing message

        Returns:
            dict: Keyword arguments for ``send_email``
        """
        source = self._from_address
        if message.sender is not None and message.sender.address:
            source = message.sender.formatted()

        destination: dict[str, list[str]] = {
            "ToAddresses": [addr.address for addr in message.to],
        }
        if message.cc:
            destination["CcAddresses"] = [addr.address for addr in message.cc]
        if message.bcc:
            destination["BccAddresses"] = [addr.address for addr in message.bcc]

        body: dict[str, dict[str, str]] = {}
        if message.html:
            body["Html"] = {"Data": message.html, "Charset": CHARSET}
        if message.text:
            body["Text"] = {"Data": message.text, "Charset": CHARSET}

        return {
            "Source": source,
            "Destination": destination,
            "Message": {
                "Subject": {"Data": message.subject, "Charset": CHARSET},
                "Body": body,
            },
        }

    def send(self, message: Message) -> str:
        """
        Send a message.

        Returns:
            str: SES message ID

        Raises:
            RemoteCallFailedError: SES rejected the message or the call failed
        """
        request = self.build_request(message)
        with remote_call("SES", "send", subject=message.subject):
            response = self._client.send_email(**request)
        message_id = response.get("MessageId", "")
        logger.info(
            f"{__name__}:send - Sent email recipients={len(message.to)} message_id={message_id}"
        )
        return message_id

    def close(self) -> None:
        close_clients(self._client)

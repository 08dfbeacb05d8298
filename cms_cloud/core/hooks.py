"""
Host lifecycle hooks.

Handlers are registered per event kind at startup and run in registration
order. Each returns HANDLED (skip the host default), PASS_THROUGH (continue,
eventually running the host default) or FATAL (abort the request).

Dependencies: dataclasses, enum
System role: Explicit handler table replacing host callback registration
"""

from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Any

from cms_cloud.core.host import HostRecord, UserRecord
from cms_cloud.models.message import Message

logger = logging.getLogger(__name__)


class HookEvent(str, Enum):
    """Host extension points the layer can bind to."""

    RECORD_CREATED = "record_created"
    RECORD_DELETED = "record_deleted"
    FILE_DOWNLOAD_REQUESTED = "file_download_requested"
    MAIL_SEND_REQUESTED = "mail_send_requested"
    AUTH_REQUESTED = "auth_requested"


class HookResult(str, Enum):
    """Outcome of a single handler invocation."""

    HANDLED = "handled"
    PASS_THROUGH = "pass_through"
    FATAL = "fatal"


@dataclass
class RecordEvent:
    """Record created or deleted."""

    record: HostRecord


@dataclass
class FileDownloadEvent:
    """
    A client asked for one of a record's files.

    A handler that serves the file fills ``content`` and ``content_type``.
    """

    record: HostRecord
    served_name: str
    content: bytes | None = None
    content_type: str | None = None


@dataclass
class MailEvent:
    """The host wants to send an email."""

    message: Message


@dataclass
class AuthEvent:
    """
    Password authentication request against an auth collection.

    A handler that authenticates the user sets ``record``.
    """

    collection: str
    identity: str
    password: str = field(repr=False)
    record: UserRecord | None = None


Handler = Callable[[Any], HookResult]


class HookRegistry:
    """Table of event kind -> ordered handler list."""

    def __init__(self) -> None:
        self._handlers: dict[HookEvent, list[tuple[str, Handler]]] = defaultdict(list)

    def bind(self, event: HookEvent, handler: Handler, name: str | None = None) -> None:
        """
        Register a handler for an event kind.

        Args:
            event: Event kind
            handler: Callable receiving the event context
            name: Label used in logs (defaults to the handler's __name__)
        """
        event = HookEvent(event)
        label = name or getattr(handler, "__name__", repr(handler))
        self._handlers[event].append((label, handler))
        logger.debug(f"{__name__}:bind - Bound handler={label} event={event.value}")

    def handlers(self, event: HookEvent) -> tuple[Handler, ...]:
        return tuple(handler for _, handler in self._handlers.get(HookEvent(event), ()))

    def handler_names(self, event: HookEvent) -> tuple[str, ...]:
        return tuple(name for name, _ in self._handlers.get(HookEvent(event), ()))

    def is_bound(self, event: HookEvent) -> bool:
        return bool(self._handlers.get(HookEvent(event)))

    def dispatch(self, event: HookEvent, context: Any) -> HookResult:
        """
        Run handlers for ``event`` in order.

        Stops at the first HANDLED or FATAL result. When every handler passes
        through (or none is bound) the host runs its default behavior.

        Args:
            event: Event kind
            context: Event context handed to each handler

        Returns:
            HookResult: HANDLED, FATAL, or PASS_THROUGH

        Raises:
            TypeError: A handler returned something other than a HookResult
        """
        event = HookEvent(event)
        for name, handler in self._handlers.get(event, ()):
            result = handler(context)
            if not isinstance(result, HookResult):
                raise TypeError(
                    f"Handler {name} for {event.value} returned {result!r}, expected HookResult"
                )
            if result is not HookResult.PASS_THROUGH:
                logger.debug(
                    f"{__name__}:dispatch - event={event.value} handler={name} result={result.value}"
                )
                return result
        return HookResult.PASS_THROUGH

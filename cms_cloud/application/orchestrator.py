"""
Integration orchestrator.

Composition root of the capability layer: resolves configuration, constructs
the adapters whose flags are set, binds hooks for the ones that came up and
records a fixed state per capability.

Startup flow per capability:
    flag off                      -> DISABLED
    flag on, invalid config       -> FAILED_INIT (warning, local fallback)
    flag on, construction error   -> FAILED_INIT (warning, local fallback)
    flag on, constructed          -> ACTIVE, hooks bound

Dependencies: cms_cloud.configs, cms_cloud.boundary.aws, cms_cloud.application.bindings
System role: Startup wiring and degradation policy
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
import logging
from typing import Any, BinaryIO

from cms_cloud.application.bindings import (
    bind_identity_hook,
    bind_mail_hook,
    bind_storage_hooks,
)
from cms_cloud.boundary.aws import CognitoBridge, S3FileStorage, SESMailer
from cms_cloud.configs.capabilities import CapabilityValues
from cms_cloud.configs.settings import ResolvedCapabilities, resolve_capabilities
from cms_cloud.core.capability import Capability, CapabilityState, CapabilityStatus
from cms_cloud.core.exceptions import CapabilityUnavailableError, IntegrationException
from cms_cloud.core.hooks import HookRegistry
from cms_cloud.core.host import LocalFileSource, UserStore
from cms_cloud.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[Any], Any]

DEFAULT_FACTORIES: dict[Capability, AdapterFactory] = {
    Capability.STORAGE: S3FileStorage,
    Capability.MAIL: SESMailer,
    Capability.IDENTITY: CognitoBridge,
}

FALLBACKS = {
    Capability.STORAGE: "local storage",
    Capability.MAIL: "default mailer",
    Capability.IDENTITY: "local authentication",
}


@dataclass
class HostServices:
    """Host collaborators the hook bindings need."""

    local_files: LocalFileSource | None = None
    users: UserStore | None = None


def describe_config(capability: Capability, resolved: ResolvedCapabilities) -> str:
    """One-line, secret-free description of a capability's settings."""
    if capability is Capability.STORAGE:
        cfg = resolved.storage
        text = f"bucket={cfg.bucket}, region={cfg.region}"
        if cfg.endpoint:
            text += f", endpoint={cfg.endpoint}"
        return text
    if capability is Capability.MAIL:
        cfg = resolved.mail
        return f"region={cfg.region}, from={cfg.from_address}"
    cfg = resolved.identity
    return f"user_pool={cfg.user_pool_id}, region={cfg.region}"


def close_adapters(states: Iterable[CapabilityState]) -> None:
    """Close the clients of every active adapter in ``states``; close errors are logged."""
    for state in states:
        if not state.is_active:
            continue
        close = getattr(state.handle, "close", None)
        if not callable(close):
            continue
        try:
            close()
        except Exception as e:  # pylint: disable=broad-except
            log_exception_with_context(
                logger,
                f"{__name__}:close_adapters - Failed to close adapter",
                e,
                level=logging.WARNING,
                capability=state.capability.value,
            )


class Integration:
    """
    Result of startup: capability states plus the helpers the host may call.

    States never change after construction.
    """

    def __init__(
        self,
        resolved: ResolvedCapabilities,
        states: Mapping[Capability, CapabilityState],
        registry: HookRegistry,
    ) -> None:
        self._resolved = resolved
        self._states = dict(states)
        self._registry = registry
        self._closed = False

    @property
    def config(self) -> ResolvedCapabilities:
        return self._resolved

    @property
    def registry(self) -> HookRegistry:
        return self._registry

    def state(self, capability: Capability) -> CapabilityState:
        return self._states[Capability(capability)]

    def is_enabled(self, capability: Capability) -> bool:
        """True only when the capability is ACTIVE."""
        return self.state(capability).is_active

    def handle(self, capability: Capability) -> Any:
        """
        Adapter handle of an active capability.

        Raises:
            CapabilityUnavailableError: Capability is disabled or failed
        """
        state = self.state(capability)
        if not state.is_active:
            raise CapabilityUnavailableError(Capability(capability).value)
        return state.handle

    def public_url(self, key: str) -> str:
        """Storage public URL for ``key``, or ``key`` unchanged without storage."""
        state = self.state(Capability.STORAGE)
        if state.is_active:
            return state.handle.public_url(key)
        return key

    def upload(self, reader: BinaryIO, key: str) -> None:
        self.handle(Capability.STORAGE).put_stream(reader, key)

    def delete(self, key: str) -> None:
        self.handle(Capability.STORAGE).delete(key)

    def summarize(self) -> list[str]:
        """Status line per capability, safe to print or log."""
        lines = []
        for capability in Capability:
            state = self._states[capability]
            line = f"{capability.value}: {state.status.value}"
            if state.status is CapabilityStatus.ACTIVE:
                line += f" ({describe_config(capability, self._resolved)})"
            elif state.status is CapabilityStatus.FAILED_INIT:
                line += f" ({state.error}; using {FALLBACKS[capability]})"
            lines.append(line)
        return lines

    def shutdown(self) -> None:
        """Close the clients of every active adapter. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        close_adapters(self._states.values())


class IntegrationOrchestrator:
    """Build capability adapters and bind them to host hooks."""

    def __init__(
        self,
        registry: HookRegistry,
        host: HostServices | None = None,
        factories: Mapping[Capability, AdapterFactory] | None = None,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            registry: Hook registry owned by the host
            host: Host collaborators used by the bindings
            factories: Adapter constructors per capability (defaults to AWS)
        """
        self._registry = registry
        self._host = host or HostServices()
        self._factories = {**DEFAULT_FACTORIES, **(factories or {})}

    def setup(
        self,
        source: Mapping[str, str] | CapabilityValues | None = None,
        required: Iterable[Capability] = (),
    ) -> Integration:
        """
        Resolve configuration, construct adapters and bind hooks.

        Args:
            source: Settings mapping or parsed settings; None reads the environment
            required: Capabilities that must come up, otherwise setup raises

        Returns:
            Integration: Fixed capability states and host helpers

        Raises:
            ConfigInvalidError: A required capability is misconfigured
            IntegrationException: A required capability failed to construct
        """
        required = {Capability(capability) for capability in required}
        resolved = resolve_capabilities(source, required)

        states: dict[Capability, CapabilityState] = {}
        for capability in Capability:
            state = self._initialize(capability, resolved)
            if state.status is CapabilityStatus.FAILED_INIT and capability in required:
                close_adapters(states.values())
                raise state.error
            states[capability] = state

        for state in states.values():
            if state.is_active:
                self._bind(state, resolved)

        return Integration(resolved, states, self._registry)

    def _initialize(
        self, capability: Capability, resolved: ResolvedCapabilities
    ) -> CapabilityState:
        if not resolved.is_enabled(capability):
            logger.debug(f"{__name__}:_initialize - {capability.value} disabled")
            return CapabilityState.disabled(capability)

        fallback = FALLBACKS[capability]
        if capability in resolved.invalid:
            error = resolved.invalid[capability]
            log_exception_with_context(
                logger,
                f"{__name__}:_initialize - Invalid {capability.value} configuration, falling back to {fallback}",
                error,
                level=logging.WARNING,
                capability=capability.value,
            )
            return CapabilityState.failed(capability, error)

        try:
            handle = self._factories[capability](resolved.config_for(capability))
        except Exception as e:  # pylint: disable=broad-except
            log_exception_with_context(
                logger,
                f"{__name__}:_initialize - Failed to initialize {capability.value}, falling back to {fallback}",
                e,
                level=logging.WARNING,
                capability=capability.value,
            )
            if not isinstance(e, IntegrationException):
                e = IntegrationException(str(e), {"capability": capability.value})
            return CapabilityState.failed(capability, e)

        logger.info(
            f"{__name__}:_initialize - {capability.value} enabled: "
            f"{describe_config(capability, resolved)}"
        )
        return CapabilityState.active(capability, handle)

    def _bind(self, state: CapabilityState, resolved: ResolvedCapabilities) -> None:
        if state.capability is Capability.STORAGE:
            bind_storage_hooks(self._registry, state.handle, self._host.local_files)
        elif state.capability is Capability.MAIL:
            bind_mail_hook(self._registry, state.handle)
        elif state.capability is Capability.IDENTITY:
            if self._host.users is None:
                logger.warning(
                    f"{__name__}:_bind - No user store, Cognito authentication hook not installed"
                )
                return
            bind_identity_hook(
                self._registry,
                state.handle,
                self._host.users,
                resolved.identity.auth_collection,
            )


def setup_integrations(
    registry: HookRegistry,
    local_files: LocalFileSource | None = None,
    users: UserStore | None = None,
    source: Mapping[str, str] | CapabilityValues | None = None,
    required: Iterable[Capability] = (),
) -> Integration:
    """
    Wire all configured capabilities into ``registry``.

    Usage:
        registry = HookRegistry()
        integration = setup_integrations(registry, local_files=fs, users=store)
        ...
        integration.shutdown()
    """
    orchestrator = IntegrationOrchestrator(registry, HostServices(local_files, users))
    return orchestrator.setup(source, required)

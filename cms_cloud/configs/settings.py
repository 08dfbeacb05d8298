"""
Capability configuration resolver.

Turns a flat key/value source into frozen per-capability snapshots and
reports which enabled capabilities are unusable because of missing settings.

Dependencies: All config modules
System role: Central configuration resolver for the integration layer
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import lru_cache
import logging

from cms_cloud.configs.capabilities import (
    CapabilitySettings,
    CapabilityValues,
    IdentityConfig,
    MailConfig,
    StorageConfig,
)
from cms_cloud.core.capability import Capability
from cms_cloud.core.exceptions import ConfigInvalidError

logger = logging.getLogger(__name__)

CapabilityConfig = StorageConfig | MailConfig | IdentityConfig


@dataclass(frozen=True)
class ResolvedCapabilities:
    """Validated configuration snapshot for every capability."""

    storage: StorageConfig
    mail: MailConfig
    identity: IdentityConfig
    invalid: Mapping[Capability, ConfigInvalidError] = field(default_factory=dict)

    def config_for(self, capability: Capability) -> CapabilityConfig:
        return {
            Capability.STORAGE: self.storage,
            Capability.MAIL: self.mail,
            Capability.IDENTITY: self.identity,
        }[capability]

    def is_enabled(self, capability: Capability) -> bool:
        return self.config_for(capability).enabled

    def is_usable(self, capability: Capability) -> bool:
        """Enabled and passed validation."""
        return self.is_enabled(capability) and capability not in self.invalid


def load_capability_settings() -> CapabilitySettings:
    """Read capability settings from the process environment and .env file."""
    return CapabilitySettings()


def settings_from_mapping(source: Mapping[str, str]) -> CapabilityValues:
    """
    Build settings from an explicit key/value mapping.

    Keys are matched case-insensitively. The mapping is validated against
    CapabilityValues, which has no environment or .env source, so the result
    depends on the mapping alone.

    Args:
        source: Flat mapping of setting names to values

    Returns:
        CapabilityValues: Parsed values
    """
    return CapabilityValues.model_validate(
        {str(key).lower(): value for key, value in source.items()}
    )


def resolve_capabilities(
    source: Mapping[str, str] | CapabilityValues | None = None,
    required: Iterable[Capability] = (),
) -> ResolvedCapabilities:
    """
    Resolve and validate configuration for all capabilities.

    An enabled capability with missing mandatory settings is recorded in
    ``invalid`` and treated as unusable. It only becomes a hard error when the
    caller lists it in ``required``.

    Args:
        source: Mapping of settings, parsed values, or None to read the environment
        required: Capabilities whose configuration must be valid

    Returns:
        ResolvedCapabilities: Snapshots plus validation problems

    Raises:
        ConfigInvalidError: A required capability is disabled or misconfigured
    """
    if source is None:
        settings = load_capability_settings()
    elif isinstance(source, CapabilityValues):
        settings = source
    else:
        settings = settings_from_mapping(source)

    configs: dict[Capability, CapabilityConfig] = {
        Capability.STORAGE: StorageConfig.from_settings(settings),
        Capability.MAIL: MailConfig.from_settings(settings),
        Capability.IDENTITY: IdentityConfig.from_settings(settings),
    }

    invalid: dict[Capability, ConfigInvalidError] = {}
    for capability, config in configs.items():
        if not config.enabled:
            continue
        missing = config.missing_fields()
        if missing:
            invalid[capability] = ConfigInvalidError(capability.value, missing)

    for capability in required:
        capability = Capability(capability)
        if capability in invalid:
            raise invalid[capability]
        if not configs[capability].enabled:
            raise ConfigInvalidError(capability.value, ["enabled flag"])

    return ResolvedCapabilities(
        storage=configs[Capability.STORAGE],
        mail=configs[Capability.MAIL],
        identity=configs[Capability.IDENTITY],
        invalid=invalid,
    )


@lru_cache
def get_settings() -> CapabilitySettings:
    """
    Get capability settings singleton.

    Environment variables loaded once at startup.

    Returns:
        CapabilitySettings: Settings instance

    Usage:
        from cms_cloud.configs import get_settings
        settings = get_settings()
    """
    return load_capability_settings()

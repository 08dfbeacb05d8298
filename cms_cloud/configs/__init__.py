"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
Capability snapshots are frozen once resolved.
"""

from cms_cloud.configs.capabilities import (
    CapabilitySettings,
    CapabilityValues,
    IdentityConfig,
    MailConfig,
    StorageConfig,
)
from cms_cloud.configs.settings import (
    ResolvedCapabilities,
    get_settings,
    resolve_capabilities,
    settings_from_mapping,
)

__all__ = [
    "CapabilitySettings",
    "CapabilityValues",
    "IdentityConfig",
    "MailConfig",
    "ResolvedCapabilities",
    "StorageConfig",
    "get_settings",
    "resolve_capabilities",
    "settings_from_mapping",
]

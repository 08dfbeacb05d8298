"""
Pluggable cloud capabilities for a CMS backend.

Optional S3 storage, SES mail and Cognito identity attach to the host's
lifecycle hooks. Each capability is configured independently and degrades
to the host's local behavior when absent or failing.
"""

from cms_cloud.application.orchestrator import (
    HostServices,
    Integration,
    IntegrationOrchestrator,
    setup_integrations,
)
from cms_cloud.core.capability import Capability, CapabilityState, CapabilityStatus
from cms_cloud.core.hooks import HookEvent, HookRegistry, HookResult

__all__ = [
    "Capability",
    "CapabilityState",
    "CapabilityStatus",
    "HookEvent",
    "HookRegistry",
    "HookResult",
    "HostServices",
    "Integration",
    "IntegrationOrchestrator",
    "setup_integrations",
]

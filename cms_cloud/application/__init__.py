"""
Application layer.

Startup orchestration and the hook bindings that apply the fallback policy.
"""

from cms_cloud.application.orchestrator import (
    HostServices,
    Integration,
    IntegrationOrchestrator,
    setup_integrations,
)

__all__ = ["HostServices", "Integration", "IntegrationOrchestrator", "setup_integrations"]

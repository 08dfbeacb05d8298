"""
Capability identifiers and lifecycle state.

Each optional integration is tracked with an explicit state instead of a
nullable handle: DISABLED (flag off), FAILED_INIT (invalid config or client
construction failed) or ACTIVE (usable handle attached).

Dependencies: None (pure domain layer)
System role: Shared vocabulary for the resolver, orchestrator and bindings
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Capability(str, Enum):
    """Optional external integrations known to the layer."""

    STORAGE = "storage"
    MAIL = "mail"
    IDENTITY = "identity"


class CapabilityStatus(str, Enum):
    """Capability state, fixed for the lifetime of the process after startup."""

    DISABLED = "disabled"
    FAILED_INIT = "failed_init"
    ACTIVE = "active"


@dataclass(frozen=True)
class CapabilityState:
    """Tagged state of one capability; only ACTIVE carries a handle."""

    capability: Capability
    status: CapabilityStatus
    handle: Any = None
    error: Exception | None = None

    @classmethod
    def disabled(cls, capability: Capability) -> "CapabilityState":
        return cls(capability=capability, status=CapabilityStatus.DISABLED)

    @classmethod
    def failed(cls, capability: Capability, error: Exception) -> "CapabilityState":
        return cls(capability=capability, status=CapabilityStatus.FAILED_INIT, error=error)

    @classmethod
    def active(cls, capability: Capability, handle: Any) -> "CapabilityState":
        if handle is None:
            raise ValueError("active capability requires a handle")
        return cls(capability=capability, status=CapabilityStatus.ACTIVE, handle=handle)

    @property
    def is_active(self) -> bool:
        return self.status is CapabilityStatus.ACTIVE

# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Foundation - Core enums and request/result contracts
# PURPOSE: Define power vocabulary and the contracts that cross boundaries
# CREATED: 17 OCT 2026
# EXPORTS: PowerStatus, ToggleAction, ToggleOutcome, VmReference, ToggleRequest, ToggleResult
# DEPENDENCIES: enum, pydantic
# ============================================================================
"""
Base contracts for the VM power gateway.

These define the identity and request shapes that cross boundaries:
- HTTP (Azure Functions request bodies, camelCase)
- Provider (Azure Compute management API)
- Python (internal processing, snake_case)

Models are frozen: a request is built per call, validated and consumed,
never mutated or persisted.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.errors import ProviderError


# ============================================================================
# STATUS ENUMS
# ============================================================================

class PowerStatus(str, Enum):
    """
    Normalized VM power states exposed to callers.

    Transitions are owned by the control plane:
        STOPPED -> STARTING -> RUNNING -> STOPPING -> STOPPED
    """
    RUNNING = "running"
    STOPPED = "stopped"          # Includes deallocated
    STARTING = "starting"
    STOPPING = "stopping"
    UNKNOWN = "unknown"          # Absent or unrecognized raw state

    def is_transitional(self) -> bool:
        """Check if the machine is between stable states."""
        return self in (PowerStatus.STARTING, PowerStatus.STOPPING)


class ToggleAction(str, Enum):
    """Power transitions a caller may request."""
    START = "start"
    STOP = "stop"                # Always a deallocate, never a soft power-off


class ToggleOutcome(str, Enum):
    """Outcome of dispatching a toggle to the provider."""
    ACCEPTED_PENDING = "accepted_pending"
    FAILED = "failed"


# ============================================================================
# REQUEST CONTRACTS
# ============================================================================

class VmReference(BaseModel):
    """
    Identity of a target virtual machine.

    All three fields are required, non-empty strings. Whitespace-only
    values count as missing; any other value is forwarded unchanged.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    subscription_id: str = Field(..., alias="subscriptionId", min_length=1, strict=True)
    resource_group: str = Field(..., alias="resourceGroup", min_length=1, strict=True)
    vm_name: str = Field(..., alias="vmName", min_length=1, strict=True)

    @field_validator("subscription_id", "resource_group", "vm_name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    def log_fields(self) -> Dict[str, Any]:
        """Fields for log_context()."""
        return {
            "subscription_id": self.subscription_id,
            "resource_group": self.resource_group,
            "vm_name": self.vm_name,
        }

    def __str__(self) -> str:
        return f"{self.subscription_id}/{self.resource_group}/{self.vm_name}"


class ToggleRequest(BaseModel):
    """A VmReference plus the requested transition."""

    model_config = ConfigDict(frozen=True)

    vm: VmReference
    action: ToggleAction


# ============================================================================
# RESULT CONTRACTS
# ============================================================================

class ToggleResult(BaseModel):
    """
    Outcome of a toggle dispatch.

    ACCEPTED_PENDING only means the provider acknowledged the long-running
    operation. The final power state must be learned with a status query.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    outcome: ToggleOutcome
    vm: VmReference
    action: ToggleAction
    error: Optional[ProviderError] = None

    @property
    def accepted(self) -> bool:
        return self.outcome == ToggleOutcome.ACCEPTED_PENDING

    @classmethod
    def accepted_pending(cls, request: ToggleRequest) -> "ToggleResult":
        return cls(
            outcome=ToggleOutcome.ACCEPTED_PENDING,
            vm=request.vm,
            action=request.action,
        )

    @classmethod
    def failed(cls, request: ToggleRequest, error: ProviderError) -> "ToggleResult":
        return cls(
            outcome=ToggleOutcome.FAILED,
            vm=request.vm,
            action=request.action,
            error=error,
        )


__all__ = [
    "PowerStatus",
    "ToggleAction",
    "ToggleOutcome",
    "VmReference",
    "ToggleRequest",
    "ToggleResult",
]

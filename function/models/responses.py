# ============================================================================
# API RESPONSE MODELS
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Gateway - Response schemas
# PURPOSE: Pydantic V2 models for API responses
# CREATED: 17 OCT 2026
# ============================================================================
"""
API Response Models

Pydantic V2 models for API responses.
All models use V2 patterns: ConfigDict, model_validate, model_dump.

Body shapes are part of the public contract with the static front-end:
keep field names stable. Optional fields are dropped with
model_dump(exclude_none=True).
"""

from datetime import datetime, timezone
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.contracts import PowerStatus, ToggleAction


class VmStatusResponse(BaseModel):
    """Normalized power state of a VM (200)."""

    model_config = ConfigDict(
        use_enum_values=True,
        json_schema_extra={"example": {"status": "stopped"}},
    )

    status: PowerStatus = Field(..., description="Normalized power state")


class ToggleAcceptedResponse(BaseModel):
    """Toggle accepted by the control plane, not yet completed (202)."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"message": "VM start operation initiated"}}
    )

    message: str = Field(..., description="Human-readable acknowledgement")

    @classmethod
    def for_action(cls, action: ToggleAction) -> "ToggleAcceptedResponse":
        return cls(message=f"VM {action.value} operation initiated")


class ErrorResponse(BaseModel):
    """Standard error response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Failed to get VM status",
                "details": "The Resource 'Microsoft.Compute/virtualMachines/vm1' was not found.",
            }
        }
    )

    error: str = Field(..., description="Error message")
    details: Optional[str] = Field(default=None, description="Provider diagnostic, verbatim")


class HealthResponse(BaseModel):
    """Health check response."""

    model_config = ConfigDict()

    status: str = Field(default="healthy", description="Overall health status")
    service: str = Field(default="vm-power-gateway", description="Service name")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Check timestamp",
    )
    version: str = Field(..., description="Service version")
    checks: Dict[str, bool] = Field(
        default_factory=dict,
        description="Individual health check results",
    )


__all__ = [
    "VmStatusResponse",
    "ToggleAcceptedResponse",
    "ErrorResponse",
    "HealthResponse",
]

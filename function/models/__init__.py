# ============================================================================
# FUNCTION APP MODELS
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Gateway - Pydantic models for API
# PURPOSE: Response models for function app endpoints
# CREATED: 17 OCT 2026
# ============================================================================
"""
Function App Models

Pydantic V2 models for API responses. Request bodies are validated
against the core contracts (core.contracts) by services.validation.
"""

from function.models.responses import (
    VmStatusResponse,
    ToggleAcceptedResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    "VmStatusResponse",
    "ToggleAcceptedResponse",
    "ErrorResponse",
    "HealthResponse",
]

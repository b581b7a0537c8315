# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Core module initialization
# PURPOSE: Export core contracts and error taxonomy
# CREATED: 17 OCT 2026
# ============================================================================

from core.errors import (
    ErrorKind,
    ErrorCode,
    VmControlError,
    ValidationError,
    ProviderError,
    Cancelled,
)
from core.contracts import (
    PowerStatus,
    ToggleAction,
    ToggleOutcome,
    VmReference,
    ToggleRequest,
    ToggleResult,
)

__all__ = [
    # Enums
    "PowerStatus",
    "ToggleAction",
    "ToggleOutcome",
    "ErrorKind",
    "ErrorCode",
    # Contracts
    "VmReference",
    "ToggleRequest",
    "ToggleResult",
    # Errors
    "VmControlError",
    "ValidationError",
    "ProviderError",
    "Cancelled",
]

# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Core - Business logic layer
# PURPOSE: Power state reads and power toggles
# CREATED: 17 OCT 2026
# ============================================================================
"""
Services Module

Business logic for VM power control. Services depend on an injected
ComputeProvider and hold no state between requests.

Usage:
    from services import PowerStateReader, PowerToggleController

    reader = PowerStateReader(provider)
    status = await reader.get_status(vm)
"""

from .power_state import PowerStateReader, normalize_power_state
from .power_toggle import PowerToggleController
from .validation import (
    validate_vm_reference,
    validate_toggle_action,
    validate_toggle_request,
)

__all__ = [
    "PowerStateReader",
    "PowerToggleController",
    "normalize_power_state",
    "validate_vm_reference",
    "validate_toggle_action",
    "validate_toggle_request",
]

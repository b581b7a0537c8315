# ============================================================================
# POWER STATE READER
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Service - VM power state queries
# PURPOSE: Query instance view and normalize raw power states
# CREATED: 17 OCT 2026
# ============================================================================
"""
Power State Reader

Reads a VM's instance view from the control plane and reduces it to one
PowerStatus. Read-only.

Azure reports power state as a status code "PowerState/<state>" among
other codes (ProvisioningState/..., OSState/...). The first code with
that prefix wins. Normalization is total: anything unrecognized, or no
power code at all, is UNKNOWN.
"""

from typing import Dict, Iterable, Optional

from core.contracts import PowerStatus, VmReference
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from infrastructure.compute import POWER_STATE_PREFIX, ComputeProvider, invoke_provider
from services.validation import VmReferenceInput, validate_vm_reference

logger = get_logger(__name__, ComponentType.SERVICE)

DEFAULT_STATUS_TIMEOUT_SECONDS = 5.0

# Raw suffix (lowercase) -> normalized status
POWER_STATE_MAP: Dict[str, PowerStatus] = {
    "running": PowerStatus.RUNNING,
    "stopped": PowerStatus.STOPPED,
    "deallocated": PowerStatus.STOPPED,
    "starting": PowerStatus.STARTING,
    "stopping": PowerStatus.STOPPING,
}


def extract_power_code(codes: Optional[Iterable[Optional[str]]]) -> Optional[str]:
    """Return the first status code starting with "PowerState/", if any."""
    prefix = POWER_STATE_PREFIX.lower()
    for code in codes or []:
        if isinstance(code, str) and code.lower().startswith(prefix):
            return code
    return None


def normalize_power_state(raw: Optional[str]) -> PowerStatus:
    """
    Normalize a raw power state to PowerStatus.

    Accepts either a full code ("PowerState/deallocated") or a bare suffix
    ("deallocated"), case-insensitively. Never raises.
    """
    if not isinstance(raw, str):
        return PowerStatus.UNKNOWN
    value = raw.strip()
    if value.lower().startswith(POWER_STATE_PREFIX.lower()):
        value = value[len(POWER_STATE_PREFIX):]
    return POWER_STATE_MAP.get(value.lower(), PowerStatus.UNKNOWN)


class PowerStateReader:
    """
    Report the normalized power state of a VM.

    Usage:
        reader = PowerStateReader(provider, timeout=5.0)
        status = await reader.get_status({"subscriptionId": ..., ...})
    """

    def __init__(
        self,
        provider: ComputeProvider,
        timeout: Optional[float] = DEFAULT_STATUS_TIMEOUT_SECONDS,
    ):
        self._provider = provider
        self._timeout = timeout

    async def get_status(self, vm: VmReferenceInput) -> PowerStatus:
        """
        Query and normalize the power state of `vm`.

        Raises:
            ValidationError: incomplete reference (provider not called)
            ProviderError: instance-view query failed or timed out
            Cancelled: caller aborted before the provider answered
        """
        ref = validate_vm_reference(vm)

        with log_context(operation="vm_status", **ref.log_fields()):
            codes = await invoke_provider(
                "instance_view",
                lambda: self._provider.get_status_codes(ref),
                self._timeout,
            )
            raw = extract_power_code(codes)
            status = normalize_power_state(raw)

            if raw is None:
                logger.warning("Instance view has no PowerState code")
            elif status == PowerStatus.UNKNOWN:
                logger.warning(f"Unrecognized power state: {raw}")

            log_checkpoint("vm_status_read", {"raw": raw, "status": status.value})
            return status


__all__ = [
    "POWER_STATE_MAP",
    "DEFAULT_STATUS_TIMEOUT_SECONDS",
    "extract_power_code",
    "normalize_power_state",
    "PowerStateReader",
]

# ============================================================================
# POWER TOGGLE CONTROLLER
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Service - VM start/deallocate dispatch
# PURPOSE: Validate toggle requests and submit them to the control plane
# CREATED: 17 OCT 2026
# ============================================================================
"""
Power Toggle Controller

Validates a start/stop request and submits exactly one long-running
operation to the control plane:

    start -> begin_start
    stop  -> begin_deallocate   (releases compute billing; never a soft power-off)

The controller returns as soon as the provider accepts the operation. It
reports ACCEPTED_PENDING, never the final power state; callers poll
PowerStateReader for that.

No pre-check against the current power state and no local deduplication:
every valid request reaches the provider, which is idempotent for repeated
start/deallocate. Concurrent toggles for the same VM are ordered by the
provider, not here.
"""

from typing import Awaitable, Callable, Dict, Optional

from core.contracts import ToggleAction, ToggleRequest, ToggleResult
from core.errors import ProviderError
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from infrastructure.compute import ComputeProvider, invoke_provider
from services.validation import ToggleRequestInput, validate_toggle_request

logger = get_logger(__name__, ComponentType.SERVICE)

DEFAULT_TOGGLE_TIMEOUT_SECONDS = 10.0

# Action -> provider operation name
PROVIDER_OPERATIONS: Dict[ToggleAction, str] = {
    ToggleAction.START: "start",
    ToggleAction.STOP: "deallocate",
}


class PowerToggleController:
    """
    Submit start/stop requests for a VM.

    Usage:
        controller = PowerToggleController(provider, timeout=10.0)
        result = await controller.submit({"subscriptionId": ..., "action": "start"})
        if result.accepted:
            ...
    """

    def __init__(
        self,
        provider: ComputeProvider,
        timeout: Optional[float] = DEFAULT_TOGGLE_TIMEOUT_SECONDS,
    ):
        self._provider = provider
        self._timeout = timeout

    def _dispatcher(self, request: ToggleRequest) -> Callable[[], Awaitable[None]]:
        vm = request.vm
        if request.action == ToggleAction.START:
            return lambda: self._provider.begin_start(vm)
        return lambda: self._provider.begin_deallocate(vm)

    async def submit(self, request: ToggleRequestInput) -> ToggleResult:
        """
        Validate `request` and dispatch it to the provider.

        Returns:
            ToggleResult ACCEPTED_PENDING if the provider accepted the
            operation, FAILED carrying the ProviderError otherwise.

        Raises:
            ValidationError: malformed request (provider not called)
            Cancelled: caller aborted before the provider answered
        """
        toggle = validate_toggle_request(request)
        operation = PROVIDER_OPERATIONS[toggle.action]

        with log_context(
            operation="vm_toggle",
            action=toggle.action.value,
            **toggle.vm.log_fields(),
        ):
            logger.info(f"Dispatching {operation} for {toggle.vm}")
            try:
                await invoke_provider(operation, self._dispatcher(toggle), self._timeout)
            except ProviderError as e:
                logger.error(f"Provider did not accept {operation}: {e.code.value}: {e.details}")
                return ToggleResult.failed(toggle, e)

            log_checkpoint("vm_toggle_accepted", {"operation": operation})
            return ToggleResult.accepted_pending(toggle)


__all__ = [
    "DEFAULT_TOGGLE_TIMEOUT_SECONDS",
    "PROVIDER_OPERATIONS",
    "PowerToggleController",
]

# ============================================================================
# COMPUTE PROVIDER INFRASTRUCTURE
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Infrastructure - Azure Compute control plane access
# PURPOSE: Instance view queries and start/deallocate dispatch
# CREATED: 17 OCT 2026
# ============================================================================
"""
Compute Provider Infrastructure

The external control plane, seen through a small injectable capability:

- ComputeProvider: protocol the services depend on (stubbed in tests)
- AzureComputeProvider: implementation over azure-mgmt-compute (async)
- classify_provider_error: pure mapping of SDK exceptions to ProviderError
- invoke_provider: bounded, cancellable call wrapper used by the services

Start and deallocate are long-running operations. The provider methods
return once Azure has accepted the operation (the initial request of the
LRO succeeded); they never wait on the poller.

The SDK client is built with retries disabled. Throttling and transient
failures are reported to the caller as retryable ProviderErrors instead
of being retried here, so provider-side incidents are not amplified.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, TypeVar

from azure.core.exceptions import (
    AzureError,
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
    ServiceRequestError,
    ServiceRequestTimeoutError,
    ServiceResponseError,
    ServiceResponseTimeoutError,
)
from azure.mgmt.compute.aio import ComputeManagementClient

from core.contracts import VmReference
from core.errors import Cancelled, ErrorCode, ProviderError

logger = logging.getLogger(__name__)

T = TypeVar("T")

POWER_STATE_PREFIX = "PowerState/"


# ============================================================================
# PROVIDER CAPABILITY
# ============================================================================

class ComputeProvider(Protocol):
    """What the power services need from the control plane."""

    async def get_status_codes(self, vm: VmReference) -> List[str]:
        """Return instance-view status codes in provider order."""
        ...

    async def begin_start(self, vm: VmReference) -> None:
        """Submit a start operation; return once accepted."""
        ...

    async def begin_deallocate(self, vm: VmReference) -> None:
        """Submit a deallocate operation; return once accepted."""
        ...


# ============================================================================
# AZURE IMPLEMENTATION
# ============================================================================

def _default_client_factory(credential: Any, subscription_id: str) -> ComputeManagementClient:
    return ComputeManagementClient(
        credential=credential,
        subscription_id=subscription_id,
        retry_total=0,
    )


class AzureComputeProvider:
    """
    ComputeProvider over azure.mgmt.compute.aio.ComputeManagementClient.

    One management client per subscription, created lazily and closed
    with the provider. Intended to live for a single invocation:

        async with AzureComputeProvider(credential) as provider:
            codes = await provider.get_status_codes(vm)

    Pass `credential_factory` instead of `credential` to defer building the
    credential to the first provider call, so a credential failure surfaces
    as a ProviderError from that call.
    """

    def __init__(
        self,
        credential: Any = None,
        client_factory: Optional[Callable[[Any, str], Any]] = None,
        credential_factory: Optional[Callable[[], Any]] = None,
    ):
        if credential is None and credential_factory is None:
            raise ValueError("credential or credential_factory is required")
        self._credential = credential
        self._credential_factory = credential_factory
        self._client_factory = client_factory or _default_client_factory
        self._clients: Dict[str, Any] = {}

    def _client(self, subscription_id: str):
        if subscription_id not in self._clients:
            if self._credential is None:
                self._credential = self._credential_factory()
            self._clients[subscription_id] = self._client_factory(self._credential, subscription_id)
        return self._clients[subscription_id]

    async def get_status_codes(self, vm: VmReference) -> List[str]:
        view = await self._client(vm.subscription_id).virtual_machines.instance_view(
            vm.resource_group, vm.vm_name
        )
        return [status.code for status in (view.statuses or []) if status.code]

    async def begin_start(self, vm: VmReference) -> None:
        await self._client(vm.subscription_id).virtual_machines.begin_start(
            vm.resource_group, vm.vm_name
        )
        logger.debug(f"Start accepted for {vm}")

    async def begin_deallocate(self, vm: VmReference) -> None:
        await self._client(vm.subscription_id).virtual_machines.begin_deallocate(
            vm.resource_group, vm.vm_name
        )
        logger.debug(f"Deallocate accepted for {vm}")

    async def close(self) -> None:
        """Close every management client. Close failures are logged, not raised."""
        clients, self._clients = self._clients, {}
        for subscription_id, client in clients.items():
            try:
                await client.close()
            except Exception as e:
                logger.warning(f"Failed to close compute client for {subscription_id}: {e}")

    async def __aenter__(self) -> "AzureComputeProvider":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


# ============================================================================
# ERROR CLASSIFICATION
# ============================================================================

def _provider_message(exc: BaseException) -> str:
    """Provider diagnostic, verbatim where the SDK exposes one."""
    if isinstance(exc, AzureError) and exc.message:
        return str(exc.message)
    text = str(exc)
    return text or type(exc).__name__


def classify_provider_error(
    exc: BaseException,
    operation: str,
    timeout: Optional[float] = None,
) -> ProviderError:
    """
    Map an exception raised by a provider call to a ProviderError.

    Pure: no logging, no I/O. Subclass checks run before their bases
    (ResourceNotFoundError is an HttpResponseError, timeouts are
    ServiceRequestErrors).

    Args:
        exc: Exception raised by the provider call
        operation: Provider operation name (instance_view, start, deallocate)
        timeout: Bound that was applied, for timeout diagnostics
    """
    if isinstance(exc, ProviderError):
        return exc

    if isinstance(exc, asyncio.TimeoutError) and not isinstance(exc, AzureError):
        bound = f" after {timeout:g}s" if timeout is not None else ""
        return ProviderError(
            f"Provider {operation} timed out",
            ErrorCode.TIMEOUT,
            details=f"{operation} did not respond{bound}",
            retryable=True,
        )

    message = _provider_message(exc)
    status_code = getattr(exc, "status_code", None)

    if isinstance(exc, ClientAuthenticationError):
        return ProviderError(
            f"Provider rejected credentials for {operation}",
            ErrorCode.AUTH_FAILED,
            details=message,
            status_code=status_code,
        )

    if isinstance(exc, ResourceNotFoundError):
        return ProviderError(
            f"Resource not found during {operation}",
            ErrorCode.NOT_FOUND,
            details=message,
            status_code=status_code,
        )

    if isinstance(exc, HttpResponseError):
        if status_code == 429:
            return ProviderError(
                f"Provider throttled {operation}",
                ErrorCode.THROTTLED,
                details=message,
                retryable=True,
                status_code=status_code,
            )
        if status_code in (401, 403):
            return ProviderError(
                f"Provider rejected credentials for {operation}",
                ErrorCode.AUTH_FAILED,
                details=message,
                status_code=status_code,
            )
        return ProviderError(
            f"Provider rejected {operation}",
            ErrorCode.REJECTED,
            details=message,
            retryable=bool(status_code and status_code >= 500),
            status_code=status_code,
        )

    if isinstance(exc, (ServiceRequestTimeoutError, ServiceResponseTimeoutError)):
        return ProviderError(
            f"Provider {operation} timed out",
            ErrorCode.TIMEOUT,
            details=message,
            retryable=True,
        )

    if isinstance(exc, (ServiceRequestError, ServiceResponseError)):
        return ProviderError(
            f"Provider unreachable during {operation}",
            ErrorCode.NETWORK,
            details=message,
            retryable=True,
        )

    return ProviderError(
        f"Provider {operation} failed",
        ErrorCode.PROVIDER_ERROR,
        details=message,
    )


# ============================================================================
# BOUNDED CALLS
# ============================================================================

async def invoke_provider(
    operation: str,
    call: Callable[[], Awaitable[T]],
    timeout: Optional[float],
) -> T:
    """
    Run one provider call with a timeout and error classification.

    Raises:
        ProviderError: the call failed or exceeded `timeout`
        Cancelled: the awaiting task was cancelled mid-flight
    """
    try:
        return await asyncio.wait_for(call(), timeout=timeout)
    except (Cancelled, ProviderError):
        raise
    except asyncio.CancelledError:
        logger.warning(f"Provider {operation} cancelled by caller")
        raise Cancelled(operation) from None
    except Exception as e:
        error = classify_provider_error(e, operation, timeout)
        logger.error(
            f"Provider {operation} failed: {error.code.value}: {error.details}",
            extra={"extra": error.to_dict()},
        )
        raise error from e


__all__ = [
    "POWER_STATE_PREFIX",
    "ComputeProvider",
    "AzureComputeProvider",
    "classify_provider_error",
    "invoke_provider",
]

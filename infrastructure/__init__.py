# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Infrastructure - Azure Compute access and credentials
# PURPOSE: Control plane adapters used by the power services
# CREATED: 17 OCT 2026
# ============================================================================
"""
Infrastructure module for the VM power gateway.

Provides:
- ComputeProvider: capability protocol the services depend on
- AzureComputeProvider: azure-mgmt-compute implementation
- invoke_provider: bounded provider call with error classification
- get_azure_credential: process-wide Azure Identity credential

Usage:
    from infrastructure import AzureComputeProvider, get_azure_credential

    async with AzureComputeProvider(get_azure_credential()) as provider:
        codes = await provider.get_status_codes(vm)
"""

from infrastructure.compute import (
    POWER_STATE_PREFIX,
    ComputeProvider,
    AzureComputeProvider,
    classify_provider_error,
    invoke_provider,
)
from infrastructure.auth import (
    get_azure_credential,
    get_credential_status,
)

__all__ = [
    # Compute
    'POWER_STATE_PREFIX',
    'ComputeProvider',
    'AzureComputeProvider',
    'classify_provider_error',
    'invoke_provider',
    # Auth
    'get_azure_credential',
    'get_credential_status',
]

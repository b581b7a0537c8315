# ============================================================================
# AUTHENTICATION MODULE
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# PURPOSE: Azure authentication for the Compute control plane
# CREATED: 17 OCT 2026
# ============================================================================
"""
Authentication module for the VM power gateway.

Provides Azure Identity credentials (Managed Identity in Azure,
DefaultAzureCredential locally) for the Compute management API.

Caller authentication (function keys) is enforced by the Azure Functions
host, not here.

Usage:
    from infrastructure.auth import get_azure_credential

    credential = get_azure_credential()
"""

from infrastructure.auth.azure_credential import (
    build_azure_credential,
    get_azure_credential,
    get_credential_status,
    reset_credentials,
)

__all__ = [
    'build_azure_credential',
    'get_azure_credential',
    'get_credential_status',
    'reset_credentials',
]

# ============================================================================
# AZURE CREDENTIAL
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# PURPOSE: Managed Identity credential for the Azure Compute control plane
# CREATED: 17 OCT 2026
# ============================================================================
"""
Azure credential construction for the VM power gateway.

The credential is a supplied capability: it is built once per worker
process from configuration and injected into AzureComputeProvider. No
token is acquired here; the Azure SDK requests one on the first call.

Credential Selection:
--------------------
AZURE_CLIENT_ID set   -> ManagedIdentityCredential (user-assigned MI)
AZURE_CLIENT_ID unset -> DefaultAzureCredential (system MI, env vars, az login)

The identity needs "Virtual Machine Contributor" (or a custom role with
read, start and deallocate) on the target resource groups.

Usage:
------
```python
from infrastructure.auth import get_azure_credential

credential = get_azure_credential()
```
"""

import logging
import threading
from typing import Any, Dict, Optional

from azure.identity.aio import DefaultAzureCredential, ManagedIdentityCredential

logger = logging.getLogger(__name__)

# One credential per client id for the life of the worker process
_credentials: Dict[str, Any] = {}
_credentials_lock = threading.Lock()

_DEFAULT_KEY = "default"


def build_azure_credential(client_id: Optional[str] = None):
    """
    Construct a new async Azure credential.

    Args:
        client_id: User-assigned managed identity client ID, or None for
            DefaultAzureCredential.

    Returns:
        An azure.identity.aio credential.
    """
    if client_id:
        logger.info(f"Using user-assigned Managed Identity: {client_id[:8]}...")
        return ManagedIdentityCredential(client_id=client_id)

    logger.info("Using DefaultAzureCredential (system MI, environment or az login)")
    return DefaultAzureCredential()


def get_azure_credential(client_id: Optional[str] = None):
    """
    Get the process-wide credential for a client id, building it on first use.

    Args:
        client_id: Optional user-assigned managed identity client ID. When
            omitted, AZURE_CLIENT_ID from the function configuration is used.
    """
    if client_id is None:
        from function.config import get_config
        client_id = get_config().azure_client_id

    key = client_id or _DEFAULT_KEY
    with _credentials_lock:
        if key not in _credentials:
            _credentials[key] = build_azure_credential(client_id)
        return _credentials[key]


def get_credential_status() -> dict:
    """
    Get credential status for health checks.

    Returns:
        Dict describing which credential types have been built.
    """
    with _credentials_lock:
        return {
            "auth_type": "managed_identity" if any(k != _DEFAULT_KEY for k in _credentials) else "default",
            "credentials_built": len(_credentials),
        }


def reset_credentials() -> None:
    """Forget cached credentials (for testing)."""
    with _credentials_lock:
        _credentials.clear()


__all__ = [
    "build_azure_credential",
    "get_azure_credential",
    "get_credential_status",
    "reset_credentials",
]

# ============================================================================
# VM BLUEPRINT
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Gateway - VM power endpoints
# PURPOSE: HTTP endpoints for VM power state queries and start/stop toggles
# CREATED: 17 OCT 2026
# ============================================================================
"""
VM Blueprint

VM power endpoints (function key required):
- POST /api/vm/status - Normalized power state of a VM
- POST /api/vm/toggle - Start or deallocate a VM (202, accepted not completed)
- GET  /api/vm/health - Gateway health check

Keyless requests are rejected by the Functions host (AuthLevel.FUNCTION)
before these handlers run.

Route functions only build the provider and log context; the request
handling lives in handle_vm_status() and handle_vm_toggle(), which take
the provider as an argument.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

import azure.functions as func

from core.errors import Cancelled, ProviderError, ValidationError
from core.logging import log_context
from function.config import get_config
from function.http import (
    STATUS_FAILURE_TITLE,
    json_response,
    error_response,
    parse_json_body,
    status_response,
    toggle_accepted_response,
    toggle_failure_title,
    unexpected_error_response,
)
from function.models.responses import HealthResponse
from infrastructure.compute import AzureComputeProvider, ComputeProvider
from services.power_state import PowerStateReader
from services.power_toggle import PowerToggleController
from services.validation import validate_toggle_request

logger = logging.getLogger(__name__)
vm_bp = func.Blueprint()


@asynccontextmanager
async def _azure_provider() -> AsyncIterator[ComputeProvider]:
    """
    Per-invocation Azure provider over the process-wide credential.

    The credential is resolved on the first provider call, inside the
    handlers' error mapping.
    """
    from infrastructure.auth import get_azure_credential

    async with AzureComputeProvider(credential_factory=get_azure_credential) as provider:
        yield provider


def _invocation_id(context: Optional[func.Context]) -> Optional[str]:
    return getattr(context, "invocation_id", None) if context is not None else None


# ============================================================================
# HANDLERS
# ============================================================================

async def handle_vm_status(
    req: func.HttpRequest,
    provider: ComputeProvider,
    timeout: Optional[float] = None,
) -> func.HttpResponse:
    """
    Report the normalized power state of a VM.

    Body: {subscriptionId, resourceGroup, vmName}
    Returns: 200 {status}, 400 missing parameters, 500 provider failure
    """
    reader = PowerStateReader(provider, timeout=timeout)

    try:
        status = await reader.get_status(parse_json_body(req))
    except ValidationError as e:
        logger.warning(f"Invalid status request: {e.details}")
        return error_response(e)
    except ProviderError as e:
        # Already logged by invoke_provider
        return error_response(e, STATUS_FAILURE_TITLE)
    except Cancelled:
        logger.warning("Status request cancelled by caller")
        raise
    except Exception as e:
        logger.exception(f"Unexpected error reading VM status: {e}")
        return unexpected_error_response(e, STATUS_FAILURE_TITLE)

    return status_response(status)


async def handle_vm_toggle(
    req: func.HttpRequest,
    provider: ComputeProvider,
    timeout: Optional[float] = None,
) -> func.HttpResponse:
    """
    Start or deallocate a VM.

    Body: {subscriptionId, resourceGroup, vmName, action: "start"|"stop"}
    Returns: 202 {message}, 400 missing parameters / invalid action,
        500 provider failure
    """
    try:
        toggle = validate_toggle_request(parse_json_body(req))
    except ValidationError as e:
        logger.warning(f"Invalid toggle request: {e.code.value}: {e.details}")
        return error_response(e)

    failure_title = toggle_failure_title(toggle.action)
    controller = PowerToggleController(provider, timeout=timeout)

    try:
        result = await controller.submit(toggle)
    except Cancelled:
        logger.warning("Toggle request cancelled by caller")
        raise
    except Exception as e:
        logger.exception(f"Unexpected error dispatching toggle: {e}")
        return unexpected_error_response(e, failure_title)

    if not result.accepted:
        return error_response(result.error, failure_title)

    return toggle_accepted_response(result.action)


# ============================================================================
# ROUTES
# ============================================================================

@vm_bp.route(route="vm/status", methods=["POST"])
async def vm_status(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """
    Get VM power state.

    POST /api/vm/status
    Body: {subscriptionId, resourceGroup, vmName}
    """
    config = get_config()
    with log_context(invocation_id=_invocation_id(context), component="api"):
        async with _azure_provider() as provider:
            return await handle_vm_status(req, provider, timeout=config.status_timeout_seconds)


@vm_bp.route(route="vm/toggle", methods=["POST"])
async def vm_toggle(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """
    Start or stop (deallocate) a VM.

    POST /api/vm/toggle
    Body: {subscriptionId, resourceGroup, vmName, action}
    Returns: 202 Accepted once Azure accepts the operation
    """
    config = get_config()
    with log_context(invocation_id=_invocation_id(context), component="api"):
        async with _azure_provider() as provider:
            return await handle_vm_toggle(req, provider, timeout=config.toggle_timeout_seconds)


@vm_bp.route(route="vm/health", methods=["GET"])
def vm_health(req: func.HttpRequest) -> func.HttpResponse:
    """
    Gateway health check.

    GET /api/vm/health
    Returns: HealthResponse
    """
    from infrastructure.auth import get_credential_status

    config = get_config()

    checks = {
        "config_valid": not config.validate(),
        "credential_built": get_credential_status()["credentials_built"] > 0,
    }

    response = HealthResponse(
        status="healthy" if all(checks.values()) else "degraded",
        service=config.service_name,
        timestamp=datetime.now(timezone.utc),
        version=config.version,
        checks={
            **checks,
            # Informational; DefaultAzureCredential is a valid setup
            "managed_identity_configured": config.uses_managed_identity,
        },
    )

    return json_response(response.model_dump())


__all__ = ["vm_bp", "handle_vm_status", "handle_vm_toggle"]

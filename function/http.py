# ============================================================================
# HTTP BOUNDARY
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Gateway - Request parsing and response shaping
# PURPOSE: Map structured results and errors to Azure Functions responses
# CREATED: 17 OCT 2026
# ============================================================================
"""
HTTP Boundary

The only place that knows about status codes and response bodies.

    ValidationError -> 400 {"error": <message>}
    ProviderError   -> 500 {"error": <failure title>, "details": <provider message>}
    status read     -> 200 {"status": <PowerStatus>}
    toggle accepted -> 202 {"message": "VM <action> operation initiated"}

Error responses also carry X-Error-Code, and provider failures
X-Retryable, so callers can branch without parsing bodies.
"""

import json
import logging
from typing import Any, Dict, Optional

import azure.functions as func

from core.contracts import PowerStatus, ToggleAction
from core.errors import ProviderError, ValidationError, VmControlError
from function.models.responses import ErrorResponse, ToggleAcceptedResponse, VmStatusResponse

logger = logging.getLogger(__name__)

STATUS_FAILURE_TITLE = "Failed to get VM status"


def toggle_failure_title(action: ToggleAction) -> str:
    return f"Failed to {action.value} VM"


def json_response(
    data: dict,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> func.HttpResponse:
    """Create JSON HTTP response."""
    return func.HttpResponse(
        json.dumps(data, default=str),
        status_code=status_code,
        headers={"Content-Type": "application/json", **(headers or {})},
    )


def parse_json_body(req: func.HttpRequest) -> Optional[Dict[str, Any]]:
    """
    Return the request body as a dict, or None if it is not a JSON object.

    A missing or unparseable body is reported downstream as missing
    parameters, not as a separate error.
    """
    try:
        body = req.get_json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def status_response(status: PowerStatus) -> func.HttpResponse:
    return json_response(VmStatusResponse(status=status).model_dump())


def toggle_accepted_response(action: ToggleAction) -> func.HttpResponse:
    return json_response(ToggleAcceptedResponse.for_action(action).model_dump(), status_code=202)


def error_response(error: VmControlError, failure_title: Optional[str] = None) -> func.HttpResponse:
    """
    Map a structured error to its HTTP response.

    Args:
        error: ValidationError or ProviderError
        failure_title: `error` field for provider failures
            (e.g. "Failed to get VM status"); unused for validation errors
    """
    headers = {"X-Error-Code": error.code.value}

    if isinstance(error, ValidationError):
        return json_response(
            ErrorResponse(error=error.message).model_dump(exclude_none=True),
            status_code=400,
            headers=headers,
        )

    if isinstance(error, ProviderError):
        headers["X-Retryable"] = "true" if error.retryable else "false"

    return json_response(
        ErrorResponse(error=failure_title or error.message, details=error.details or error.message).model_dump(),
        status_code=500,
        headers=headers,
    )


def unexpected_error_response(exc: Exception, failure_title: str) -> func.HttpResponse:
    """500 for an exception outside the error taxonomy."""
    return json_response(
        ErrorResponse(error=failure_title, details=str(exc) or type(exc).__name__).model_dump(),
        status_code=500,
        headers={"X-Error-Code": "INTERNAL_ERROR"},
    )


__all__ = [
    "STATUS_FAILURE_TITLE",
    "json_response",
    "toggle_failure_title",
    "parse_json_body",
    "status_response",
    "toggle_accepted_response",
    "error_response",
    "unexpected_error_response",
]

# ============================================================================
# REQUEST VALIDATION
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Service - Request shape validation
# PURPOSE: Turn loosely-typed request payloads into validated contracts
# CREATED: 17 OCT 2026
# ============================================================================
"""
Request Validation

Payloads arrive as arbitrary JSON. They are checked against the pydantic
contracts here, before anything reaches the provider.

Fail-fast, first violation wins:
  1. VM reference completeness (subscriptionId, resourceGroup, vmName)
  2. Action is exactly "start" or "stop"

An absent, null or empty action is a missing parameter. Any other value
that is not one of the two lowercase strings is an invalid action.
"""

from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from core.contracts import ToggleAction, ToggleRequest, VmReference
from core.errors import ValidationError

VmReferenceInput = Union[VmReference, Mapping[str, Any], None]
ToggleRequestInput = Union[ToggleRequest, Mapping[str, Any], None]

_ACTIONS = {action.value: action for action in ToggleAction}


def _missing_fields(exc: PydanticValidationError) -> str:
    fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
    return f"Missing or empty: {', '.join(fields)}" if fields else str(exc)


def validate_vm_reference(payload: VmReferenceInput) -> VmReference:
    """
    Validate a VM reference.

    Accepts a VmReference (re-checked, since model_construct() bypasses
    validation) or a mapping with camelCase or snake_case keys.

    Raises:
        ValidationError: MISSING_PARAMETERS
    """
    if isinstance(payload, VmReference):
        payload = {name: getattr(payload, name, None) for name in VmReference.model_fields}
    if not isinstance(payload, Mapping):
        raise ValidationError.missing_parameters("Request body must be a JSON object")

    try:
        return VmReference.model_validate(dict(payload))
    except PydanticValidationError as e:
        raise ValidationError.missing_parameters(_missing_fields(e)) from None


def validate_toggle_action(value: Any) -> ToggleAction:
    """
    Validate a toggle action value.

    Raises:
        ValidationError: MISSING_PARAMETERS if absent or empty,
            INVALID_ACTION for anything but "start" or "stop"
    """
    if isinstance(value, ToggleAction):
        return value
    if value is None or value == "":
        raise ValidationError.missing_parameters("Missing or empty: action")
    if isinstance(value, str) and value in _ACTIONS:
        return _ACTIONS[value]
    raise ValidationError.invalid_action(value)


def validate_toggle_request(payload: ToggleRequestInput) -> ToggleRequest:
    """
    Validate a toggle request.

    Accepts a ToggleRequest or a flat mapping
    {subscriptionId, resourceGroup, vmName, action}.
    """
    if isinstance(payload, ToggleRequest):
        vm_payload: Any = payload.vm
        action_value: Optional[Any] = payload.action
    elif isinstance(payload, Mapping):
        vm_payload = payload
        action_value = payload.get("action")
    else:
        raise ValidationError.missing_parameters("Request body must be a JSON object")

    vm = validate_vm_reference(vm_payload)
    action = validate_toggle_action(action_value)
    return ToggleRequest(vm=vm, action=action)


__all__ = [
    "validate_vm_reference",
    "validate_toggle_action",
    "validate_toggle_request",
]

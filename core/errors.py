# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Foundation - Structured errors
# PURPOSE: Distinguish malformed requests, provider failures and cancellation
# CREATED: 17 OCT 2026
# ============================================================================
"""
Error Taxonomy

Three kinds of failure, each carrying a structured payload:

- ValidationError: malformed or incomplete request. Raised before any
  provider call.
- ProviderError: the control plane rejected, timed out or errored on a
  call that was attempted. The provider's message is kept verbatim.
- Cancelled: the awaiting caller aborted mid-flight. Subclasses
  asyncio.CancelledError so task cancellation keeps propagating.

Transport mapping (HTTP status codes, response bodies) is not done here;
see function/http.py.
"""

import asyncio
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Top-level failure category."""
    VALIDATION = "validation"
    PROVIDER = "provider"
    CANCELLED = "cancelled"


class ErrorCode(str, Enum):
    """Machine-readable error codes."""
    # Validation
    MISSING_PARAMETERS = "MISSING_PARAMETERS"
    INVALID_ACTION = "INVALID_ACTION"

    # Provider
    AUTH_FAILED = "AUTH_FAILED"
    NOT_FOUND = "NOT_FOUND"
    THROTTLED = "THROTTLED"
    TIMEOUT = "TIMEOUT"
    NETWORK = "NETWORK"
    REJECTED = "REJECTED"
    PROVIDER_ERROR = "PROVIDER_ERROR"

    # Caller
    CANCELLED = "CANCELLED"


class VmControlError(Exception):
    """Base class for validation and provider failures."""

    kind: ErrorKind = ErrorKind.PROVIDER

    def __init__(self, message: str, code: ErrorCode, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "kind": self.kind.value,
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(VmControlError):
    """Request is malformed or incomplete. No provider call was made."""

    kind = ErrorKind.VALIDATION

    @classmethod
    def missing_parameters(cls, details: Optional[str] = None) -> "ValidationError":
        return cls("Missing required parameters", ErrorCode.MISSING_PARAMETERS, details)

    @classmethod
    def invalid_action(cls, value: Any = None) -> "ValidationError":
        return cls(
            "Invalid action. Must be 'start' or 'stop'",
            ErrorCode.INVALID_ACTION,
            f"Received action={value!r}",
        )


class ProviderError(VmControlError):
    """
    The control plane failed a call that was attempted.

    `details` is the provider's diagnostic message, preserved verbatim.
    `retryable` tells the caller whether a retry with backoff is sensible;
    nothing in this service retries on its own.
    """

    kind = ErrorKind.PROVIDER

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.PROVIDER_ERROR,
        details: Optional[str] = None,
        retryable: bool = False,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, code, details)
        self.retryable = retryable
        self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["retryable"] = self.retryable
        if self.status_code is not None:
            result["status_code"] = self.status_code
        return result


class Cancelled(asyncio.CancelledError):
    """
    The caller aborted before the provider responded.

    Has no effect on an operation the provider already accepted.
    """

    kind = ErrorKind.CANCELLED
    code = ErrorCode.CANCELLED

    def __init__(self, operation: str):
        super().__init__(f"{operation} cancelled by caller")
        self.operation = operation
        self.message = str(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "code": self.code.value,
            "message": self.message,
            "details": None,
        }


__all__ = [
    "ErrorKind",
    "ErrorCode",
    "VmControlError",
    "ValidationError",
    "ProviderError",
    "Cancelled",
]

# ============================================================================
# STARTUP VALIDATION
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Gateway - Startup validation
# PURPOSE: Validate environment before registering blueprints
# CREATED: 17 OCT 2026
# ============================================================================
"""
Startup Validation

Validates configuration and the Azure credential before registering
blueprints. Fail fast, log clearly, degrade gracefully.

If validation fails, only /livez and /readyz endpoints are available.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from function.config import get_config

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of a startup validation check."""

    name: str
    passed: bool
    error_type: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class StartupState:
    """Track all startup validation checks."""

    config: ValidationResult = field(
        default_factory=lambda: ValidationResult("config", False, "NotRun", "Validation not yet run")
    )
    credential: ValidationResult = field(
        default_factory=lambda: ValidationResult("credential", False, "NotRun", "Validation not yet run")
    )

    def _checks(self) -> List[ValidationResult]:
        return [self.config, self.credential]

    @property
    def all_passed(self) -> bool:
        """Check if all validations passed."""
        return all(c.passed for c in self._checks())

    def failed_checks(self) -> List[ValidationResult]:
        """Get list of failed validation checks."""
        return [c for c in self._checks() if not c.passed]

    def failed_check_names(self) -> List[str]:
        """Get names of failed checks."""
        return [c.name for c in self.failed_checks()]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "all_passed": self.all_passed,
            "checks": {
                c.name: {
                    "passed": c.passed,
                    "error": c.error_message if not c.passed else None,
                }
                for c in self._checks()
            },
        }


# Global singleton
STARTUP_STATE = StartupState()


def validate_startup() -> bool:
    """
    Run all startup validation checks.

    Returns True if all checks pass.
    Updates global STARTUP_STATE with results.
    """
    logger.info("Starting validation checks...")

    # 1. Configuration
    STARTUP_STATE.config = _validate_config()
    if STARTUP_STATE.config.passed:
        logger.info("  [PASS] Configuration")
    else:
        logger.error(f"  [FAIL] Configuration: {STARTUP_STATE.config.error_message}")

    # 2. Azure credential (only if config passed)
    if STARTUP_STATE.config.passed:
        STARTUP_STATE.credential = _validate_credential()
        if STARTUP_STATE.credential.passed:
            logger.info("  [PASS] Azure credential")
        else:
            logger.error(f"  [FAIL] Azure credential: {STARTUP_STATE.credential.error_message}")
    else:
        STARTUP_STATE.credential = ValidationResult(
            name="credential",
            passed=False,
            error_type="Skipped",
            error_message="Skipped due to config failure",
        )

    if STARTUP_STATE.all_passed:
        logger.info("All validation checks PASSED")
    else:
        logger.error(f"Validation FAILED: {STARTUP_STATE.failed_check_names()}")

    return STARTUP_STATE.all_passed


def _validate_config() -> ValidationResult:
    """Validate configuration values parse."""
    problems = get_config().validate()
    if problems:
        return ValidationResult(
            name="config",
            passed=False,
            error_type="InvalidConfig",
            error_message="; ".join(problems),
        )
    return ValidationResult(name="config", passed=True)


def _validate_credential() -> ValidationResult:
    """
    Validate an Azure credential can be constructed.

    Note: no token is requested here. Token acquisition would add a
    network round trip to every cold start.
    """
    try:
        from infrastructure.auth import get_azure_credential

        get_azure_credential(get_config().azure_client_id)
        return ValidationResult(name="credential", passed=True)
    except Exception as e:
        return ValidationResult(
            name="credential",
            passed=False,
            error_type=type(e).__name__,
            error_message=str(e),
        )


__all__ = ["STARTUP_STATE", "validate_startup", "ValidationResult", "StartupState"]

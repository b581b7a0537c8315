# ============================================================================
# FUNCTION APP CONFIGURATION
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Gateway - Configuration management
# PURPOSE: Environment-based configuration for function app
# CREATED: 17 OCT 2026
# ============================================================================
"""
Function App Configuration

Loads configuration from environment variables (Application Settings in
Azure, local.settings.json locally) with sensible defaults.

Values are read as strings and parsed lazily by validate(), so a bad
setting fails startup validation instead of crashing the import of
function_app.py.
"""

import os
import logging
from dataclasses import dataclass
from typing import List, Optional

from __version__ import __version__

logger = logging.getLogger(__name__)


def _positive_float(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass
class FunctionConfig:
    """Configuration for the function app."""

    # Azure identity (user-assigned MI); None -> DefaultAzureCredential
    azure_client_id: Optional[str] = None

    # Provider call bounds (seconds, as configured)
    status_timeout: str = "5"
    toggle_timeout: str = "10"

    # Logging
    log_level: str = "INFO"
    log_format: str = "human"

    # App Info
    version: str = __version__
    service_name: str = "vm-power-gateway"

    @classmethod
    def from_env(cls) -> "FunctionConfig":
        """Load configuration from environment variables."""
        return cls(
            azure_client_id=os.environ.get("AZURE_CLIENT_ID") or None,
            status_timeout=os.environ.get("VMCTL_STATUS_TIMEOUT_SECONDS", "5"),
            toggle_timeout=os.environ.get("VMCTL_TOGGLE_TIMEOUT_SECONDS", "10"),
            log_level=os.environ.get("VMCTL_LOG_LEVEL", "INFO"),
            log_format=os.environ.get("LOG_FORMAT", "human"),
            version=os.environ.get("APP_VERSION", __version__),
            service_name=os.environ.get("SERVICE_NAME", "vm-power-gateway"),
        )

    @property
    def status_timeout_seconds(self) -> float:
        """Bound on instance-view queries."""
        return _positive_float("VMCTL_STATUS_TIMEOUT_SECONDS", self.status_timeout)

    @property
    def toggle_timeout_seconds(self) -> float:
        """Bound on start/deallocate dispatch."""
        return _positive_float("VMCTL_TOGGLE_TIMEOUT_SECONDS", self.toggle_timeout)

    @property
    def json_logging(self) -> bool:
        return self.log_format.lower() == "json"

    @property
    def uses_managed_identity(self) -> bool:
        """Check if a user-assigned managed identity is configured."""
        return bool(self.azure_client_id)

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty if valid)."""
        problems = []
        for prop in ("status_timeout_seconds", "toggle_timeout_seconds"):
            try:
                getattr(self, prop)
            except ValueError as e:
                problems.append(str(e))
        return problems


# Global config singleton
_config: Optional[FunctionConfig] = None


def get_config() -> FunctionConfig:
    """Get the global configuration singleton."""
    global _config
    if _config is None:
        _config = FunctionConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset configuration (for testing)."""
    global _config
    _config = None


__all__ = ["FunctionConfig", "get_config", "reset_config"]

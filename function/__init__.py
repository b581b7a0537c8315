# ============================================================================
# FUNCTION APP MODULE
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Gateway - Azure Function App components
# PURPOSE: Function app for VM power state queries and toggles
# CREATED: 17 OCT 2026
# ============================================================================
"""
Function App Module

Contains all components specific to the Azure Function App deployment:
- Blueprints (HTTP endpoints)
- HTTP boundary (request parsing, response shaping)
- Models (response schemas)
- Startup validation
"""

__all__ = []

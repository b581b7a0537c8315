# ============================================================================
# FUNCTION APP BLUEPRINTS
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Gateway - HTTP endpoint blueprints
# PURPOSE: Azure Functions V2 blueprints for HTTP routes
# CREATED: 17 OCT 2026
# ============================================================================
"""
Function App Blueprints

Azure Functions V2 blueprints organizing HTTP endpoints.
Each blueprint is conditionally registered based on startup validation.
"""

from function.blueprints.vm_bp import vm_bp

__all__ = [
    "vm_bp",
]

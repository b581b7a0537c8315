# ============================================================================
# VM POWER GATEWAY - Azure Function App
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Gateway - VM power state queries and start/stop toggles
# PURPOSE: HTTP API behind the static front-end's start/stop buttons
# CREATED: 17 OCT 2026
# ============================================================================
"""
VM Power Gateway Function App

Azure Functions V2 entry point providing:
- VM power state queries (normalized to running/stopped/starting/stopping/unknown)
- VM start and deallocate requests (202 Accepted, completion learned by polling)

Authorization:
- VM endpoints use AuthLevel.FUNCTION: callers must send the function key
  (x-functions-key header or ?code=). The host rejects keyless requests.
- Probes are anonymous.

Endpoints:
- /api/livez - Liveness probe (always available)
- /api/readyz - Readiness probe (checks startup validation)
- /api/vm/status - Power state query
- /api/vm/toggle - Start / stop (deallocate)
- /api/vm/health - Gateway health
"""

import azure.functions as func
import json
import logging

# ============================================================================
# CREATE APP FIRST (before any imports that might fail)
# ============================================================================

app = func.FunctionApp(http_auth_level=func.AuthLevel.FUNCTION)

from function.config import get_config
from core.logging import configure_logging

_config = get_config()
configure_logging(level=_config.log_level, json_output=_config.json_logging)

logger = logging.getLogger(__name__)
logger.info("=" * 60)
logger.info("VM Power Gateway Function App Starting")
logger.info("=" * 60)

# ============================================================================
# EARLY PROBES (Before validation - always available)
# ============================================================================
# These endpoints must be available even if startup validation fails.


@app.route(route="livez", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def liveness_probe(req: func.HttpRequest) -> func.HttpResponse:
    """
    Liveness probe - always returns 200 if function is running.

    GET /api/livez
    """
    return func.HttpResponse(
        json.dumps({"alive": True, "service": _config.service_name}),
        status_code=200,
        headers={"Content-Type": "application/json"},
    )


@app.route(route="readyz", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def readiness_probe(req: func.HttpRequest) -> func.HttpResponse:
    """
    Readiness probe - returns 200 if startup validation passed.

    GET /api/readyz

    Returns 503 if startup validation failed.
    """
    from function.startup import STARTUP_STATE

    if STARTUP_STATE.all_passed:
        return func.HttpResponse(
            json.dumps({"ready": True, "service": _config.service_name}),
            status_code=200,
            headers={"Content-Type": "application/json"},
        )

    return func.HttpResponse(
        json.dumps({
            "ready": False,
            "service": _config.service_name,
            "failed_checks": STARTUP_STATE.failed_check_names(),
            "details": STARTUP_STATE.to_dict(),
        }),
        status_code=503,
        headers={"Content-Type": "application/json"},
    )


# ============================================================================
# STARTUP VALIDATION
# ============================================================================
# If validation fails, only /livez and /readyz are available.

logger.info("Running startup validation...")

from function.startup import validate_startup, STARTUP_STATE

validate_startup()

if not STARTUP_STATE.all_passed:
    logger.error("=" * 60)
    logger.error("STARTUP VALIDATION FAILED")
    logger.error("=" * 60)
    logger.error("Only /api/livez and /api/readyz endpoints available")
    for check in STARTUP_STATE.failed_checks():
        logger.error(f"  FAILED: {check.name} - {check.error_message}")
    logger.error("=" * 60)
else:
    logger.info("Startup validation PASSED")


# ============================================================================
# BLUEPRINT REGISTRATION (Conditional on startup success)
# ============================================================================

if STARTUP_STATE.all_passed:
    logger.info("Registering blueprints...")

    # VM blueprint (status, toggle, health)
    from function.blueprints.vm_bp import vm_bp
    app.register_functions(vm_bp)
    logger.info("  Registered: vm_bp (power status and toggle)")

    logger.info("=" * 60)
    logger.info("VM Power Gateway Function App Ready")
    logger.info("=" * 60)
else:
    logger.warning("=" * 60)
    logger.warning("SKIPPING blueprint registration - startup validation failed")
    logger.warning("=" * 60)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["app"]

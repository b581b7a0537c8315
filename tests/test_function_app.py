# ============================================================================
# FUNCTION APP TESTS
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Tests - Liveness, readiness, blueprint registration and route wiring
# PURPOSE: Verify function_app.py gating and the vm_bp route functions
# CREATED: 17 OCT 2026
# ============================================================================
"""
Function App Tests

Covers:
1. /livez and /readyz with passing and failing startup validation
2. vm_bp registered only when startup validation passes
3. /vm/health status derived from its checks
4. Route functions wire the Azure provider and configured timeouts

function_app.py does its work at import time, so each test re-imports it
under the environment it needs.

Run with:
    pytest tests/test_function_app.py -v
"""

import asyncio
import importlib
import json
import sys
from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import azure.functions as func
import pytest

from function.config import reset_config
from infrastructure.auth import reset_credentials


VM_FUNCTIONS = {"vm_status", "vm_toggle", "vm_health"}
ALWAYS_ON = {"liveness_probe", "readiness_probe"}


@pytest.fixture
def load_app(monkeypatch):
    """Import function_app fresh with the given environment overrides."""
    for name in (
        "AZURE_CLIENT_ID",
        "VMCTL_STATUS_TIMEOUT_SECONDS",
        "VMCTL_TOGGLE_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)

    def _load(**env):
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        reset_config()
        reset_credentials()
        sys.modules.pop("function_app", None)
        with patch("core.logging.configure_logging"), \
                patch("infrastructure.auth.get_azure_credential", return_value=MagicMock()):
            return importlib.import_module("function_app")

    yield _load

    sys.modules.pop("function_app", None)
    reset_config()
    reset_credentials()


def _functions(module) -> dict:
    return {f.get_function_name(): f.get_user_function() for f in module.app.get_functions()}


def _get(route: str) -> func.HttpRequest:
    return func.HttpRequest(method="GET", url=f"/api/{route}", body=b"")


def _post(route: str, body: dict) -> func.HttpRequest:
    return func.HttpRequest(
        method="POST",
        url=f"/api/{route}",
        headers={"Content-Type": "application/json"},
        body=json.dumps(body).encode(),
    )


def _body(resp: func.HttpResponse) -> dict:
    return json.loads(resp.get_body())


def _yielding(provider):
    @asynccontextmanager
    async def _provider():
        yield provider
    return _provider


# ============================================================================
# STARTUP GATING AND REGISTRATION
# ============================================================================

class TestStartupGating:
    def test_bad_config_registers_livez_readyz_only(self, load_app):
        module = load_app(VMCTL_STATUS_TIMEOUT_SECONDS="abc")
        functions = _functions(module)

        assert set(functions) == ALWAYS_ON

        resp = functions["readiness_probe"](_get("readyz"))
        body = _body(resp)
        assert resp.status_code == 503
        assert body["ready"] is False
        assert body["failed_checks"] == ["config", "credential"]

    def test_liveness_always_ok(self, load_app):
        module = load_app(VMCTL_STATUS_TIMEOUT_SECONDS="abc")

        resp = _functions(module)["liveness_probe"](_get("livez"))

        assert resp.status_code == 200
        assert _body(resp) == {"alive": True, "service": "vm-power-gateway"}

    def test_valid_config_registers_vm_functions(self, load_app):
        module = load_app()
        functions = _functions(module)

        assert set(functions) == ALWAYS_ON | VM_FUNCTIONS

        resp = functions["readiness_probe"](_get("readyz"))
        assert resp.status_code == 200
        assert _body(resp) == {"ready": True, "service": "vm-power-gateway"}


# ============================================================================
# HEALTH
# ============================================================================

class TestVmHealth:
    def test_degraded_without_credential(self, load_app):
        vm_health = _functions(load_app())["vm_health"]

        resp = vm_health(_get("vm/health"))
        body = _body(resp)

        assert resp.status_code == 200
        assert body["status"] == "degraded"
        assert body["checks"]["credential_built"] is False
        assert body["checks"]["config_valid"] is True

    def test_healthy_when_all_checks_pass(self, load_app):
        vm_health = _functions(load_app())["vm_health"]

        with patch(
            "infrastructure.auth.get_credential_status",
            return_value={"auth_type": "default", "credentials_built": 1},
        ):
            body = _body(vm_health(_get("vm/health")))

        assert body["status"] == "healthy"
        assert body["service"] == "vm-power-gateway"
        assert body["checks"]["managed_identity_configured"] is False


# ============================================================================
# ROUTE WIRING
# ============================================================================

class TestRouteWiring:
    def test_status_uses_configured_timeout(self, load_app, make_provider, vm_payload, monkeypatch):
        vm_status = _functions(load_app())["vm_status"]
        monkeypatch.setenv("VMCTL_STATUS_TIMEOUT_SECONDS", "0.05")
        reset_config()
        provider = make_provider(delay=1.0)

        with patch("function.blueprints.vm_bp._azure_provider", _yielding(provider)):
            resp = asyncio.run(vm_status(_post("vm/status", vm_payload), SimpleNamespace(invocation_id="inv-1")))

        assert resp.status_code == 500
        assert _body(resp) == {
            "error": "Failed to get VM status",
            "details": "instance_view did not respond after 0.05s",
        }

    def test_toggle_uses_configured_timeout(self, load_app, make_provider, vm_payload, monkeypatch):
        vm_toggle = _functions(load_app())["vm_toggle"]
        monkeypatch.setenv("VMCTL_TOGGLE_TIMEOUT_SECONDS", "0.05")
        reset_config()
        provider = make_provider(delay=1.0)

        with patch("function.blueprints.vm_bp._azure_provider", _yielding(provider)):
            resp = asyncio.run(vm_toggle(
                _post("vm/toggle", {**vm_payload, "action": "stop"}),
                SimpleNamespace(invocation_id="inv-2"),
            ))

        assert resp.status_code == 500
        assert _body(resp) == {
            "error": "Failed to stop VM",
            "details": "deallocate did not respond after 0.05s",
        }
        assert provider.operations() == ["deallocate"]

    def test_toggle_accepted_through_route(self, load_app, make_provider, vm_payload):
        vm_toggle = _functions(load_app())["vm_toggle"]
        provider = make_provider()

        with patch("function.blueprints.vm_bp._azure_provider", _yielding(provider)):
            resp = asyncio.run(vm_toggle(
                _post("vm/toggle", {**vm_payload, "action": "start"}),
                SimpleNamespace(invocation_id="inv-3"),
            ))

        assert resp.status_code == 202
        assert _body(resp) == {"message": "VM start operation initiated"}

    def test_credential_failure_keeps_error_body(self, load_app, vm_payload):
        vm_status = _functions(load_app())["vm_status"]

        with patch(
            "infrastructure.auth.get_azure_credential",
            side_effect=ValueError("No managed identity endpoint found"),
        ):
            resp = asyncio.run(vm_status(_post("vm/status", vm_payload), SimpleNamespace(invocation_id="inv-4")))

        assert resp.status_code == 500
        assert _body(resp) == {
            "error": "Failed to get VM status",
            "details": "No managed identity endpoint found",
        }

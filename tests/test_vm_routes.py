# ============================================================================
# VM ROUTE TESTS
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Tests - HTTP contract of /api/vm/status and /api/vm/toggle
# PURPOSE: Verify status codes and response bodies at the HTTP boundary
# CREATED: 17 OCT 2026
# ============================================================================
"""
VM Route Tests

Drives handle_vm_status() and handle_vm_toggle() with real
azure.functions.HttpRequest objects and a stub provider.

Run with:
    pytest tests/test_vm_routes.py -v
"""

import asyncio
import json
from unittest.mock import MagicMock

import azure.functions as func
import pytest
from azure.core.exceptions import HttpResponseError

from function.blueprints.vm_bp import handle_vm_status, handle_vm_toggle
from infrastructure.compute import AzureComputeProvider


def _request(route: str, body) -> func.HttpRequest:
    raw = body if isinstance(body, bytes) else json.dumps(body).encode()
    return func.HttpRequest(
        method="POST",
        url=f"/api/vm/{route}",
        headers={"Content-Type": "application/json"},
        body=raw,
    )


def _body(resp: func.HttpResponse) -> dict:
    return json.loads(resp.get_body())


def _throttled() -> HttpResponseError:
    error = HttpResponseError(message="Too many requests")
    error.status_code = 429
    return error


# ============================================================================
# STATUS
# ============================================================================

class TestVmStatusRoute:
    def test_deallocated_is_stopped(self, make_provider, vm_payload):
        provider = make_provider(codes=["ProvisioningState/succeeded", "PowerState/deallocated"])

        resp = asyncio.run(handle_vm_status(_request("status", vm_payload), provider))

        assert resp.status_code == 200
        assert _body(resp) == {"status": "stopped"}
        assert resp.headers.get("Content-Type") == "application/json"

    def test_unknown_state(self, make_provider, vm_payload):
        provider = make_provider(codes=["ProvisioningState/succeeded"])

        resp = asyncio.run(handle_vm_status(_request("status", vm_payload), provider))

        assert resp.status_code == 200
        assert _body(resp) == {"status": "unknown"}

    def test_missing_vm_name(self, make_provider, vm_payload):
        provider = make_provider()
        del vm_payload["vmName"]

        resp = asyncio.run(handle_vm_status(_request("status", vm_payload), provider))

        assert resp.status_code == 400
        assert _body(resp) == {"error": "Missing required parameters"}
        assert resp.headers.get("X-Error-Code") == "MISSING_PARAMETERS"
        assert provider.call_count == 0

    @pytest.mark.parametrize("raw", [b"", b"not json", b"[1, 2]", b"null"])
    def test_non_object_body_is_missing_parameters(self, make_provider, raw):
        provider = make_provider()

        resp = asyncio.run(handle_vm_status(_request("status", raw), provider))

        assert resp.status_code == 400
        assert _body(resp) == {"error": "Missing required parameters"}
        assert provider.call_count == 0

    def test_provider_failure_details(self, make_provider, vm_payload):
        provider = make_provider(error=RuntimeError("The client does not have authorization"))

        resp = asyncio.run(handle_vm_status(_request("status", vm_payload), provider))

        assert resp.status_code == 500
        assert _body(resp) == {
            "error": "Failed to get VM status",
            "details": "The client does not have authorization",
        }
        assert resp.headers.get("X-Retryable") == "false"

    def test_throttling_is_retryable(self, make_provider, vm_payload):
        provider = make_provider(error=_throttled())

        resp = asyncio.run(handle_vm_status(_request("status", vm_payload), provider))

        assert resp.status_code == 500
        assert _body(resp)["details"] == "Too many requests"
        assert resp.headers.get("X-Error-Code") == "THROTTLED"
        assert resp.headers.get("X-Retryable") == "true"

    def test_timeout(self, make_provider, vm_payload):
        provider = make_provider(delay=1.0)

        resp = asyncio.run(handle_vm_status(_request("status", vm_payload), provider, timeout=0.01))

        assert resp.status_code == 500
        assert _body(resp)["error"] == "Failed to get VM status"
        assert resp.headers.get("X-Error-Code") == "TIMEOUT"


# ============================================================================
# TOGGLE
# ============================================================================

class TestVmToggleRoute:
    def test_stop_accepted(self, make_provider, vm_payload):
        provider = make_provider()

        resp = asyncio.run(handle_vm_toggle(_request("toggle", {**vm_payload, "action": "stop"}), provider))

        assert resp.status_code == 202
        assert _body(resp) == {"message": "VM stop operation initiated"}
        assert provider.operations() == ["deallocate"]

    def test_start_accepted(self, make_provider, vm_payload):
        provider = make_provider()

        resp = asyncio.run(handle_vm_toggle(_request("toggle", {**vm_payload, "action": "start"}), provider))

        assert resp.status_code == 202
        assert _body(resp) == {"message": "VM start operation initiated"}
        assert provider.operations() == ["start"]

    def test_invalid_action(self, make_provider, vm_payload):
        provider = make_provider()

        resp = asyncio.run(handle_vm_toggle(_request("toggle", {**vm_payload, "action": "restart"}), provider))

        assert resp.status_code == 400
        assert _body(resp) == {"error": "Invalid action. Must be 'start' or 'stop'"}
        assert resp.headers.get("X-Error-Code") == "INVALID_ACTION"
        assert provider.call_count == 0

    def test_missing_reference_wins_over_invalid_action(self, make_provider, vm_payload):
        provider = make_provider()
        payload = {**vm_payload, "action": "restart"}
        del payload["subscriptionId"]

        resp = asyncio.run(handle_vm_toggle(_request("toggle", payload), provider))

        assert resp.status_code == 400
        assert _body(resp) == {"error": "Missing required parameters"}

    def test_missing_action(self, make_provider, vm_payload):
        provider = make_provider()

        resp = asyncio.run(handle_vm_toggle(_request("toggle", vm_payload), provider))

        assert resp.status_code == 400
        assert _body(resp) == {"error": "Missing required parameters"}
        assert provider.call_count == 0

    def test_provider_rejects_start(self, make_provider, vm_payload):
        provider = make_provider(error=RuntimeError("Operation 'start' is not allowed"))

        resp = asyncio.run(handle_vm_toggle(_request("toggle", {**vm_payload, "action": "start"}), provider))

        assert resp.status_code == 500
        assert _body(resp) == {
            "error": "Failed to start VM",
            "details": "Operation 'start' is not allowed",
        }

    def test_throttled_stop(self, make_provider, vm_payload):
        provider = make_provider(error=_throttled())

        resp = asyncio.run(handle_vm_toggle(_request("toggle", {**vm_payload, "action": "stop"}), provider))

        assert resp.status_code == 500
        assert _body(resp)["error"] == "Failed to stop VM"
        assert resp.headers.get("X-Retryable") == "true"

    def test_repeated_toggles_each_reach_provider(self, make_provider, vm_payload):
        provider = make_provider()
        payload = {**vm_payload, "action": "start"}

        first = asyncio.run(handle_vm_toggle(_request("toggle", payload), provider))
        second = asyncio.run(handle_vm_toggle(_request("toggle", payload), provider))

        assert first.status_code == second.status_code == 202
        assert provider.operations() == ["start", "start"]


# ============================================================================
# CREDENTIAL FAILURES
# ============================================================================

def _provider_without_credential(factory: MagicMock) -> AzureComputeProvider:
    return AzureComputeProvider(
        client_factory=lambda c, s: MagicMock(),
        credential_factory=factory,
    )


class TestCredentialFailure:
    def test_status_returns_contracted_body(self, vm_payload):
        factory = MagicMock(side_effect=ValueError("ManagedIdentityCredential authentication unavailable"))

        resp = asyncio.run(handle_vm_status(_request("status", vm_payload), _provider_without_credential(factory)))

        assert resp.status_code == 500
        assert _body(resp) == {
            "error": "Failed to get VM status",
            "details": "ManagedIdentityCredential authentication unavailable",
        }

    def test_toggle_returns_contracted_body(self, vm_payload):
        factory = MagicMock(side_effect=ValueError("ManagedIdentityCredential authentication unavailable"))
        payload = {**vm_payload, "action": "stop"}

        resp = asyncio.run(handle_vm_toggle(_request("toggle", payload), _provider_without_credential(factory)))

        assert resp.status_code == 500
        assert _body(resp)["error"] == "Failed to stop VM"

    def test_validation_runs_before_credential(self, vm_payload):
        factory = MagicMock(side_effect=ValueError("unreachable"))
        payload = {**vm_payload, "action": "restart"}

        resp = asyncio.run(handle_vm_toggle(_request("toggle", payload), _provider_without_credential(factory)))

        assert resp.status_code == 400
        factory.assert_not_called()

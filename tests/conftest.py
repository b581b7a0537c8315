# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# EPOCH: 1 - VM POWER CONTROL
# STATUS: Tests - Stub compute provider
# PURPOSE: In-memory ComputeProvider that records every call
# CREATED: 17 OCT 2026
# ============================================================================
"""
Shared fixtures.

StubComputeProvider stands in for the Azure control plane. Every call is
recorded so tests can assert exactly how many provider calls were made.
"""

import asyncio
from typing import List, Optional, Tuple

import pytest

from core.contracts import VmReference


VALID_VM = {"subscriptionId": "s1", "resourceGroup": "rg1", "vmName": "vm1"}


class StubComputeProvider:
    """ComputeProvider stub with configurable codes, errors and delay."""

    def __init__(
        self,
        codes: Optional[List[str]] = None,
        error: Optional[BaseException] = None,
        delay: Optional[float] = None,
    ):
        self.codes = codes if codes is not None else ["PowerState/running"]
        self.error = error
        self.delay = delay
        self.calls: List[Tuple[str, VmReference]] = []

    async def _maybe_fail(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error

    async def get_status_codes(self, vm: VmReference) -> List[str]:
        self.calls.append(("instance_view", vm))
        await self._maybe_fail()
        return list(self.codes)

    async def begin_start(self, vm: VmReference) -> None:
        self.calls.append(("start", vm))
        await self._maybe_fail()

    async def begin_deallocate(self, vm: VmReference) -> None:
        self.calls.append(("deallocate", vm))
        await self._maybe_fail()

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def operations(self) -> List[str]:
        return [op for op, _ in self.calls]


@pytest.fixture
def make_provider():
    """Factory fixture: make_provider(codes=..., error=..., delay=...)."""
    return StubComputeProvider


@pytest.fixture
def vm_payload():
    return dict(VALID_VM)

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Shared test fixtures for the host overload test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from host_overload.data.models import Host, Vm
from host_overload.detection.random_source import seed_random_source
from host_overload.detection.recorder import ThresholdHistoryRecorder

FIXTURES = Path(__file__).parent / "fixtures"


class StubVm:
    def __init__(self, requested: float) -> None:
        self.requested = requested

    def current_requested_capacity(self) -> float:
        return self.requested


class StubHost:
    """Minimal host implementing the capability contract with a plain list history."""

    def __init__(self, history=None, requested=(), capacity: float = 1000.0, host_id: str = "stub-1"):
        self.id = host_id
        self._history = history
        self._vms = [StubVm(r) for r in requested]
        self._capacity = capacity

    def has_utilization_history(self) -> bool:
        return self._history is not None

    def utilization_history(self):
        return self._history

    def vms(self):
        return self._vms

    def total_capacity(self) -> float:
        return self._capacity


class LegacyHost:
    """Host that does not offer utilization history at all."""

    def __init__(self, requested=(), capacity: float = 1000.0, host_id: str = "legacy-1"):
        self.id = host_id
        self._vms = [StubVm(r) for r in requested]
        self._capacity = capacity

    def has_utilization_history(self) -> bool:
        return False

    def vms(self):
        return self._vms

    def total_capacity(self) -> float:
        return self._capacity


class AnonymousHost:
    """Host exposing only the capability methods, without an ``id``."""

    def __init__(self, history=None, requested=(), capacity: float = 1000.0):
        self._history = history
        self._vms = [StubVm(r) for r in requested]
        self._capacity = capacity

    def has_utilization_history(self) -> bool:
        return self._history is not None

    def utilization_history(self):
        return self._history

    def vms(self):
        return self._vms

    def total_capacity(self) -> float:
        return self._capacity


class FixedFallback:
    """Fallback that returns a fixed answer and counts its calls."""

    def __init__(self, answer: bool) -> None:
        self.answer = answer
        self.calls: list = []

    def is_over_utilized(self, host) -> bool:
        self.calls.append(host)
        return self.answer


class SpyEstimator:
    """Estimator that returns a constant and counts its calls."""

    name = "spy"

    def __init__(self, value: float = 0.5) -> None:
        self.value = value
        self.calls = 0

    def estimate(self, history) -> float:
        self.calls += 1
        return self.value


@pytest.fixture(autouse=True)
def _seeded_random_source():
    """Give every test its own freshly seeded shared random source."""
    seed_random_source(1234)
    yield


@pytest.fixture()
def recorder() -> ThresholdHistoryRecorder:
    return ThresholdHistoryRecorder()


@pytest.fixture()
def warm_host() -> Host:
    """History-capable host with 15 samples of 10 and a 0.5 requested ratio."""
    return Host.with_history(
        "warm-1",
        capacity_mips=1000.0,
        vms=[Vm(id="vm-1", requested_mips=300.0), Vm(id="vm-2", requested_mips=200.0)],
        samples=[10.0] * 15,
        window=15,
    )

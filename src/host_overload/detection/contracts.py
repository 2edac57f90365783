# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Capability protocols consumed and produced by the detection policies.

Hosts, VMs, recorders and fallback policies are duck-typed against these
protocols, so any simulation object model can plug in as long as it
exposes the listed methods.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class VmLike(Protocol):
    """A VM as seen by the detector."""

    def current_requested_capacity(self) -> float:
        """Capacity (MIPS) the VM requests right now."""
        ...


@runtime_checkable
class HostLike(Protocol):
    """A physical host as seen by the detector.

    An ``id`` attribute is optional; see :func:`host_identifier`.
    """

    def has_utilization_history(self) -> bool:
        """Whether :meth:`utilization_history` may be called on this host."""
        ...

    def vms(self) -> Sequence[VmLike]:
        ...

    def total_capacity(self) -> float:
        """Total capacity of the host, in the same unit as VM requests."""
        ...


@runtime_checkable
class UtilizationHistoryHost(HostLike, Protocol):
    """A host that keeps a rolling, oldest-first utilization history."""

    def utilization_history(self) -> Sequence[float]:
        ...


@runtime_checkable
class OverutilizationDetector(Protocol):
    """Anything that can decide whether a host is over-utilized.

    This is the whole contract a fallback policy has to satisfy.
    """

    def is_over_utilized(self, host: HostLike) -> bool:
        ...


@runtime_checkable
class HistoryRecorder(Protocol):
    """Append-only sink for computed thresholds."""

    def record(self, host: HostLike, threshold: float) -> None:
        ...


@runtime_checkable
class ThresholdEstimator(Protocol):
    """Turns a utilization history into a single scalar estimate."""

    name: str

    def estimate(self, history: Sequence[float]) -> float:
        ...


def host_identifier(host: HostLike) -> str:
    """Label *host* for logs and records.

    Uses ``host.id`` when present, otherwise ``repr(host)``.
    """
    host_id = getattr(host, "id", None)
    return repr(host) if host_id is None else str(host_id)

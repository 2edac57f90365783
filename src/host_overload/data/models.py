# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Pydantic models for hosts, VMs and detection results.

The host and VM models are in-memory stand-ins for the simulation's own
object model.  They implement the capability contracts in
:mod:`host_overload.detection.contracts` and nothing more: no power
model, no placement, no migration.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from host_overload.data.history import DEFAULT_WINDOW, UtilizationHistory


# ---------------------------------------------------------------------------
# Infrastructure models
# ---------------------------------------------------------------------------

class Vm(BaseModel):
    """A virtual machine and the capacity it currently requests from its host."""

    model_config = {"frozen": False, "populate_by_name": True}

    id: str = Field(..., description="Unique VM identifier")
    requested_mips: float = Field(
        default=0.0, ge=0, description="Currently requested capacity in MIPS"
    )
    max_mips: float = Field(
        default=1000.0, gt=0, description="Capacity the VM was provisioned with in MIPS"
    )

    def current_requested_capacity(self) -> float:
        return self.requested_mips


class Host(BaseModel):
    """A physical host running zero or more VMs.

    When ``history`` is ``None`` the host does not support utilization
    history and detection policies route it to their fallback.
    """

    model_config = {"arbitrary_types_allowed": True, "populate_by_name": True}

    id: str = Field(..., description="Unique host identifier")
    name: str = Field(default="", description="Human-readable host name")
    capacity_mips: float = Field(
        ..., gt=0, description="Total processing capacity in MIPS"
    )
    vm_list: list[Vm] = Field(default_factory=list, description="VMs placed on this host")
    history: Optional[UtilizationHistory] = Field(
        default=None, description="Rolling utilization history, if supported"
    )

    @classmethod
    def with_history(
        cls,
        host_id: str,
        capacity_mips: float,
        vms: Sequence[Vm] = (),
        samples: Sequence[float] = (),
        window: int = DEFAULT_WINDOW,
        **kwargs,
    ) -> Host:
        """Build a history-capable host, optionally seeding its window."""
        return cls(
            id=host_id,
            capacity_mips=capacity_mips,
            vm_list=list(vms),
            history=UtilizationHistory(window=window, samples=samples),
            **kwargs,
        )

    # -- capability contract ---------------------------------------------------

    def has_utilization_history(self) -> bool:
        return self.history is not None

    def utilization_history(self) -> tuple[float, ...]:
        if self.history is None:
            raise AttributeError(f"Host {self.id} does not keep a utilization history")
        return self.history.values()

    def vms(self) -> list[Vm]:
        return self.vm_list

    def total_capacity(self) -> float:
        return self.capacity_mips

    # -- derived values --------------------------------------------------------

    @computed_field  # type: ignore[prop-decorator]
    @property
    def requested_mips(self) -> float:
        """Sum of the capacity currently requested by all VMs."""
        return round(sum(vm.current_requested_capacity() for vm in self.vm_list), 4)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def utilization_ratio(self) -> float:
        """Requested capacity as a fraction of total capacity (may exceed 1.0)."""
        return requested_capacity_ratio(self)


def requested_capacity_ratio(host) -> float:
    """Instantaneous requested-capacity ratio of any host-like object."""
    total_requested = 0.0
    for vm in host.vms():
        total_requested += vm.current_requested_capacity()
    capacity = host.total_capacity()
    if capacity <= 0:
        return 0.0
    return total_requested / capacity


# ---------------------------------------------------------------------------
# Detection results
# ---------------------------------------------------------------------------

class DecisionRecord(BaseModel):
    """Outcome of a single over-utilization check for one host.

    ``computed_threshold`` and ``utilization_ratio`` are ``None`` when the
    decision was delegated to a fallback policy.
    """

    model_config = {"frozen": True}

    host_id: str = Field(..., description="Identifier of the evaluated host")
    tick: int = Field(default=0, ge=0, description="Monitoring tick of the decision")
    computed_threshold: Optional[float] = Field(
        default=None, description="Dynamic upper utilization threshold"
    )
    utilization_ratio: Optional[float] = Field(
        default=None, ge=0, description="Requested capacity / total capacity"
    )
    is_over_utilized: bool = Field(..., description="Whether the host was flagged")
    estimator: Optional[str] = Field(
        default=None, description="Name of the estimator that produced the threshold"
    )
    delegated: bool = Field(
        default=False, description="True if a fallback policy made the decision"
    )


class ThresholdEntry(BaseModel):
    """A threshold value recorded for one host at one tick."""

    model_config = {"frozen": True}

    host_id: str
    tick: int = Field(..., ge=0)
    threshold: float


class MonitorReport(BaseModel):
    """Aggregated results of a multi-tick monitoring run."""

    policy_name: str = Field(..., description="Name of the primary detection policy")
    profile_name: str = Field(default="", description="Fleet profile that was simulated")
    ticks: int = Field(..., ge=0)
    host_count: int = Field(..., ge=0)
    records: list[DecisionRecord] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def flagged_per_tick(self) -> list[int]:
        """Number of hosts flagged over-utilized at each tick."""
        counts = [0] * self.ticks
        for record in self.records:
            if record.is_over_utilized and record.tick < self.ticks:
                counts[record.tick] += 1
        return counts

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_flagged(self) -> int:
        return sum(1 for r in self.records if r.is_over_utilized)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def delegated_count(self) -> int:
        return sum(1 for r in self.records if r.delegated)

    def flagged_hosts(self) -> dict[str, int]:
        """Map host id to the number of ticks it was flagged, most flagged first."""
        counts: dict[str, int] = {}
        for record in self.records:
            if record.is_over_utilized:
                counts[record.host_id] = counts.get(record.host_id, 0) + 1
        return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Simulated host fleet generator.

Given a :class:`FleetProfile` and an optional random seed, this module
builds a list of :class:`Host` objects with VMs attached, and redraws the
VMs' requested capacity on every monitoring tick.

All randomness flows through a seeded :class:`numpy.random.Generator`
so that identical seeds always produce identical fleets and demand.
"""

from __future__ import annotations

import numpy as np

from host_overload.data.history import UtilizationHistory
from host_overload.data.models import Host, Vm
from host_overload.data.profiles import FleetProfile


class FleetGenerator:
    """Generate hosts and per-tick VM demand from a profile.

    Parameters
    ----------
    profile:
        The fleet profile that governs all generation parameters.
    seed:
        Optional RNG seed for reproducibility.  When *None*, a random
        seed is chosen by NumPy.
    """

    def __init__(self, profile: FleetProfile, seed: int | None = None) -> None:
        self.profile = profile
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self._base_load: dict[str, float] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self) -> list[Host]:
        """Build the fleet with initial VM demand and empty histories."""
        p = self.profile
        rng = self.rng

        legacy_count = int(round(p.host_count * p.no_history_fraction))
        legacy_indices = set(rng.permutation(p.host_count)[:legacy_count].tolist())

        hosts: list[Host] = []
        for idx in range(p.host_count):
            host_id = f"host-{idx + 1:03d}"
            vm_count = int(rng.integers(p.min_vms_per_host, p.max_vms_per_host + 1))
            vms = [self._make_vm(host_id, seq) for seq in range(vm_count)]
            history = None
            if idx not in legacy_indices:
                history = UtilizationHistory(window=p.history_window)
            hosts.append(
                Host(
                    id=host_id,
                    name=f"{'legacy' if history is None else 'node'}-{idx + 1:03d}",
                    capacity_mips=float(rng.choice(p.host_mips_choices)),
                    vm_list=vms,
                    history=history,
                )
            )

        self.advance(hosts)
        return hosts

    def advance(self, hosts: list[Host]) -> None:
        """Redraw the requested capacity of every VM for the next tick."""
        for host in hosts:
            for vm in host.vm_list:
                vm.requested_mips = round(vm.max_mips * self._draw_load(vm.id), 2)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _make_vm(self, host_id: str, seq: int) -> Vm:
        p = self.profile
        vm_id = f"{host_id}-vm{seq + 1}"
        self._base_load[vm_id] = float(self.rng.beta(p.load_alpha, p.load_beta))
        return Vm(id=vm_id, max_mips=float(self.rng.choice(p.vm_mips_choices)))

    def _draw_load(self, vm_id: str) -> float:
        p = self.profile
        rng = self.rng

        if rng.random() < p.idle_probability:
            return 0.0
        load = self._base_load.get(vm_id, 0.5) + float(rng.normal(0.0, p.volatility))
        if rng.random() < p.burst_probability:
            load += p.burst_size
        return float(np.clip(load, 0.0, 1.0))

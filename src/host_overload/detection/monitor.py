# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Tick-driven monitoring loop.

Stands in for the consolidation controller: on every tick it lets VM
demand evolve, appends each host's observed utilization to its history
and asks the policy for a decision, once per host.
"""

from __future__ import annotations

import logging

from host_overload.data.generator import FleetGenerator
from host_overload.data.models import DecisionRecord, Host, MonitorReport
from host_overload.detection.contracts import host_identifier
from host_overload.detection.recorder import ThresholdHistoryRecorder

logger = logging.getLogger(__name__)


class OverloadMonitor:
    """Run a detection policy over a simulated fleet.

    Usage::

        generator = FleetGenerator(get_profile("bursty"), seed=42)
        recorder = ThresholdHistoryRecorder()
        policy = build_policy("whale", 1.5, recorder=recorder)
        report = OverloadMonitor(policy, generator, recorder=recorder).run(48)
    """

    def __init__(
        self,
        policy,
        generator: FleetGenerator,
        recorder: ThresholdHistoryRecorder | None = None,
        hosts: list[Host] | None = None,
    ) -> None:
        self.policy = policy
        self.generator = generator
        self.recorder = recorder
        self.hosts = hosts if hosts is not None else generator.generate()
        self.tick = 0

    def step(self) -> list[DecisionRecord]:
        """Advance one tick and evaluate every host."""
        if self.tick > 0:
            self.generator.advance(self.hosts)
        if self.recorder is not None:
            self.recorder.set_tick(self.tick)

        records: list[DecisionRecord] = []
        for host in self.hosts:
            if host.history is not None:
                host.history.append(host.utilization_ratio)
            records.append(self._decide(host))

        flagged = sum(1 for r in records if r.is_over_utilized)
        logger.debug("Tick %d: %d of %d hosts over-utilized", self.tick, flagged, len(records))
        self.tick += 1
        return records

    def run(self, ticks: int) -> MonitorReport:
        """Run *ticks* monitoring intervals and return the aggregated report."""
        if ticks < 0:
            raise ValueError(f"Tick count cannot be negative, got {ticks}")
        policy_name = getattr(self.policy, "name", type(self.policy).__name__)
        logger.info(
            "Monitoring %d hosts for %d ticks with policy '%s'",
            len(self.hosts), ticks, policy_name,
        )

        start = self.tick
        records: list[DecisionRecord] = []
        for _ in range(ticks):
            records.extend(self.step())

        report = MonitorReport(
            policy_name=policy_name,
            profile_name=self.generator.profile.name,
            ticks=ticks,
            host_count=len(self.hosts),
            records=[r.model_copy(update={"tick": r.tick - start}) for r in records],
        )
        logger.info(
            "Finished monitoring: %d over-utilization flags, %d fallback decisions",
            report.total_flagged, report.delegated_count,
        )
        return report

    def _decide(self, host: Host) -> DecisionRecord:
        decide = getattr(self.policy, "decide", None)
        if decide is not None:
            return decide(host, tick=self.tick)
        return DecisionRecord(
            host_id=host_identifier(host),
            tick=self.tick,
            is_over_utilized=bool(self.policy.is_over_utilized(host)),
        )

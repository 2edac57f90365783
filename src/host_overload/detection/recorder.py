# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Threshold history recorders."""

from __future__ import annotations

from collections.abc import Callable

from host_overload.data.models import ThresholdEntry
from host_overload.detection.contracts import HostLike, host_identifier


class ThresholdHistoryRecorder:
    """Append-only, per-host log of computed thresholds.

    Entries are stamped with the current tick as reported by *clock*.
    Writes for many hosts may interleave freely within a tick; each host
    keeps its own list, so its entries stay in write order.

    Usage::

        recorder = ThresholdHistoryRecorder()
        policy = OverutilizationPolicy(..., recorder=recorder)
        recorder.set_tick(3)
        policy.is_over_utilized(host)
        recorder.entries_for(host.id)
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock
        self._tick = 0
        self._entries: dict[str, list[ThresholdEntry]] = {}

    def set_tick(self, tick: int) -> None:
        """Set the tick used to stamp entries when no clock is attached."""
        self._tick = tick

    def current_tick(self) -> int:
        return self._clock() if self._clock is not None else self._tick

    def record(self, host: HostLike, threshold: float) -> None:
        host_id = host_identifier(host)
        entry = ThresholdEntry(host_id=host_id, tick=self.current_tick(), threshold=threshold)
        self._entries.setdefault(host_id, []).append(entry)

    def entries_for(self, host_id: str) -> list[ThresholdEntry]:
        """Entries for one host, oldest first.  Returns a copy."""
        return list(self._entries.get(host_id, []))

    def thresholds_for(self, host_id: str) -> list[float]:
        return [entry.threshold for entry in self._entries.get(host_id, [])]

    def host_ids(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())


class NullRecorder:
    """Recorder that discards everything."""

    def record(self, host: HostLike, threshold: float) -> None:
        return None

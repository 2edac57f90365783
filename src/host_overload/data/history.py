# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Rolling per-host utilization history.

A history holds one utilization sample per elapsed monitoring interval,
oldest first.  A freshly created history is filled with zeros; the zeros
are pushed out from the front as real samples arrive, so a leading run of
zeros means the host has not been observed long enough yet.
"""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Iterable

# Number of samples retained per host (CloudSim's HISTORY_LENGTH).
DEFAULT_WINDOW = 30


def count_leading_nonzero(values: Iterable[float]) -> int:
    """Count consecutive non-zero samples from the start, stopping at the first zero.

    This is not a total non-zero count: ``[1, 0, 1, 1]`` yields ``1``.
    """
    count = 0
    for value in values:
        if value == 0:
            break
        count += 1
    return count


class UtilizationHistory:
    """Bounded, oldest-first window of utilization samples for one host.

    Parameters
    ----------
    window:
        Number of samples kept.  Must be at least 1.
    samples:
        Optional initial samples, oldest first.  When fewer than *window*
        samples are given the history is left-padded with zeros.
    """

    def __init__(self, window: int = DEFAULT_WINDOW, samples: Iterable[float] | None = None) -> None:
        if window < 1:
            raise ValueError(f"History window must be at least 1, got {window}")
        self.window = window
        self._samples: deque[float] = deque([0.0] * window, maxlen=window)
        if samples is not None:
            self.extend(samples)

    def append(self, sample: float) -> None:
        """Push a new sample at the end, dropping the oldest one."""
        value = float(sample)
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"Utilization sample must be a finite value >= 0, got {sample!r}")
        self._samples.append(value)

    def extend(self, samples: Iterable[float]) -> None:
        for sample in samples:
            self.append(sample)

    def values(self) -> tuple[float, ...]:
        """Return an immutable oldest-first snapshot of the window."""
        return tuple(self._samples)

    def warmed_up_samples(self) -> int:
        """Length of the leading non-zero run of the current window."""
        return count_leading_nonzero(self._samples)

    @property
    def latest(self) -> float:
        return self._samples[-1]

    def __len__(self) -> int:
        return len(self._samples)

    def __repr__(self) -> str:
        return f"UtilizationHistory(window={self.window}, warmed_up={self.warmed_up_samples()})"

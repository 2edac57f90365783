# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Threshold estimators.

Each estimator condenses a host's utilization history into one scalar.
The policy subtracts ``sensitivity * estimate`` from 1.0 to obtain the
host's dynamic upper utilization threshold, so a larger estimate means a
lower threshold and earlier migration.

Three strategies are provided:

- :class:`MeanEstimator` -- mean of the strictly positive samples.  Used
  for every host whose history is not yet warmed up.
- :class:`WhaleSearchEstimator` -- the history minimum pulled towards
  zero by an exploration factor.
- :class:`SparrowSearchEstimator` -- a random descent that starts at the
  history median and never moves upwards.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

import numpy as np

from host_overload.detection.random_source import get_random_source
from host_overload.errors import ConfigurationError, InvalidHistoryError

SPARROW_STEP_SIZE = 0.1


def as_samples(history: Iterable[float]) -> tuple[float, ...]:
    """Convert *history* to a tuple of finite floats.

    Raises
    ------
    InvalidHistoryError
        If the history is not iterable or holds a value that is not a
        finite number.
    """
    try:
        samples = tuple(float(value) for value in history)
    except (TypeError, ValueError) as exc:
        raise InvalidHistoryError(f"Utilization history is not numeric: {exc}") from exc
    for value in samples:
        if not math.isfinite(value):
            raise InvalidHistoryError(f"Utilization history contains non-finite sample {value}")
    return samples


def _finite_parameter(parameter: str, value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"{parameter} must be a number, got {value!r}", parameter=parameter, value=value
        ) from None
    if not math.isfinite(number):
        raise ConfigurationError(
            f"{parameter} must be finite, got {value!r}", parameter=parameter, value=value
        )
    return number


def _require_samples(history: Iterable[float]) -> tuple[float, ...]:
    samples = as_samples(history)
    if not samples:
        raise InvalidHistoryError("Utilization history is empty")
    return samples


def mean_of_positive(history: Iterable[float]) -> float:
    """Mean of the strictly positive samples; 0.0 if there are none.

    Zero and negative samples are excluded from both the sum and the count.
    """
    total = 0.0
    count = 0
    for value in as_samples(history):
        if value > 0:
            total += value
            count += 1
    return 0.0 if count == 0 else total / count


def median(history: Sequence[float]) -> float:
    """Standard median over a sorted copy of *history*.

    Even lengths average the two middle elements.  The input is left
    untouched.
    """
    samples = _require_samples(history)
    return float(np.median(np.asarray(samples, dtype=float)))


class MeanEstimator:
    """Arithmetic mean of strictly positive samples."""

    name = "mean"

    def estimate(self, history: Sequence[float]) -> float:
        return mean_of_positive(history)

    def __repr__(self) -> str:
        return "MeanEstimator()"


class WhaleSearchEstimator:
    """Scaled minimum of the history.

    ``estimate = min(history) * (1 - exploration_factor)``.  An exploration
    factor of 0 returns the minimum unchanged, 1 collapses it to 0.  This
    is a single step; there is no population and no iteration.

    Parameters
    ----------
    exploration_factor:
        How far the minimum is pulled towards zero.  Must lie in ``[0, 1]``.
    """

    name = "whale"

    def __init__(self, exploration_factor: float = 0.5) -> None:
        factor = _finite_parameter("exploration_factor", exploration_factor)
        if not 0 <= factor <= 1:
            raise ConfigurationError(
                f"Exploration factor must be between 0 and 1, got {exploration_factor}",
                parameter="exploration_factor",
                value=exploration_factor,
            )
        self.exploration_factor = factor

    def estimate(self, history: Sequence[float]) -> float:
        best_solution = min(_require_samples(history))
        return best_solution * (1 - self.exploration_factor)

    def __repr__(self) -> str:
        return f"WhaleSearchEstimator(exploration_factor={self.exploration_factor})"


class SparrowSearchEstimator:
    """Random non-increasing descent from the history median.

    The leader starts at the median of the whole history (zeros included).
    For as many iterations as the history is long, a perturbation
    ``r ~ U[-0.5, 0.5)`` is drawn and the leader becomes
    ``min(leader, leader + step_size * r)``.  The final leader is returned
    as is; it may drop below zero when the median is close to zero.

    Parameters
    ----------
    rng:
        Generator used for the perturbations.  When *None* the shared
        process-wide source from :mod:`host_overload.detection.random_source`
        is used at call time, so reseeding it takes effect immediately.
    step_size:
        Scale of each perturbation.  Must be non-negative.
    """

    name = "sparrow"

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        step_size: float = SPARROW_STEP_SIZE,
    ) -> None:
        step = _finite_parameter("step_size", step_size)
        if step < 0:
            raise ConfigurationError(
                f"Step size cannot be less than zero, got {step_size}",
                parameter="step_size",
                value=step_size,
            )
        self.rng = rng
        self.step_size = step

    def estimate(self, history: Sequence[float]) -> float:
        samples = _require_samples(history)
        rng = self.rng if self.rng is not None else get_random_source()

        leader = median(samples)
        for _ in range(len(samples)):
            rand_factor = rng.random() - 0.5
            candidate = leader + self.step_size * rand_factor
            leader = min(leader, candidate)
        return leader

    def __repr__(self) -> str:
        return f"SparrowSearchEstimator(step_size={self.step_size})"


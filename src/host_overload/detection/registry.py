# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Named construction of detection policies.

Simulation runners identify a policy by a short name and a textual
parameter, e.g. ``("whale", "1.5")``.  :func:`build_policy` turns such a
pair into a ready policy whose fallback chain ends in a static threshold.
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np

from host_overload.detection.contracts import HistoryRecorder, OverutilizationDetector
from host_overload.detection.estimators import (
    MeanEstimator,
    SparrowSearchEstimator,
    WhaleSearchEstimator,
)
from host_overload.detection.policy import (
    DEFAULT_SAFETY_THRESHOLD,
    WARMUP_SAMPLES,
    OverutilizationPolicy,
    StaticThresholdPolicy,
)
from host_overload.errors import ConfigurationError


def _parse_parameter(parameter: float | str) -> float:
    try:
        return float(parameter)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Policy parameter must be numeric, got {parameter!r}",
            parameter="parameter",
            value=parameter,
        ) from None


def _mean_estimator(exploration_factor: float, rng: np.random.Generator | None) -> MeanEstimator:
    return MeanEstimator()


def _whale_estimator(exploration_factor: float, rng: np.random.Generator | None) -> WhaleSearchEstimator:
    return WhaleSearchEstimator(exploration_factor=exploration_factor)


def _sparrow_estimator(exploration_factor: float, rng: np.random.Generator | None) -> SparrowSearchEstimator:
    return SparrowSearchEstimator(rng=rng)


_ESTIMATOR_FACTORIES: dict[str, Callable[..., object]] = {
    "mean": _mean_estimator,
    "whale": _whale_estimator,
    "sparrow": _sparrow_estimator,
}

POLICY_DESCRIPTIONS: dict[str, str] = {
    "mean": "Mean of positive history samples (parameter: sensitivity)",
    "whale": "Whale search, scaled history minimum (parameter: sensitivity)",
    "sparrow": "Sparrow search, random descent from the median (parameter: sensitivity)",
    "static": "Fixed utilization threshold (parameter: threshold in [0, 1])",
}


def available_policies() -> list[str]:
    """Names accepted by :func:`build_policy`."""
    return sorted(POLICY_DESCRIPTIONS)


def build_policy(
    name: str,
    parameter: float | str,
    *,
    fallback: OverutilizationDetector | None = None,
    exploration_factor: float = 0.5,
    recorder: HistoryRecorder | None = None,
    rng: np.random.Generator | None = None,
    safety_threshold: float = DEFAULT_SAFETY_THRESHOLD,
    warmup_samples: int = WARMUP_SAMPLES,
) -> OverutilizationPolicy | StaticThresholdPolicy:
    """Build the policy registered under *name*.

    Args:
        name: One of :func:`available_policies`.
        parameter: Sensitivity for the adaptive policies, or the fixed
            utilization threshold for ``"static"``.  Numeric strings are
            accepted.
        fallback: Policy used when the adaptive policy cannot decide.
            Defaults to ``StaticThresholdPolicy(safety_threshold)``.
        exploration_factor: Only used by ``"whale"``.
        recorder: Sink for computed thresholds.
        rng: Random generator for ``"sparrow"``; the shared source is used
            when omitted.
        safety_threshold: Threshold of the default static fallback.
        warmup_samples: Leading non-zero samples required before the
            search estimator is used.

    Raises:
        KeyError: If *name* is not registered.
        ConfigurationError: If any parameter is invalid.
    """
    if name not in POLICY_DESCRIPTIONS:
        available = ", ".join(available_policies())
        raise KeyError(f"Unknown policy '{name}'. Available policies: {available}")

    value = _parse_parameter(parameter)
    if name == "static":
        return StaticThresholdPolicy(utilization_threshold=value, recorder=recorder)

    if fallback is None:
        fallback = StaticThresholdPolicy(utilization_threshold=safety_threshold)
    estimator = _ESTIMATOR_FACTORIES[name](exploration_factor, rng)
    return OverutilizationPolicy(
        estimator=estimator,
        sensitivity=value,
        fallback=fallback,
        recorder=recorder,
        warmup_samples=warmup_samples,
    )

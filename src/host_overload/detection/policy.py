# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Host over-utilization policies.

:class:`OverutilizationPolicy` combines a search-based
:mod:`threshold estimator <host_overload.detection.estimators>` with a
warm-up rule and a fallback policy::

    threshold = 1 - sensitivity * estimate
    over_utilized = requested_capacity / total_capacity > threshold

Hosts that do not keep a utilization history, and hosts whose history
cannot be estimated, are handed to the fallback.  Fallbacks compose into
a chain that normally ends in a :class:`StaticThresholdPolicy`.
"""

from __future__ import annotations

import logging
import math

from host_overload.data.history import count_leading_nonzero
from host_overload.data.models import DecisionRecord, requested_capacity_ratio
from host_overload.detection.contracts import (
    HistoryRecorder,
    HostLike,
    OverutilizationDetector,
    ThresholdEstimator,
    UtilizationHistoryHost,
    host_identifier,
)
from host_overload.detection.estimators import MeanEstimator, as_samples
from host_overload.errors import ConfigurationError, InvalidHistoryError

logger = logging.getLogger(__name__)

# Leading non-zero samples required before the search estimator is trusted.
WARMUP_SAMPLES = 12

# Utilization threshold of the static fallback in the PlanetLab runners.
DEFAULT_SAFETY_THRESHOLD = 0.7


def _check_non_negative(name: str, value: float) -> float:
    parameter = name.replace(" ", "_")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"The {name} must be a number, got {value!r}", parameter=parameter, value=value
        ) from None
    if math.isnan(number) or math.isinf(number):
        raise ConfigurationError(
            f"The {name} must be a finite number, got {value!r}", parameter=parameter, value=value
        )
    if number < 0:
        raise ConfigurationError(
            f"The {name} cannot be less than zero. The passed value is: {value}",
            parameter=parameter,
            value=value,
        )
    return number


class StaticThresholdPolicy:
    """Flags a host when its requested-capacity ratio exceeds a fixed threshold.

    Works for every host, with or without utilization history, which makes
    it the usual last link of a fallback chain.
    """

    name = "static"

    def __init__(
        self,
        utilization_threshold: float = DEFAULT_SAFETY_THRESHOLD,
        recorder: HistoryRecorder | None = None,
    ) -> None:
        threshold = _check_non_negative("utilization threshold", utilization_threshold)
        if threshold > 1:
            raise ConfigurationError(
                f"The utilization threshold must be between 0 and 1, got {utilization_threshold}",
                parameter="utilization_threshold",
                value=utilization_threshold,
            )
        self.utilization_threshold = threshold
        self.recorder = recorder

    def decide(self, host: HostLike, tick: int = 0) -> DecisionRecord:
        if self.recorder is not None:
            self.recorder.record(host, self.utilization_threshold)
        ratio = requested_capacity_ratio(host)
        return DecisionRecord(
            host_id=host_identifier(host),
            tick=tick,
            computed_threshold=self.utilization_threshold,
            utilization_ratio=ratio,
            is_over_utilized=ratio > self.utilization_threshold,
            estimator=self.name,
        )

    def is_over_utilized(self, host: HostLike) -> bool:
        return self.decide(host).is_over_utilized

    def __repr__(self) -> str:
        return f"StaticThresholdPolicy(utilization_threshold={self.utilization_threshold})"


class OverutilizationPolicy:
    """Adaptive over-utilization detector with a dynamic threshold.

    Parameters
    ----------
    estimator:
        Search-based estimator used once a host's history is warmed up.
    sensitivity:
        How strongly the estimate lowers the threshold from 1.0.  Must be
        non-negative.
    fallback:
        Policy consulted for hosts without history and for histories the
        estimator rejects.  Held by reference, never copied.
    recorder:
        Optional sink receiving every computed threshold.
    warmup_samples:
        Minimum leading non-zero run before *estimator* is used instead of
        the mean.

    Raises
    ------
    ConfigurationError
        If any parameter is invalid.  No instance is created in that case.
    """

    def __init__(
        self,
        estimator: ThresholdEstimator,
        sensitivity: float,
        fallback: OverutilizationDetector,
        recorder: HistoryRecorder | None = None,
        warmup_samples: int = WARMUP_SAMPLES,
    ) -> None:
        self.sensitivity = _check_non_negative("sensitivity parameter", sensitivity)
        if not isinstance(estimator, ThresholdEstimator):
            raise ConfigurationError(
                f"Estimator {estimator!r} does not provide estimate()",
                parameter="estimator",
                value=estimator,
            )
        if not isinstance(fallback, OverutilizationDetector):
            raise ConfigurationError(
                f"Fallback {fallback!r} does not provide is_over_utilized()",
                parameter="fallback",
                value=fallback,
            )
        if isinstance(warmup_samples, bool) or not isinstance(warmup_samples, int) or warmup_samples < 1:
            raise ConfigurationError(
                f"Warm-up length must be a positive integer, got {warmup_samples!r}",
                parameter="warmup_samples",
                value=warmup_samples,
            )
        self.estimator = estimator
        self.fallback = fallback
        self.recorder = recorder
        self.warmup_samples = warmup_samples
        self._mean = MeanEstimator()

    @property
    def name(self) -> str:
        return self.estimator.name

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def is_over_utilized(self, host: HostLike) -> bool:
        """Return whether *host* should be considered for VM migration."""
        return self.decide(host).is_over_utilized

    def decide(self, host: HostLike, tick: int = 0) -> DecisionRecord:
        """Evaluate *host* and return the full decision record."""
        host_id = host_identifier(host)
        if not (isinstance(host, UtilizationHistoryHost) and host.has_utilization_history()):
            logger.debug("Host %s keeps no utilization history, using fallback", host_id)
            return self._delegate(host, tick)

        try:
            estimator, estimate = self._estimate(host.utilization_history())
        except InvalidHistoryError as exc:
            logger.warning("Invalid utilization history for host %s: %s", host_id, exc)
            return self._delegate(host, tick)

        threshold = self.threshold_for(estimate)
        if self.recorder is not None:
            self.recorder.record(host, threshold)

        ratio = requested_capacity_ratio(host)
        return DecisionRecord(
            host_id=host_id,
            tick=tick,
            computed_threshold=threshold,
            utilization_ratio=ratio,
            is_over_utilized=ratio > threshold,
            estimator=estimator.name,
        )

    def threshold_for(self, estimate: float) -> float:
        """Dynamic upper utilization threshold for a given estimate."""
        return 1 - self.sensitivity * estimate

    def select_estimator(self, history) -> ThresholdEstimator:
        """Search estimator for warmed-up histories, mean otherwise."""
        if count_leading_nonzero(history) >= self.warmup_samples:
            return self.estimator
        return self._mean

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _estimate(self, history) -> tuple[ThresholdEstimator, float]:
        samples = as_samples(history)
        if not samples:
            raise InvalidHistoryError("Utilization history is empty")
        if any(value < 0 for value in samples):
            raise InvalidHistoryError("Utilization history contains negative samples")
        estimator = self.select_estimator(samples)
        return estimator, estimator.estimate(samples)

    def _delegate(self, host: HostLike, tick: int) -> DecisionRecord:
        return DecisionRecord(
            host_id=host_identifier(host),
            tick=tick,
            is_over_utilized=bool(self.fallback.is_over_utilized(host)),
            delegated=True,
        )

    def __repr__(self) -> str:
        return (
            f"OverutilizationPolicy(estimator={self.estimator!r}, "
            f"sensitivity={self.sensitivity}, fallback={self.fallback!r})"
        )

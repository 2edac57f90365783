# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Tests for the threshold estimators."""

from __future__ import annotations

import numpy as np
import pytest

from host_overload.detection.estimators import (
    MeanEstimator,
    SparrowSearchEstimator,
    WhaleSearchEstimator,
    mean_of_positive,
    median,
)
from host_overload.detection.random_source import get_random_source, seed_random_source
from host_overload.errors import ConfigurationError, InvalidHistoryError


class TestMean:
    """Tests for the mean of positive samples."""

    def test_empty_history(self):
        assert MeanEstimator().estimate([]) == 0

    def test_all_zero_history(self):
        assert MeanEstimator().estimate([0, 0, 0]) == 0

    def test_excludes_zero_and_negative(self):
        assert MeanEstimator().estimate([2, 0, 4, -1, 6]) == pytest.approx(4.0)

    def test_non_numeric_raises(self):
        with pytest.raises(InvalidHistoryError):
            mean_of_positive([0.5, "busy"])

    def test_nan_raises(self):
        with pytest.raises(InvalidHistoryError):
            mean_of_positive([0.5, float("nan")])


class TestMedian:
    """Tests for the median used to seed the sparrow leader."""

    def test_even_length(self):
        assert median([1, 2, 3, 4]) == 2.5

    def test_odd_length(self):
        assert median([1, 2, 3]) == 2

    def test_unsorted_input_left_untouched(self):
        history = [4.0, 1.0, 3.0, 2.0]
        assert median(history) == 2.5
        assert history == [4.0, 1.0, 3.0, 2.0]

    def test_zeros_are_included(self):
        assert median([0, 0, 0, 5, 5]) == 0

    def test_empty_raises(self):
        with pytest.raises(InvalidHistoryError):
            median([])


class TestWhaleSearch:
    """Tests for the scaled-minimum estimator."""

    @pytest.mark.parametrize("factor,expected", [(0.5, 2.5), (0.0, 5.0), (1.0, 0.0)])
    def test_constant_history(self, factor: float, expected: float):
        estimator = WhaleSearchEstimator(exploration_factor=factor)
        assert estimator.estimate([5.0] * 12) == pytest.approx(expected)

    def test_uses_minimum_of_whole_history(self):
        estimator = WhaleSearchEstimator(exploration_factor=0.0)
        history = [0.9] * 12 + [0.0, 0.4]
        assert estimator.estimate(history) == 0.0

    def test_result_bounded_by_minimum(self):
        history = [0.3, 0.8, 0.5, 0.6] * 4
        for factor in (0.0, 0.1, 0.25, 0.9):
            value = WhaleSearchEstimator(exploration_factor=factor).estimate(history)
            assert 0.0 <= value <= 0.3

    @pytest.mark.parametrize("factor", [-0.01, 1.01, float("nan"), float("inf"), None, "half", "1.5"])
    def test_invalid_exploration_factor(self, factor: float):
        with pytest.raises(ConfigurationError) as excinfo:
            WhaleSearchEstimator(exploration_factor=factor)
        assert excinfo.value.parameter == "exploration_factor"

    def test_numeric_string_factor_is_coerced(self):
        estimator = WhaleSearchEstimator(exploration_factor="0.5")
        assert estimator.exploration_factor == 0.5
        assert estimator.estimate([4.0] * 12) == pytest.approx(2.0)

    def test_empty_history_raises(self):
        with pytest.raises(InvalidHistoryError):
            WhaleSearchEstimator().estimate([])


class TestSparrowSearch:
    """Tests for the random-descent estimator."""

    HISTORY = [0.62, 0.55, 0.71, 0.48, 0.66, 0.59, 0.73, 0.51, 0.64, 0.58, 0.69, 0.6, 0.57, 0.65]

    def test_never_exceeds_initial_median(self):
        start = median(self.HISTORY)
        for seed in range(25):
            estimator = SparrowSearchEstimator(rng=np.random.default_rng(seed))
            assert estimator.estimate(self.HISTORY) <= start

    def test_seeded_generators_reproduce(self):
        first = SparrowSearchEstimator(rng=np.random.default_rng(7)).estimate(self.HISTORY)
        second = SparrowSearchEstimator(rng=np.random.default_rng(7)).estimate(self.HISTORY)
        assert first == second

    def test_matches_reference_descent(self):
        rng = np.random.default_rng(99)
        leader = median(self.HISTORY)
        for _ in range(len(self.HISTORY)):
            leader = min(leader, leader + 0.1 * (rng.random() - 0.5))

        estimator = SparrowSearchEstimator(rng=np.random.default_rng(99))
        assert estimator.estimate(self.HISTORY) == pytest.approx(leader)

    def test_shared_source_reseeding_reproduces(self):
        estimator = SparrowSearchEstimator()
        seed_random_source(3)
        first = estimator.estimate(self.HISTORY)
        seed_random_source(3)
        second = estimator.estimate(self.HISTORY)
        assert first == second

    def test_shared_source_advances_between_calls(self):
        estimator = SparrowSearchEstimator()
        before = get_random_source().bit_generator.state
        estimator.estimate(self.HISTORY)
        assert get_random_source().bit_generator.state != before

    def test_zero_step_returns_median(self):
        estimator = SparrowSearchEstimator(step_size=0.0)
        assert estimator.estimate(self.HISTORY) == median(self.HISTORY)

    def test_descent_bounded_by_step_budget(self):
        estimator = SparrowSearchEstimator(rng=np.random.default_rng(11))
        start = median(self.HISTORY)
        # Each iteration lowers the leader by at most step_size * 0.5.
        assert estimator.estimate(self.HISTORY) >= start - 0.05 * len(self.HISTORY)

    def test_descends_below_zero_from_zero_median(self):
        history = [0.02] * 12 + [0.0] * 18
        rng = np.random.default_rng(0)
        leader = 0.0
        for _ in range(len(history)):
            leader = min(leader, leader + 0.1 * (rng.random() - 0.5))

        value = SparrowSearchEstimator(rng=np.random.default_rng(0)).estimate(history)
        assert value == pytest.approx(leader)
        assert value < 0.0

    def test_history_not_mutated(self):
        history = list(reversed(self.HISTORY))
        snapshot = list(history)
        SparrowSearchEstimator(rng=np.random.default_rng(0)).estimate(history)
        assert history == snapshot

    def test_negative_step_size_raises(self):
        with pytest.raises(ConfigurationError):
            SparrowSearchEstimator(step_size=-0.1)

    @pytest.mark.parametrize("step", [None, "wide", float("inf")])
    def test_invalid_step_size_raises(self, step):
        with pytest.raises(ConfigurationError) as excinfo:
            SparrowSearchEstimator(step_size=step)
        assert excinfo.value.parameter == "step_size"

    def test_empty_history_raises(self):
        with pytest.raises(InvalidHistoryError):
            SparrowSearchEstimator().estimate([])

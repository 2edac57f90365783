# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Tests for the rolling utilization history and the threshold recorder."""

from __future__ import annotations

import pytest

from conftest import StubHost
from host_overload.data.history import UtilizationHistory, count_leading_nonzero
from host_overload.detection.recorder import NullRecorder, ThresholdHistoryRecorder


class TestLeadingRun:
    """Tests for count_leading_nonzero()."""

    def test_all_nonzero(self):
        assert count_leading_nonzero([0.1] * 14) == 14

    def test_stops_at_first_zero(self):
        assert count_leading_nonzero([1, 0, 1, 1]) == 1

    def test_leading_zero(self):
        assert count_leading_nonzero([0, 1, 1]) == 0

    def test_empty(self):
        assert count_leading_nonzero([]) == 0


class TestUtilizationHistory:
    """Tests for UtilizationHistory."""

    def test_starts_zero_filled(self):
        history = UtilizationHistory(window=5)
        assert history.values() == (0.0,) * 5
        assert history.warmed_up_samples() == 0

    def test_append_drops_oldest(self):
        history = UtilizationHistory(window=3, samples=[0.1, 0.2, 0.3])
        history.append(0.4)
        assert history.values() == (0.2, 0.3, 0.4)
        assert history.latest == 0.4

    def test_oldest_first_with_padding(self):
        history = UtilizationHistory(window=4, samples=[0.5, 0.6])
        assert history.values() == (0.0, 0.0, 0.5, 0.6)

    def test_warmed_up_after_full_window(self):
        history = UtilizationHistory(window=12)
        for _ in range(11):
            history.append(0.5)
        assert history.warmed_up_samples() == 0
        history.append(0.5)
        assert history.warmed_up_samples() == 12

    def test_values_are_a_snapshot(self):
        history = UtilizationHistory(window=3, samples=[0.1, 0.2, 0.3])
        snapshot = history.values()
        history.append(0.9)
        assert snapshot == (0.1, 0.2, 0.3)

    @pytest.mark.parametrize("bad", [-0.1, float("nan"), float("inf")])
    def test_rejects_invalid_samples(self, bad: float):
        with pytest.raises(ValueError):
            UtilizationHistory(window=3).append(bad)

    def test_rejects_empty_window(self):
        with pytest.raises(ValueError):
            UtilizationHistory(window=0)

    def test_len(self):
        assert len(UtilizationHistory(window=7)) == 7


class TestThresholdHistoryRecorder:
    """Tests for the append-only threshold log."""

    def test_interleaved_writes_keep_host_order(self, recorder: ThresholdHistoryRecorder):
        a = StubHost(host_id="a")
        b = StubHost(host_id="b")
        for tick, (ta, tb) in enumerate([(0.9, 0.8), (0.7, 0.6), (0.5, 0.4)]):
            recorder.set_tick(tick)
            recorder.record(a, ta)
            recorder.record(b, tb)

        assert recorder.thresholds_for("a") == [0.9, 0.7, 0.5]
        assert recorder.thresholds_for("b") == [0.8, 0.6, 0.4]
        assert [e.tick for e in recorder.entries_for("a")] == [0, 1, 2]
        assert len(recorder) == 6
        assert recorder.host_ids() == ["a", "b"]

    def test_clock_stamps_entries(self):
        now = {"tick": 5}
        recorder = ThresholdHistoryRecorder(clock=lambda: now["tick"])
        recorder.record(StubHost(host_id="c"), 0.75)
        now["tick"] = 6
        recorder.record(StubHost(host_id="c"), 0.70)
        assert [e.tick for e in recorder.entries_for("c")] == [5, 6]

    def test_entries_returns_copy(self, recorder: ThresholdHistoryRecorder):
        recorder.record(StubHost(host_id="d"), 0.5)
        recorder.entries_for("d").clear()
        assert len(recorder.entries_for("d")) == 1

    def test_unknown_host(self, recorder: ThresholdHistoryRecorder):
        assert recorder.entries_for("missing") == []

    def test_null_recorder(self):
        assert NullRecorder().record(StubHost(), 0.5) is None

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Threshold estimators, over-utilization policies and the monitoring loop."""

from host_overload.detection.estimators import (
    MeanEstimator,
    SparrowSearchEstimator,
    WhaleSearchEstimator,
)
from host_overload.detection.policy import OverutilizationPolicy, StaticThresholdPolicy
from host_overload.detection.recorder import NullRecorder, ThresholdHistoryRecorder
from host_overload.detection.registry import available_policies, build_policy

__all__ = [
    "MeanEstimator",
    "NullRecorder",
    "OverutilizationPolicy",
    "SparrowSearchEstimator",
    "StaticThresholdPolicy",
    "ThresholdHistoryRecorder",
    "WhaleSearchEstimator",
    "available_policies",
    "build_policy",
]

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Host Overload - adaptive host over-utilization detection."""

__version__ = "0.1.0"

from host_overload.data.history import UtilizationHistory
from host_overload.data.models import DecisionRecord, Host, MonitorReport, Vm
from host_overload.detection.estimators import (
    MeanEstimator,
    SparrowSearchEstimator,
    WhaleSearchEstimator,
)
from host_overload.detection.policy import OverutilizationPolicy, StaticThresholdPolicy
from host_overload.detection.recorder import ThresholdHistoryRecorder
from host_overload.detection.registry import available_policies, build_policy
from host_overload.errors import ConfigurationError, HostOverloadError, InvalidHistoryError

__all__ = [
    "ConfigurationError",
    "DecisionRecord",
    "Host",
    "HostOverloadError",
    "InvalidHistoryError",
    "MeanEstimator",
    "MonitorReport",
    "OverutilizationPolicy",
    "SparrowSearchEstimator",
    "StaticThresholdPolicy",
    "ThresholdHistoryRecorder",
    "UtilizationHistory",
    "Vm",
    "WhaleSearchEstimator",
    "available_policies",
    "build_policy",
]

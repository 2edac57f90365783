# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Host and VM models, utilization history, and simulated fleets."""

from host_overload.data.history import DEFAULT_WINDOW, UtilizationHistory, count_leading_nonzero
from host_overload.data.models import (
    DecisionRecord,
    Host,
    MonitorReport,
    ThresholdEntry,
    Vm,
)
from host_overload.data.profiles import FleetProfile, PROFILES, get_profile
from host_overload.data.generator import FleetGenerator

__all__ = [
    "DEFAULT_WINDOW",
    "DecisionRecord",
    "FleetGenerator",
    "FleetProfile",
    "Host",
    "MonitorReport",
    "PROFILES",
    "ThresholdEntry",
    "UtilizationHistory",
    "Vm",
    "count_leading_nonzero",
    "get_profile",
]

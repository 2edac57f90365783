# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Exception hierarchy for host overload detection."""

from __future__ import annotations

from typing import Any


class HostOverloadError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(HostOverloadError, ValueError):
    """A policy or estimator was constructed with an invalid parameter.

    Raised from constructors so that a half-configured object is never
    handed back to the caller.
    """

    def __init__(self, message: str, parameter: str | None = None, value: Any = None) -> None:
        super().__init__(message)
        self.parameter = parameter
        self.value = value


class InvalidHistoryError(HostOverloadError, ValueError):
    """Utilization history is empty or holds samples no estimator can use."""

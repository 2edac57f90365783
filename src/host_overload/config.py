# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Detection configuration models and YAML loader."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
from pydantic import BaseModel, Field, ValidationError

from host_overload.detection.contracts import HistoryRecorder, OverutilizationDetector
from host_overload.detection.policy import (
    DEFAULT_SAFETY_THRESHOLD,
    WARMUP_SAMPLES,
    StaticThresholdPolicy,
)
from host_overload.detection.registry import build_policy
from host_overload.errors import ConfigurationError


# ---------------------------------------------------------------------------
# Policy configuration
# ---------------------------------------------------------------------------

class PolicyConfig(BaseModel):
    """One link of a detection policy chain."""

    name: str = Field(
        ..., description="Policy name: mean, whale, sparrow or static"
    )
    parameter: float = Field(
        ..., description="Sensitivity, or the fixed threshold for the static policy"
    )
    exploration_factor: float = Field(
        default=0.5, description="Whale search exploration factor"
    )
    warmup_samples: int = Field(
        default=WARMUP_SAMPLES, description="Leading non-zero samples before searching"
    )
    fallback: Optional[PolicyConfig] = Field(
        default=None, description="Next policy in the chain; static 0.7 when omitted"
    )

    def build(
        self,
        recorder: HistoryRecorder | None = None,
        rng: np.random.Generator | None = None,
    ) -> OverutilizationDetector:
        """Instantiate this link and, recursively, its fallbacks.

        Only the head of the chain writes to *recorder*.
        """
        fallback = self.fallback.build(rng=rng) if self.fallback is not None else None
        return build_policy(
            self.name,
            self.parameter,
            fallback=fallback,
            exploration_factor=self.exploration_factor,
            recorder=recorder,
            rng=rng,
            safety_threshold=DEFAULT_SAFETY_THRESHOLD,
            warmup_samples=self.warmup_samples,
        )

    def chain_names(self) -> list[str]:
        """Policy names from the head of the chain to its last link."""
        names = [self.name]
        if self.fallback is not None:
            names.extend(self.fallback.chain_names())
        elif self.name != StaticThresholdPolicy.name:
            names.append(StaticThresholdPolicy.name)
        return names


# ---------------------------------------------------------------------------
# Monitor configuration
# ---------------------------------------------------------------------------

class MonitorConfig(BaseModel):
    """Top-level configuration for a monitoring run, loaded from YAML."""

    profile: str = Field(default="bursty", description="Fleet profile name")
    ticks: int = Field(default=48, ge=1, description="Monitoring ticks to simulate")
    seed: Optional[int] = Field(default=None, description="Seed for fleet and estimators")
    policy: PolicyConfig = Field(
        default_factory=lambda: PolicyConfig(name="whale", parameter=1.5)
    )


def parse_config(raw: dict | None) -> MonitorConfig:
    """Validate a raw mapping into a :class:`MonitorConfig`."""
    try:
        return MonitorConfig.model_validate(raw or {})
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid monitor configuration: {exc}") from exc


def load_config(path: str | Path) -> MonitorConfig:
    """Load a MonitorConfig from a YAML file."""
    import yaml

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    return parse_config(raw)

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Fleet profile presets for simulated workloads.

Each profile configures how the generator builds a fleet of hosts and
VMs and how VM demand evolves from one monitoring tick to the next.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class FleetProfile(BaseModel):
    """Characteristics of a simulated host fleet."""

    name: str = Field(description="Short identifier for the profile")
    description: str = Field(description="Human-readable description of the profile")

    # Fleet shape
    host_count: int = Field(gt=0, description="Number of physical hosts")
    min_vms_per_host: int = Field(ge=0, description="Minimum VMs placed on a host")
    max_vms_per_host: int = Field(ge=0, description="Maximum VMs placed on a host")
    host_mips_choices: list[float] = Field(
        description="Host capacities in MIPS, one picked per host"
    )
    vm_mips_choices: list[float] = Field(
        description="VM capacities in MIPS, one picked per VM"
    )
    no_history_fraction: float = Field(
        default=0.0, ge=0, le=1.0,
        description="Fraction of hosts that keep no utilization history",
    )

    # Demand dynamics (VM utilization as 0-1 fractions)
    load_alpha: float = Field(gt=0, description="Beta distribution alpha of VM base load")
    load_beta: float = Field(gt=0, description="Beta distribution beta of VM base load")
    volatility: float = Field(ge=0, description="Std-dev of per-tick load noise")
    burst_probability: float = Field(
        default=0.0, ge=0, le=1.0, description="Per-tick probability of a load burst"
    )
    burst_size: float = Field(default=0.0, ge=0, description="Extra load added during a burst")
    idle_probability: float = Field(
        default=0.0, ge=0, le=1.0,
        description="Per-tick probability that a VM requests nothing",
    )

    # History
    history_window: int = Field(default=30, ge=1, description="Samples kept per host")


# ---------------------------------------------------------------------------
# Profile definitions
# ---------------------------------------------------------------------------

# HP ProLiant ML110 G4 / G5 (2 cores each), as in the PlanetLab experiments.
_PLANETLAB_HOSTS = [3720.0, 5320.0]
# EC2-like VM types: high-CPU medium, extra large, small, micro.
_PLANETLAB_VMS = [2500.0, 2000.0, 1000.0, 500.0]

STEADY = FleetProfile(
    name="steady",
    description=(
        "Moderately loaded fleet with low-volatility demand; a few hosts "
        "drift above the static threshold."
    ),
    host_count=20,
    min_vms_per_host=1,
    max_vms_per_host=3,
    host_mips_choices=_PLANETLAB_HOSTS,
    vm_mips_choices=_PLANETLAB_VMS,
    load_alpha=3.0,
    load_beta=4.0,
    volatility=0.03,
)

BURSTY = FleetProfile(
    name="bursty",
    description=(
        "PlanetLab-style fleet with noisy demand and frequent short bursts; "
        "a tenth of the hosts are legacy machines without utilization history."
    ),
    host_count=40,
    min_vms_per_host=1,
    max_vms_per_host=4,
    host_mips_choices=_PLANETLAB_HOSTS,
    vm_mips_choices=_PLANETLAB_VMS,
    no_history_fraction=0.10,
    load_alpha=2.0,
    load_beta=5.0,
    volatility=0.10,
    burst_probability=0.08,
    burst_size=0.45,
)

COLD_START = FleetProfile(
    name="cold_start",
    description=(
        "Freshly booted fleet whose VMs are often idle, so histories stay "
        "below the warm-up length for a long time."
    ),
    host_count=12,
    min_vms_per_host=0,
    max_vms_per_host=2,
    host_mips_choices=_PLANETLAB_HOSTS,
    vm_mips_choices=_PLANETLAB_VMS,
    load_alpha=2.0,
    load_beta=3.0,
    volatility=0.05,
    idle_probability=0.15,
    history_window=24,
)


# ---------------------------------------------------------------------------
# Profile registry
# ---------------------------------------------------------------------------

PROFILES: dict[str, FleetProfile] = {
    "steady": STEADY,
    "bursty": BURSTY,
    "cold_start": COLD_START,
}


def get_profile(name: str) -> FleetProfile:
    """Return the profile for the given name.

    Raises
    ------
    KeyError
        If *name* does not match any registered profile.
    """
    try:
        return PROFILES[name]
    except KeyError:
        available = ", ".join(sorted(PROFILES.keys()))
        raise KeyError(
            f"Unknown profile '{name}'. Available profiles: {available}"
        ) from None

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Tests for fleet profile definitions."""

from __future__ import annotations

import pytest

from host_overload.data.profiles import FleetProfile, PROFILES, get_profile


class TestProfiles:
    """Tests for profile registration and retrieval."""

    @pytest.mark.parametrize("name", ["steady", "bursty", "cold_start"])
    def test_get_profile_returns_correct_type(self, name: str):
        profile = get_profile(name)
        assert isinstance(profile, FleetProfile)
        assert profile.name == name

    def test_get_profile_unknown_raises(self):
        with pytest.raises(KeyError):
            get_profile("nonexistent_profile")

    def test_all_profiles_registered(self):
        assert set(PROFILES.keys()) == {"steady", "bursty", "cold_start"}

    @pytest.mark.parametrize("name", list(PROFILES.keys()))
    def test_profile_constraints(self, name: str):
        profile = get_profile(name)
        assert profile.host_count > 0
        assert profile.min_vms_per_host <= profile.max_vms_per_host
        assert all(m > 0 for m in profile.host_mips_choices)
        assert all(m > 0 for m in profile.vm_mips_choices)
        assert 0 <= profile.no_history_fraction <= 1

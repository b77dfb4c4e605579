"""Tests for the FuelEU GHG intensity target schedule."""

import pytest

from src.compliance.targets import (
    REFERENCE_GHG,
    REDUCTION_TARGETS,
    TARGET_GHG_INTENSITY,
    reduction_for,
    schedule,
    target_for,
)


class TestTargetFor:
    def test_published_targets(self):
        """2025 and 2030 targets match the published values."""
        assert target_for(2025) == 89.3368
        assert target_for(2030) == 85.6904

    def test_before_first_band_is_reference(self):
        assert target_for(2020) == REFERENCE_GHG
        assert target_for(2024) == REFERENCE_GHG

    @pytest.mark.parametrize("year,expected", [
        (2026, 89.3368),
        (2029, 89.3368),
        (2034, 85.6904),
        (2035, 77.9418),
        (2040, 62.9004),
        (2045, 34.6408),
        (2050, 18.232),
        (2075, 18.232),
    ])
    def test_band_lookup(self, year, expected):
        assert target_for(year) == expected

    def test_monotone_non_increasing(self):
        targets = [target_for(year) for year in range(2015, 2061)]
        assert all(later <= earlier for earlier, later in zip(targets, targets[1:]))


class TestSchedule:
    def test_constants_consistent_with_percentages(self):
        """Each stored target equals the reference reduced by its percentage."""
        for year, pct in REDUCTION_TARGETS.items():
            expected = REFERENCE_GHG * (1 - pct / 100)
            assert TARGET_GHG_INTENSITY[year] == pytest.approx(expected, abs=1e-4)

    def test_reduction_for(self):
        assert reduction_for(2024) == 0.0
        assert reduction_for(2025) == 2.0
        assert reduction_for(2049) == 62.0
        assert reduction_for(2050) == 80.0

    def test_bands_are_contiguous(self):
        bands = schedule()
        assert bands[0].start_year == 2025
        for band, following in zip(bands, bands[1:]):
            assert band.end_year == following.start_year - 1
        assert bands[-1].end_year == -1
        assert bands[-1].target_intensity == 18.232

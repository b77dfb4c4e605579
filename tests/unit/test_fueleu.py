"""Tests for the FuelEU compliance balance and penalty calculator."""

import pytest

from src.compliance.fueleu import ComplianceCalculator


@pytest.fixture
def calc():
    return ComplianceCalculator()


# =============================================================================
# Compliance Balance
# =============================================================================

class TestComplianceBalance:
    def test_deficit_when_actual_above_target(self, calc):
        """90.5 against the 2025 target over 5,000,000 MJ is a deficit."""
        cb = calc.compliance_balance(89.3368, 90.5, 5_000_000)
        assert cb == pytest.approx(-5_816_000.0, abs=1e-4)

    def test_surplus_when_actual_below_target(self, calc):
        cb = calc.compliance_balance(89.3368, 85.0, 1_000_000)
        assert cb == pytest.approx(4_336_800.0, abs=1e-4)

    def test_zero_when_on_target(self, calc):
        cb = calc.compliance_balance(89.3368, 89.3368, 5_000_000)
        assert cb == 0.0

    def test_zero_energy(self, calc):
        assert calc.compliance_balance(89.3368, 95.0, 0) == 0.0

    def test_rounded_to_five_decimals(self, calc):
        cb = calc.compliance_balance(89.3368, 89.1234567891, 1.0)
        assert cb == round(cb, 5)

    @pytest.mark.parametrize("actual", [60.0, 80.0, 89.0, 89.3368, 90.0, 120.0])
    def test_sign_follows_target_minus_actual(self, calc, actual):
        cb = calc.compliance_balance(89.3368, actual, 1_000_000)
        if actual < 89.3368:
            assert cb > 0
        elif actual > 89.3368:
            assert cb < 0
        else:
            assert cb == 0


# =============================================================================
# Penalty
# =============================================================================

class TestPenalty:
    def test_first_year_penalty(self, calc):
        """10,000 g deficit at 90.5 gCO2eq/MJ costs EUR 6."""
        assert calc.penalty(-10_000, 90.5, consecutive_years=1) == 6

    def test_consecutive_years_escalate(self, calc):
        first = calc.penalty(-10_000, 90.5, consecutive_years=1)
        third = calc.penalty(-10_000, 90.5, consecutive_years=3)
        assert third > first
        assert third == 8

    def test_large_deficit(self, calc):
        """-5,816,000 g at 90.5: 5,816,000 / 3,710,500 * 2,400 = 3,761.9."""
        assert calc.penalty(-5_816_000, 90.5) == 3762

    @pytest.mark.parametrize("cb", [0.0, 1.0, 4_336_800.0])
    def test_no_penalty_without_deficit(self, calc, cb):
        assert calc.penalty(cb, 90.5) == 0

    def test_no_penalty_ignores_bad_intensity(self, calc):
        """A surplus is never penalised, whatever the intensity."""
        assert calc.penalty(100.0, 0.0) == 0

    def test_invalid_consecutive_years(self, calc):
        with pytest.raises(ValueError):
            calc.penalty(-10_000, 90.5, consecutive_years=0)

    def test_invalid_intensity(self, calc):
        with pytest.raises(ValueError):
            calc.penalty(-10_000, 0.0)

    def test_penalty_is_whole_euros(self, calc):
        assert isinstance(calc.penalty(-123_456.789, 91.2), int)


# =============================================================================
# Borrowing limits
# =============================================================================

class TestBorrowingLimits:
    def test_max_borrowing_2025(self, calc):
        """2% of 89.3368 * 5,000,000 MJ."""
        assert calc.max_borrowing(2025, 5_000_000) == pytest.approx(8_933_680.0, abs=1e-4)

    def test_max_borrowing_follows_target(self, calc):
        assert calc.max_borrowing(2030, 5_000_000) < calc.max_borrowing(2025, 5_000_000)

    def test_aggravation(self, calc):
        assert calc.aggravated_acs(1_000_000) == pytest.approx(1_100_000.0)
        assert calc.aggravated_acs(5_816_000) == pytest.approx(6_397_600.0)

"""Tests for advance compliance surplus borrowing and its repayment."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import BIG_DEFICIT_SHIP, DEFICIT_SHIP, SURPLUS_SHIP
from src.compliance.errors import ErrorKind, Reason


class TestValidateBorrow:
    def test_deficit_within_limit(self, engine):
        validation = engine.validate_borrow(DEFICIT_SHIP, 2025)
        assert validation.can_borrow
        assert validation.reason is None
        assert validation.max_allowed_acs == pytest.approx(8_933_680.0)
        assert validation.deficit_amount == pytest.approx(5_816_000.0)

    def test_no_deficit(self, engine):
        validation = engine.validate_borrow(SURPLUS_SHIP, 2025)
        assert not validation.can_borrow
        assert validation.reason == Reason.NO_DEFICIT

    def test_deficit_above_two_percent_cap(self, engine):
        validation = engine.validate_borrow(BIG_DEFICIT_SHIP, 2025)
        assert not validation.can_borrow
        assert validation.reason == Reason.EXCEEDS_LIMIT
        assert validation.reason.kind == ErrorKind.INSUFFICIENT_RESOURCE
        assert validation.deficit_amount == pytest.approx(28_316_000.0)
        assert validation.max_allowed_acs == pytest.approx(8_933_680.0)

    def test_consecutive_year(self, engine):
        assert engine.borrow(DEFICIT_SHIP, 2025).success
        validation = engine.validate_borrow(DEFICIT_SHIP, 2026)
        assert not validation.can_borrow
        assert validation.reason == Reason.CONSECUTIVE_BORROW
        assert "2025" in validation.message

    def test_validation_does_not_record(self, engine):
        engine.validate_borrow(DEFICIT_SHIP, 2025)
        assert engine.borrow_history(DEFICIT_SHIP) == []


class TestBorrow:
    def test_borrow_full_deficit(self, engine):
        result = engine.borrow(DEFICIT_SHIP, 2025)
        assert result.success
        assert result.entry.amount == pytest.approx(5_816_000.0)
        assert result.aggravated_amount == pytest.approx(6_397_600.0)
        assert result.entry.aggravated_amount == pytest.approx(6_397_600.0)
        assert not result.entry.repaid
        assert "2026" in result.message

    def test_already_borrowed(self, engine):
        assert engine.borrow(DEFICIT_SHIP, 2025).success
        again = engine.borrow(DEFICIT_SHIP, 2025)
        assert not again.success
        assert again.reason == Reason.ALREADY_BORROWED
        assert again.kind == ErrorKind.STATE_CONFLICT
        assert len(engine.borrow_history(DEFICIT_SHIP)) == 1

    def test_rejections_carry_validation_reason(self, engine):
        result = engine.borrow(SURPLUS_SHIP, 2025)
        assert not result.success
        assert result.reason == Reason.NO_DEFICIT
        assert result.entry is None

        result = engine.borrow(BIG_DEFICIT_SHIP, 2025)
        assert result.reason == Reason.EXCEEDS_LIMIT

    def test_history_newest_first(self, engine):
        assert engine.borrow(DEFICIT_SHIP, 2025).success
        assert engine.borrow(DEFICIT_SHIP, 2027).success
        assert [e.year for e in engine.borrow_history(DEFICIT_SHIP)] == [2027, 2025]


class TestRepayment:
    @pytest.fixture
    def borrowed(self, engine):
        assert engine.borrow(DEFICIT_SHIP, 2025).success
        return engine

    def test_settle_once(self, borrowed):
        assert borrowed.borrowing.settle_previous_year(DEFICIT_SHIP, 2026) == pytest.approx(6_397_600.0)
        assert borrowed.borrowing.settle_previous_year(DEFICIT_SHIP, 2026) == 0.0
        assert borrowed.borrowing.entry(DEFICIT_SHIP, 2025).repaid

    def test_nothing_to_settle(self, engine):
        assert engine.borrowing.settle_previous_year(DEFICIT_SHIP, 2026) == 0.0

    def test_repayment_deducted_from_next_year(self, borrowed):
        assert borrowed.adjusted_cb(DEFICIT_SHIP, 2026) == pytest.approx(-12_213_600.0)

    def test_adjusted_balance_stable_after_settlement(self, borrowed):
        first = borrowed.adjusted_cb(DEFICIT_SHIP, 2026)
        second = borrowed.adjusted_cb(DEFICIT_SHIP, 2026)
        assert first == second

    def test_borrow_year_balance_unchanged(self, borrowed):
        assert borrowed.adjusted_cb(DEFICIT_SHIP, 2025) == pytest.approx(-5_816_000.0)


class TestConcurrentBorrow:
    def test_one_of_two_racing_borrows_wins(self, engine):
        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(lambda _: engine.borrow(DEFICIT_SHIP, 2025), range(2)))

        assert sum(r.success for r in results) == 1
        [rejected] = [r for r in results if not r.success]
        assert rejected.reason == Reason.ALREADY_BORROWED
        assert len(engine.borrow_history(DEFICIT_SHIP)) == 1

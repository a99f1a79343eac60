"""Tests for debt-to-income ratio and progress tracking."""

import pytest

from debt_planner.engine import InvalidInputError, debt_progress, debt_to_income_ratio
from debt_planner.engine.ratios import risk_level
from debt_planner.models.debt import Debt
from debt_planner.models.plan import RiskLevel


def debt(minimum, balance=1000, original=None):
    return Debt(
        name=f"Debt {minimum}",
        current_balance=balance,
        original_balance=original,
        interest_rate=5,
        minimum_payment=minimum,
    )


class TestDebtToIncome:
    """Tests for the DTI ratio."""

    @pytest.mark.parametrize(
        "ratio, expected",
        [
            (20, RiskLevel.LOW),
            (36, RiskLevel.LOW),
            (36.5, RiskLevel.MODERATE),
            (43, RiskLevel.MODERATE),
            (45, RiskLevel.HIGH),
            (50, RiskLevel.HIGH),
            (50.5, RiskLevel.SEVERE),
        ],
    )
    def test_risk_levels(self, ratio, expected):
        """Test the 36/43/50 lender bands."""
        assert risk_level(ratio) == expected

    def test_low_ratio(self):
        """Test a comfortable ratio needs no extra income."""
        result = debt_to_income_ratio([debt(500), debt(300)], 4000)

        assert result.ratio == pytest.approx(20)
        assert result.monthly_debt_payments == pytest.approx(800)
        assert result.annual_income == pytest.approx(48000)
        assert result.risk_level == RiskLevel.LOW
        assert result.income_increase_needed == 0

    def test_severe_ratio(self):
        """Test the income needed to get back to the target."""
        result = debt_to_income_ratio([debt(2100)], 4000)

        assert result.ratio == pytest.approx(52.5)
        assert result.risk_level == RiskLevel.SEVERE
        assert result.income_increase_needed == pytest.approx(2100 / 0.36 - 4000)

    def test_paid_off_debts_do_not_count(self):
        """Test zero-balance debts are left out of monthly payments."""
        result = debt_to_income_ratio([debt(400), debt(300, balance=0)], 2000)
        assert result.monthly_debt_payments == pytest.approx(400)
        assert result.total_debt == pytest.approx(1000)

    def test_custom_target(self):
        """Test a stricter target raises the income needed."""
        result = debt_to_income_ratio([debt(1000)], 4000, target_ratio=20)
        assert result.target_ratio == 20
        assert result.income_increase_needed == pytest.approx(1000)

    @pytest.mark.parametrize("income", [0, -100])
    def test_income_must_be_positive(self, income):
        """Test zero or negative income is rejected."""
        with pytest.raises(InvalidInputError):
            debt_to_income_ratio([debt(100)], income)


class TestProgress:
    """Tests for debt-free progress."""

    def test_progress_and_milestones(self):
        """Test paid-off share against the original balances."""
        result = debt_progress([
            debt(100, balance=5000, original=10000),
            debt(50, balance=1000),
        ])

        assert result.original_total == pytest.approx(11000)
        assert result.current_total == pytest.approx(6000)
        assert result.paid_off_amount == pytest.approx(5000)
        assert result.progress_percent == pytest.approx(5000 / 11000 * 100)
        assert result.milestones_reached == [5, 25]

    def test_fully_paid(self):
        """Test every milestone once everything is paid."""
        result = debt_progress([debt(0, balance=0, original=2000)])
        assert result.progress_percent == pytest.approx(100)
        assert result.milestones_reached == [5, 25, 50, 75, 100]

    def test_no_debts(self):
        """Test no debts means no progress rather than an error."""
        result = debt_progress([])
        assert result.progress_percent == 0
        assert result.milestones_reached == []

"""Tests for the amortization engine."""

import math
import random
from datetime import date

import pytest

from debt_planner.engine import (
    InsufficientPaymentError,
    InvalidInputError,
    add_months,
    aggregate_schedule,
    amortize,
    annuity_payment,
    payment_breakdown,
    payoff_periods,
    periodic_rate,
)


START = date(2025, 1, 15)


class TestHelpers:
    """Tests for rate, date and annuity helpers."""

    def test_periodic_rate(self):
        """Test annual percent to monthly fraction."""
        assert periodic_rate(12) == pytest.approx(0.01)
        assert periodic_rate(0) == 0

    def test_add_months_clamps_to_month_end(self):
        """Test month arithmetic on short months."""
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
        assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)
        assert add_months(date(2024, 5, 10), 0) == date(2024, 5, 10)

    def test_annuity_payment(self):
        """Test the level payment formula."""
        assert annuity_payment(1200, 0, 12) == pytest.approx(100)
        assert annuity_payment(10000, 6, 60) == pytest.approx(193.328, abs=1e-3)

    def test_annuity_payment_rejects_bad_term(self):
        """Test a zero term is rejected."""
        with pytest.raises(InvalidInputError):
            annuity_payment(1000, 5, 0)

    def test_payoff_periods(self):
        """Test the closed-form period count."""
        assert payoff_periods(1200, 0, 100) == pytest.approx(12)
        assert payoff_periods(0, 10, 100) == 0
        payment = annuity_payment(5000, 9, 36)
        assert payoff_periods(5000, 9, payment) == pytest.approx(36)

    def test_payoff_periods_insufficient_payment(self):
        """Test a payment below interest never pays off."""
        with pytest.raises(InsufficientPaymentError):
            payoff_periods(1000, 12, 5)


class TestAmortize:
    """Tests for single-balance schedules."""

    def test_schedule_pays_off_to_zero(self):
        """Test a normal schedule ends at exactly zero."""
        schedule = amortize(1000, 12, 100, start_date=START)

        assert not schedule.unresolved
        assert schedule.items[-1].remaining_balance == 0
        assert schedule.remaining_balance == 0
        assert schedule.periods == math.ceil(payoff_periods(1000, 12, 100))

    def test_first_period_split(self):
        """Test interest and principal in the first period."""
        schedule = amortize(1000, 12, 100, start_date=START)
        first = schedule.items[0]

        assert first.period == 1
        assert first.interest == pytest.approx(10)
        assert first.principal == pytest.approx(90)
        assert first.remaining_balance == pytest.approx(910)

    def test_payment_dates(self):
        """Test period N falls N months after the start date."""
        schedule = amortize(1000, 12, 100, start_date=START)
        assert schedule.items[0].payment_date == date(2025, 2, 15)
        assert schedule.items[2].payment_date == date(2025, 4, 15)
        assert schedule.payoff_date == schedule.items[-1].payment_date

    def test_final_payment_is_partial(self):
        """Test the last payment only covers what is left."""
        schedule = amortize(1000, 0, 300, start_date=START)

        assert schedule.periods == 4
        assert schedule.items[-1].payment == pytest.approx(100)
        assert schedule.items[-1].principal == pytest.approx(100)

    def test_zero_rate(self):
        """Test a zero-rate balance accrues no interest."""
        schedule = amortize(1200, 0, 100, start_date=START)
        assert schedule.periods == 12
        assert schedule.total_interest == 0
        assert schedule.total_paid == pytest.approx(1200)

    def test_zero_balance(self):
        """Test a paid-off balance yields an empty, resolved schedule."""
        schedule = amortize(0, 10, 100, start_date=START)
        assert schedule.items == []
        assert not schedule.unresolved
        assert schedule.payoff_date is None

    def test_insufficient_payment(self):
        """Test a payment below the first period's interest is refused."""
        with pytest.raises(InsufficientPaymentError) as exc:
            amortize(1000, 12, 5)
        assert exc.value.interest == pytest.approx(10)
        assert exc.value.payment == 5

    @pytest.mark.parametrize(
        "balance, rate, payment",
        [(-1, 10, 100), (1000, -5, 100), (1000, 10, 0), (1000, 10, -50)],
    )
    def test_invalid_inputs(self, balance, rate, payment):
        """Test negative inputs and non-positive payments."""
        with pytest.raises(InvalidInputError):
            amortize(balance, rate, payment)

    def test_invalid_input_is_value_error(self):
        """Test InvalidInputError can be caught as ValueError."""
        with pytest.raises(ValueError):
            amortize(-1, 10, 100)

    def test_horizon_exhaustion_is_reported(self):
        """Test running out of periods is flagged, not truncated silently."""
        schedule = amortize(10000, 12, 101, horizon_periods=12, start_date=START)

        assert schedule.unresolved is True
        assert schedule.periods == 12
        assert schedule.remaining_balance > 0
        assert schedule.remaining_balance == schedule.items[-1].remaining_balance
        assert schedule.payoff_date is None

    def test_random_schedules_hold_invariants(self):
        """Test zero ending balance, period count and payment splits."""
        rng = random.Random(20240601)

        for _ in range(200):
            balance = round(rng.uniform(100, 50000), 2)
            rate = round(rng.uniform(0, 30), 2)
            interest = balance * periodic_rate(rate)
            payment = round(interest + rng.uniform(5, 2000), 2)

            schedule = amortize(balance, rate, payment, horizon_periods=2000, start_date=START)
            expected = payoff_periods(balance, rate, payment)

            assert not schedule.unresolved
            assert abs(schedule.items[-1].remaining_balance) < 1e-6
            assert abs(schedule.periods - expected) <= 1 + 1e-9

            for item in schedule.items[:-1]:
                assert item.principal + item.interest == pytest.approx(payment, abs=1e-6)
            last = schedule.items[-1]
            assert last.payment == pytest.approx(last.principal + last.interest, abs=1e-6)
            assert last.payment <= payment + 1e-6


class TestBreakdowns:
    """Tests for schedule aggregation."""

    def test_yearly_buckets(self):
        """Test yearly aggregation labels and totals."""
        payment = annuity_payment(10000, 6, 24)
        schedule = amortize(10000, 6, payment, start_date=START)

        buckets = aggregate_schedule(schedule.items, 12)

        assert [b.label for b in buckets] == ["Year 1", "Year 2"]
        assert buckets[0].first_period == 1
        assert buckets[0].last_period == 12
        assert sum(b.interest for b in buckets) == pytest.approx(schedule.total_interest)
        assert buckets[-1].remaining_balance == 0

    def test_quarterly_buckets_with_limit(self):
        """Test quarter labels and the bucket cap."""
        schedule = amortize(1200, 0, 100, start_date=START)

        buckets = aggregate_schedule(schedule.items, 3, max_buckets=2)

        assert [b.label for b in buckets] == ["Q1", "Q2"]
        assert buckets[1].payment == pytest.approx(300)
        assert buckets[1].remaining_balance == pytest.approx(600)

    def test_partial_last_bucket(self):
        """Test a schedule that does not fill its last bucket."""
        schedule = amortize(1000, 0, 100, start_date=START)
        buckets = aggregate_schedule(schedule.items, 3)
        assert len(buckets) == 4
        assert buckets[-1].first_period == buckets[-1].last_period == 10

    def test_bucket_size_must_be_positive(self):
        """Test a zero bucket size is rejected."""
        with pytest.raises(InvalidInputError):
            aggregate_schedule([], 0)

    def test_payment_breakdown(self):
        """Test principal/interest totals and share."""
        schedule = amortize(1000, 12, 100, start_date=START)
        breakdown = payment_breakdown(schedule.items)

        assert breakdown.principal == pytest.approx(1000)
        assert breakdown.interest == pytest.approx(schedule.total_interest)
        assert breakdown.total == pytest.approx(schedule.total_paid)
        assert 0 < breakdown.interest_percentage < 100

    def test_empty_breakdown(self):
        """Test an empty schedule breaks down to zeros."""
        breakdown = payment_breakdown([])
        assert breakdown.total == 0
        assert breakdown.interest_percentage == 0

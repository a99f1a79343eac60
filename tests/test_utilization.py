"""Tests for the credit utilization optimizer."""

import random

import pytest

from debt_planner.engine import (
    InvalidInputError,
    estimate_score_impact,
    optimize_utilization,
    overall_utilization,
    utilization_status,
)
from debt_planner.models.debt import CreditCard
from debt_planner.models.plan import UtilizationStatus


def card(name, balance, limit):
    return CreditCard(name=name, current_balance=balance, credit_limit=limit)


class TestStatus:
    """Tests for status bands and score impact."""

    @pytest.mark.parametrize(
        "utilization, expected",
        [
            (0, UtilizationStatus.GOOD),
            (30, UtilizationStatus.GOOD),
            (30.1, UtilizationStatus.WARNING),
            (50, UtilizationStatus.WARNING),
            (50.1, UtilizationStatus.HIGH),
        ],
    )
    def test_status_bands(self, utilization, expected):
        """Test the 30% and 50% thresholds."""
        assert utilization_status(utilization) == expected

    @pytest.mark.parametrize(
        "current, target, points",
        [(25, 30, "0"), (45, 30, "5-15"), (60, 30, "15-30"), (90, 30, "30-50")],
    )
    def test_score_impact(self, current, target, points):
        """Test the score impact bands."""
        assert estimate_score_impact(current, target).points == points

    def test_overall_utilization(self):
        """Test total balance over total limit."""
        cards = [card("A", 500, 1000), card("B", 0, 4000)]
        assert overall_utilization(cards) == pytest.approx(10)
        assert overall_utilization([]) == 0


class TestOptimize:
    """Tests for transfer planning."""

    def test_transfer_to_largest_capacity_first(self):
        """Test excess goes to the card with the most room."""
        a, b, c = card("A", 900, 1000), card("B", 100, 1000), card("C", 0, 2000)

        plan = optimize_utilization([a, b, c], 30)

        assert len(plan.transfer_plan) == 1
        transfer = plan.transfer_plan[0]
        assert (transfer.from_name, transfer.to_name) == ("A", "C")
        assert transfer.amount == pytest.approx(600)
        assert plan.total_transferred == pytest.approx(600)
        assert plan.untransferred_amount == pytest.approx(0)

        per_card = {entry.name: entry for entry in plan.per_card}
        assert per_card["A"].optimal_balance == pytest.approx(300)
        assert per_card["A"].transfer_amount == pytest.approx(600)
        assert per_card["B"].transfer_amount == pytest.approx(-200)
        assert per_card["A"].projected_balance == pytest.approx(300)
        assert per_card["C"].projected_balance == pytest.approx(600)
        assert per_card["A"].status == UtilizationStatus.HIGH

    def test_excess_split_across_receivers(self):
        """Test a donor fills one receiver and spills into the next."""
        cards = [card("Donor", 1000, 1000), card("R1", 0, 1000), card("R2", 0, 500)]

        plan = optimize_utilization(cards, 40)

        # Donor excess 600; R1 room 400, R2 room 200
        amounts = [(t.to_name, t.amount) for t in plan.transfer_plan]
        assert amounts == [("R1", pytest.approx(400)), ("R2", pytest.approx(200))]
        assert plan.untransferred_amount == pytest.approx(0)

    def test_no_receivers(self):
        """Test excess nobody can absorb is reported as untransferred."""
        plan = optimize_utilization([card("A", 900, 1000), card("B", 900, 1000)], 30)

        assert plan.transfer_plan == []
        assert plan.untransferred_amount == pytest.approx(1200)
        assert plan.overall_status == UtilizationStatus.HIGH
        assert plan.score_impact.points == "30-50"

    def test_target_at_overall_balances_exactly(self):
        """Test surplus equals spare room when the target is the overall utilization."""
        cards = [card("A", 900, 1000), card("B", 100, 1000), card("C", 500, 2000)]
        target = overall_utilization(cards)

        plan = optimize_utilization(cards, target)

        positive = sum(c.transfer_amount for c in plan.per_card if c.transfer_amount > 0)
        negative = sum(-c.transfer_amount for c in plan.per_card if c.transfer_amount < 0)
        assert positive == pytest.approx(negative)
        assert plan.untransferred_amount == pytest.approx(0, abs=1e-6)

    def test_transfers_conserve_balance(self):
        """Test moving balances never creates or destroys debt, for random cards."""
        rng = random.Random(11)

        for _ in range(200):
            cards = [
                card(f"Card {i}", round(rng.uniform(0, 5000), 2), round(rng.uniform(500, 10000), 2))
                for i in range(rng.randint(1, 6))
            ]
            target = rng.uniform(0, 100)

            plan = optimize_utilization(cards, target)

            moved_out = sum(
                c.current_balance - c.projected_balance
                for c in plan.per_card if c.projected_balance < c.current_balance
            )
            moved_in = sum(
                c.projected_balance - c.current_balance
                for c in plan.per_card if c.projected_balance > c.current_balance
            )
            assert moved_out == pytest.approx(plan.total_transferred)
            assert moved_in == pytest.approx(plan.total_transferred)
            assert sum(c.projected_balance for c in plan.per_card) == pytest.approx(
                sum(c.current_balance for c in cards)
            )

            for entry in plan.per_card:
                if entry.transfer_amount > 0:
                    # Donors never drop below their target
                    assert entry.projected_balance >= entry.optimal_balance - 1e-6
                else:
                    # Receivers never rise above their target
                    assert entry.projected_balance <= entry.optimal_balance + 1e-6

    def test_invalid_target(self):
        """Test the target must be a percentage."""
        with pytest.raises(InvalidInputError):
            optimize_utilization([card("A", 100, 1000)], 120)
        with pytest.raises(InvalidInputError):
            optimize_utilization([card("A", 100, 1000)], -1)

    def test_cards_are_not_modified(self):
        """Test the input cards keep their balances."""
        cards = [card("A", 900, 1000), card("B", 0, 1000)]
        optimize_utilization(cards, 30)
        assert [c.current_balance for c in cards] == [900, 0]

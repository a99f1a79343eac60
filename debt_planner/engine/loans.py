"""
Loan comparison: several prospective loans side by side.

Each option is amortized at its level payment over its own term. Options
are ranked by total cost (amount + interest + fees), which is what a
borrower pays out in the end; a lower rate over a longer term can still
cost more.
"""

from datetime import date
from typing import Optional

from debt_planner.engine.amortization import amortize, annuity_payment
from debt_planner.models.plan import LoanComparison, LoanOption


def price_loan(option: LoanOption, start_date: Optional[date] = None) -> LoanComparison:
    """Level payment, full schedule and total cost for one option."""
    payment = annuity_payment(option.amount, option.interest_rate, option.term_months)
    schedule = amortize(
        option.amount,
        option.interest_rate,
        payment,
        horizon_periods=option.term_months + 1,
        start_date=start_date,
    )
    total_interest = schedule.total_interest

    return LoanComparison(
        option=option,
        monthly_payment=payment,
        total_interest=total_interest,
        total_cost=option.amount + total_interest + option.fees,
        schedule=schedule,
    )


def best_loan(comparisons: list[LoanComparison]) -> Optional[LoanComparison]:
    """The cheapest option by total cost; the earliest one wins a tie."""
    best = None
    for comparison in comparisons:
        if best is None or comparison.total_cost < best.total_cost:
            best = comparison
    return best


def compare_loans(
    options: list[LoanOption],
    start_date: Optional[date] = None,
) -> list[LoanComparison]:
    """
    Price every option and mark the cheapest.

    Args:
        options: Loans to compare
        start_date: Date the schedules count from (defaults to today)

    Returns:
        One LoanComparison per option, in the given order. Exactly one is
        flagged `is_best` unless `options` is empty; every entry carries
        its extra cost over that one.
    """
    comparisons = [price_loan(option, start_date) for option in options]

    best = best_loan(comparisons)
    if best is None:
        return []

    return [
        comparison.model_copy(update={
            "is_best": comparison is best,
            "cost_over_best": comparison.total_cost - best.total_cost,
        })
        for comparison in comparisons
    ]

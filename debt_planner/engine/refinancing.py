"""Refinancing analyzer: one loan at its current terms versus new terms."""

from datetime import date
from typing import Optional

from debt_planner.engine.amortization import (
    DEFAULT_HORIZON_PERIODS,
    amortize,
    annuity_payment,
)
from debt_planner.engine.consolidation import break_even_months
from debt_planner.models.plan import RefinanceOption, RefinanceResult


def analyze_refinance(
    option: RefinanceOption,
    horizon_periods: int = DEFAULT_HORIZON_PERIODS,
    start_date: Optional[date] = None,
) -> RefinanceResult:
    """
    Compare keeping a loan against refinancing it.

    The current loan is amortized at its current rate and payment; the new
    loan uses the level payment for the new term. Closing costs are paid
    upfront and recovered through the monthly saving.
    """
    start = start_date or date.today()

    current = amortize(
        option.balance,
        option.current_rate,
        option.current_monthly_payment,
        horizon_periods=horizon_periods,
        start_date=start,
    )

    new_payment = annuity_payment(option.balance, option.new_rate, option.new_term_months)
    refinanced = amortize(
        option.balance,
        option.new_rate,
        new_payment,
        horizon_periods=option.new_term_months + 1,
        start_date=start,
    )

    interest_saved = current.total_interest - refinanced.total_interest
    monthly_savings = option.current_monthly_payment - new_payment

    return RefinanceResult(
        option=option,
        current_total_interest=current.total_interest,
        current_months=None if current.unresolved else current.periods,
        current_unresolved=current.unresolved,
        new_monthly_payment=new_payment,
        new_total_interest=refinanced.total_interest,
        interest_saved=interest_saved,
        net_savings=interest_saved - option.closing_costs,
        monthly_savings=monthly_savings,
        break_even_months=break_even_months(option.closing_costs, monthly_savings),
    )

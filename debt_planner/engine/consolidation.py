"""
Consolidation Analyzer

Compares paying the current debts as they are against rolling all of them,
plus the origination fee, into one new amortizing loan.

The current side runs the allocator with no extra payment, so freed minimums
still roll forward the way they would in real life. The balance-weighted
blended rate is reported alongside as a summary figure.
"""

import math
from datetime import date
from typing import Optional

from debt_planner.engine.allocator import allocate, summarize_plans
from debt_planner.engine.amortization import (
    DEFAULT_HORIZON_PERIODS,
    amortize,
    annuity_payment,
)
from debt_planner.engine.errors import InvalidInputError
from debt_planner.models.debt import Debt, RepaymentStrategy
from debt_planner.models.plan import ConsolidationOffer, ConsolidationResult


def blended_rate(debts: list[Debt]) -> float:
    """Balance-weighted average annual rate; 0 when nothing is owed."""
    total = sum(debt.current_balance for debt in debts)
    if total <= 0:
        return 0.0
    return sum(debt.interest_rate * debt.current_balance for debt in debts) / total


def break_even_months(upfront_cost: float, monthly_savings: float) -> Optional[int]:
    """
    Months of payment savings needed to recover an upfront cost.

    No cost breaks even immediately (0). A cost with no positive monthly
    saving never breaks even (None).
    """
    if upfront_cost <= 0:
        return 0
    if monthly_savings <= 0:
        return None
    return math.ceil(upfront_cost / monthly_savings)


def analyze_consolidation(
    debts: list[Debt],
    offer: ConsolidationOffer,
    horizon_periods: int = DEFAULT_HORIZON_PERIODS,
    start_date: Optional[date] = None,
) -> ConsolidationResult:
    """
    Weigh one consolidation offer against the current debts.

    Raises:
        InvalidInputError: If none of the debts has an outstanding balance
        InsufficientPaymentError: If a current minimum does not cover interest
    """
    outstanding = [debt for debt in debts if debt.current_balance > 0]
    if not outstanding:
        raise InvalidInputError("No outstanding balances to consolidate")

    start = start_date or date.today()
    total_balance = sum(debt.current_balance for debt in outstanding)
    current_payment = sum(debt.minimum_payment for debt in outstanding)

    current = summarize_plans(
        allocate(outstanding, 0.0, RepaymentStrategy.AVALANCHE, horizon_periods, start)
    )

    new_amount = total_balance + offer.origination_fee
    new_payment = annuity_payment(new_amount, offer.interest_rate, offer.term_months)
    # One spare period absorbs floating-point residue on the last payment
    new_schedule = amortize(
        new_amount,
        offer.interest_rate,
        new_payment,
        horizon_periods=offer.term_months + 1,
        start_date=start,
    )

    monthly_delta = current_payment - new_payment

    return ConsolidationResult(
        offer=offer,
        total_balance=total_balance,
        blended_rate=blended_rate(outstanding),
        current_monthly_payment=current_payment,
        current_total_interest=current.total_interest,
        current_months=current.total_months,
        current_unresolved=current.unresolved,
        new_loan_amount=new_amount,
        new_monthly_payment=new_payment,
        new_total_interest=new_schedule.total_interest,
        new_payoff_date=new_schedule.payoff_date,
        interest_saved=current.total_interest - new_schedule.total_interest,
        monthly_payment_delta=monthly_delta,
        break_even_months=break_even_months(offer.origination_fee, monthly_delta),
    )


def rank_consolidation_offers(
    debts: list[Debt],
    offers: list[ConsolidationOffer],
    horizon_periods: int = DEFAULT_HORIZON_PERIODS,
    start_date: Optional[date] = None,
) -> list[ConsolidationResult]:
    """Analyze every offer; best interest saving first."""
    results = [
        analyze_consolidation(debts, offer, horizon_periods, start_date)
        for offer in offers
    ]
    return sorted(results, key=lambda r: r.interest_saved, reverse=True)

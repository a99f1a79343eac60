"""
Strategy Allocator

Simulates repaying a whole set of debts month by month under one ordering
strategy.

DESIGN DECISION: The simulation runs ONE period loop across every debt.
The monthly budget is fixed at the sum of the minimums of every open debt
plus the extra payment. Each month:
1. Every open debt receives its own minimum (or what it still owes, if less)
2. Whatever is left of the budget goes to the first open debt in strategy
   order, then the next, until the budget or the balances run out

When a debt clears, its minimum stays in the budget, so from that month on
it rolls forward to the next target together with the extra payment (the
snowball/avalanche "waterfall"). Amortizing each debt on its own with the
extra payment pinned to a single target is only right until that target is
paid off, so we never do that here.
"""

import math
from datetime import date
from typing import Optional

from debt_planner.engine.amortization import (
    BALANCE_EPSILON,
    DEFAULT_HORIZON_PERIODS,
    add_months,
    periodic_rate,
)
from debt_planner.engine.errors import InsufficientPaymentError, InvalidInputError
from debt_planner.models.debt import Debt, RepaymentStrategy
from debt_planner.models.plan import (
    DebtRepaymentPlan,
    PaymentScheduleItem,
    PlanSummary,
)


def hybrid_score(debt: Debt) -> float:
    """
    Rate weighted by the order of magnitude of the balance.

    score = (rate / 100) * log10(balance). Paid-off debts score -inf so they
    sort last.
    """
    if debt.current_balance <= 0:
        return -math.inf
    return (debt.interest_rate / 100) * math.log10(debt.current_balance)


def order_debts(debts: list[Debt], strategy: RepaymentStrategy) -> list[Debt]:
    """
    Sort debts into the order they receive extra money.

    avalanche: rate descending, then balance descending
    snowball:  balance ascending, then rate descending
    hybrid:    hybrid_score descending
    custom:    priority ascending, debts without a priority last

    The sort is stable, so any remaining ties keep their input order.
    """
    if strategy == RepaymentStrategy.AVALANCHE:
        key = lambda d: (-d.interest_rate, -d.current_balance)
    elif strategy == RepaymentStrategy.SNOWBALL:
        key = lambda d: (d.current_balance, -d.interest_rate)
    elif strategy == RepaymentStrategy.HYBRID:
        key = lambda d: -hybrid_score(d)
    elif strategy == RepaymentStrategy.CUSTOM:
        key = lambda d: (d.priority is None, d.priority or 0)
    else:
        raise InvalidInputError(f"Unknown repayment strategy: {strategy}")

    return sorted(debts, key=key)


def _check_values(debts: list[Debt]) -> None:
    """Field bounds again; model_copy(update=...) does not re-validate."""
    for debt in debts:
        if debt.current_balance < 0:
            raise InvalidInputError(f"Balance cannot be negative: {debt.name} ({debt.current_balance})")
        if debt.interest_rate < 0:
            raise InvalidInputError(f"Interest rate cannot be negative: {debt.name} ({debt.interest_rate})")
        if debt.minimum_payment < 0:
            raise InvalidInputError(f"Minimum payment cannot be negative: {debt.name} ({debt.minimum_payment})")


def _check_minimums(debts: list[Debt]) -> None:
    """Every open debt's minimum must beat its first month's interest."""
    for debt in debts:
        if debt.current_balance <= 0:
            continue
        interest = debt.monthly_interest
        if debt.minimum_payment <= interest:
            raise InsufficientPaymentError(
                payment=debt.minimum_payment,
                interest=interest,
                debt_id=debt.id,
                debt_name=debt.name,
            )


def allocate(
    debts: list[Debt],
    extra_payment: float,
    strategy: RepaymentStrategy,
    horizon_periods: int = DEFAULT_HORIZON_PERIODS,
    start_date: Optional[date] = None,
) -> list[DebtRepaymentPlan]:
    """
    Build a repayment plan for every debt under one strategy.

    Args:
        debts: Debts to plan (paid-off debts get an empty schedule)
        extra_payment: Monthly amount on top of all minimums (>= 0)
        strategy: Ordering strategy for the extra money
        horizon_periods: Maximum number of months to simulate
        start_date: Date the plan counts from (defaults to today)

    Returns:
        One DebtRepaymentPlan per debt, in strategy order

    Raises:
        InvalidInputError: Negative extra payment, non-positive horizon, or a
                           debt with a negative balance, rate or minimum
        InsufficientPaymentError: A debt's minimum does not cover its interest
    """
    if extra_payment < 0:
        raise InvalidInputError(f"Extra payment cannot be negative: {extra_payment}")
    if horizon_periods < 1:
        raise InvalidInputError(f"Horizon must be at least one period: {horizon_periods}")

    if not debts:
        return []

    _check_values(debts)

    start = start_date or date.today()
    ordered = order_debts(debts, strategy)
    _check_minimums(ordered)

    count = len(ordered)
    rates = [periodic_rate(debt.interest_rate) for debt in ordered]
    balances = [debt.current_balance for debt in ordered]
    schedules: list[list[PaymentScheduleItem]] = [[] for _ in ordered]

    budget = extra_payment + sum(
        debt.minimum_payment for debt in ordered if debt.current_balance > 0
    )

    period = 0
    while period < horizon_periods and any(balance > 0 for balance in balances):
        period += 1
        when = add_months(start, period)
        open_debts = [i for i in range(count) if balances[i] > 0]

        interest = {i: balances[i] * rates[i] for i in open_debts}
        owed = {i: balances[i] + interest[i] for i in open_debts}
        base = {i: min(ordered[i].minimum_payment, owed[i]) for i in open_debts}

        # Extra, freed minimums and this month's surplus, in strategy order
        pool = budget - sum(base.values())
        extra = {i: 0.0 for i in open_debts}
        for i in open_debts:
            if pool <= 0:
                break
            applied = min(pool, owed[i] - base[i])
            extra[i] = applied
            pool -= applied

        for i in open_debts:
            payment = base[i] + extra[i]
            remaining = owed[i] - payment
            if remaining <= BALANCE_EPSILON:
                payment = owed[i]
                remaining = 0.0

            schedules[i].append(PaymentScheduleItem(
                period=period,
                payment_date=when,
                payment=payment,
                principal=payment - interest[i],
                interest=interest[i],
                remaining_balance=remaining,
                extra_payment=max(extra[i], 0.0),
            ))
            balances[i] = remaining

    plans = []
    for rank, debt in enumerate(ordered, start=1):
        schedule = schedules[rank - 1]
        unresolved = balances[rank - 1] > 0
        months = None if unresolved else len(schedule)

        plans.append(DebtRepaymentPlan(
            debt_id=debt.id,
            debt_name=debt.name,
            total_balance=debt.current_balance,
            interest_rate=debt.interest_rate,
            monthly_payment=schedule[0].payment if schedule else 0.0,
            payoff_date=None if unresolved else add_months(start, months),
            total_interest=sum(item.interest for item in schedule),
            months_to_payoff=months,
            schedule=schedule,
            priority_rank=rank,
            extra_payment=sum(item.extra_payment for item in schedule),
            remaining_balance=balances[rank - 1],
            unresolved=unresolved,
        ))

    return plans


def summarize_plans(plans: list[DebtRepaymentPlan]) -> PlanSummary:
    """Totals across one allocation run."""
    if not plans:
        return PlanSummary()

    unresolved = any(plan.unresolved for plan in plans)
    resolved = [plan for plan in plans if not plan.unresolved]
    # Debts that were already paid off do not count as a "first payoff"
    cleared = [
        plan.months_to_payoff for plan in resolved
        if plan.months_to_payoff
    ]
    payoff_dates = [plan.payoff_date for plan in resolved if plan.payoff_date]

    return PlanSummary(
        total_interest=sum(plan.total_interest for plan in plans),
        total_months=None if unresolved else max(
            plan.months_to_payoff or 0 for plan in plans
        ),
        first_payoff_months=min(cleared) if cleared else None,
        earliest_payoff_date=min(payoff_dates) if payoff_dates else None,
        latest_payoff_date=None if unresolved else (
            max(payoff_dates) if payoff_dates else None
        ),
        unresolved=unresolved,
    )

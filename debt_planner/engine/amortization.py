"""
Amortization Engine

Turns a balance, an annual rate and a fixed monthly payment into a
period-by-period schedule of interest/principal splits.

Per period:
    interest  = remaining * (annual_rate / 100 / 12)
    principal = min(payment - interest, remaining)
    remaining = remaining - principal

The loop ends when the balance reaches exactly zero or the horizon is
exhausted. Hitting the horizon is reported through `unresolved` on the
returned schedule; a payment that cannot cover the first month's interest
raises InsufficientPaymentError before any period is simulated.

Everything here is pure: no I/O, no shared state.
"""

import calendar
import math
from datetime import date
from typing import Optional

from debt_planner.engine.errors import InsufficientPaymentError, InvalidInputError
from debt_planner.models.plan import (
    AmortizationSchedule,
    PaymentBreakdown,
    PaymentScheduleItem,
    ScheduleBucket,
)


MONTHS_PER_YEAR = 12
DEFAULT_HORIZON_PERIODS = 360

# Residual balances below this are treated as paid off.
BALANCE_EPSILON = 1e-9


def periodic_rate(annual_rate_percent: float) -> float:
    """Monthly rate as a fraction (19.99 -> 0.016658...)."""
    return annual_rate_percent / 100 / MONTHS_PER_YEAR


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping to the last day of the month."""
    index = start.year * 12 + (start.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def annuity_payment(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
) -> float:
    """Level monthly payment that retires `principal` in exactly `term_months`."""
    if principal < 0:
        raise InvalidInputError(f"Principal cannot be negative: {principal}")
    if annual_rate_percent < 0:
        raise InvalidInputError(f"Interest rate cannot be negative: {annual_rate_percent}")
    if term_months < 1:
        raise InvalidInputError(f"Term must be at least one month: {term_months}")

    rate = periodic_rate(annual_rate_percent)
    if rate == 0:
        return principal / term_months

    growth = (1 + rate) ** term_months
    return principal * rate * growth / (growth - 1)


def payoff_periods(
    balance: float,
    annual_rate_percent: float,
    payment: float,
) -> float:
    """
    Closed-form number of periods to retire a balance.

    n = -ln(1 - r*B/P) / ln(1 + r), or B/P at a zero rate. The result is
    fractional; the simulated schedule has ceil(n) periods.
    """
    _check_inputs(balance, annual_rate_percent, payment)
    if balance == 0:
        return 0.0

    rate = periodic_rate(annual_rate_percent)
    if rate == 0:
        return balance / payment

    interest = balance * rate
    if payment <= interest:
        raise InsufficientPaymentError(payment=payment, interest=interest)

    return -math.log(1 - interest / payment) / math.log(1 + rate)


def _check_inputs(balance: float, annual_rate_percent: float, payment: float) -> None:
    if balance < 0:
        raise InvalidInputError(f"Balance cannot be negative: {balance}")
    if annual_rate_percent < 0:
        raise InvalidInputError(f"Interest rate cannot be negative: {annual_rate_percent}")
    if payment <= 0:
        raise InvalidInputError(f"Payment must be positive: {payment}")


def amortize(
    balance: float,
    annual_rate_percent: float,
    periodic_payment: float,
    horizon_periods: int = DEFAULT_HORIZON_PERIODS,
    start_date: Optional[date] = None,
) -> AmortizationSchedule:
    """
    Build the amortization schedule for one balance.

    Args:
        balance: Amount owed today (>= 0)
        annual_rate_percent: Annual interest rate in percent (>= 0)
        periodic_payment: Fixed monthly payment (> 0)
        horizon_periods: Maximum number of periods to simulate
        start_date: Date the schedule counts from (defaults to today);
                    period N falls N months later

    Returns:
        AmortizationSchedule; `unresolved` is set if the horizon ran out

    Raises:
        InvalidInputError: On negative inputs or a non-positive payment/horizon
        InsufficientPaymentError: If the payment does not cover the first
                                  period's interest
    """
    _check_inputs(balance, annual_rate_percent, periodic_payment)
    if horizon_periods < 1:
        raise InvalidInputError(f"Horizon must be at least one period: {horizon_periods}")

    start = start_date or date.today()
    rate = periodic_rate(annual_rate_percent)

    if balance > 0 and periodic_payment <= balance * rate:
        raise InsufficientPaymentError(
            payment=periodic_payment,
            interest=balance * rate,
        )

    items: list[PaymentScheduleItem] = []
    remaining = balance

    for period in range(1, horizon_periods + 1):
        if remaining <= 0:
            break

        interest = remaining * rate
        principal = min(periodic_payment - interest, remaining)
        remaining -= principal

        if remaining <= BALANCE_EPSILON:
            principal += remaining
            remaining = 0.0

        items.append(PaymentScheduleItem(
            period=period,
            payment_date=add_months(start, period),
            payment=principal + interest,
            principal=principal,
            interest=interest,
            remaining_balance=remaining,
        ))

    return AmortizationSchedule(
        starting_balance=balance,
        annual_rate=annual_rate_percent,
        periodic_payment=periodic_payment,
        items=items,
        remaining_balance=remaining,
        unresolved=remaining > 0,
    )


# =============================================================================
# SCHEDULE BREAKDOWNS
# =============================================================================

def aggregate_schedule(
    items: list[PaymentScheduleItem],
    periods_per_bucket: int,
    max_buckets: Optional[int] = None,
    label_prefix: Optional[str] = None,
) -> list[ScheduleBucket]:
    """
    Group schedule periods into buckets (quarters, years, ...).

    Each bucket sums payment, principal and interest and carries the
    remaining balance of its last period.
    """
    if periods_per_bucket < 1:
        raise InvalidInputError(f"Bucket size must be at least one period: {periods_per_bucket}")

    if label_prefix is None:
        label_prefix = {1: "Month", 3: "Q", 12: "Year"}.get(periods_per_bucket, "Period")
    separator = "" if label_prefix == "Q" else " "

    buckets = []
    for start in range(0, len(items), periods_per_bucket):
        if max_buckets is not None and len(buckets) >= max_buckets:
            break
        chunk = items[start:start + periods_per_bucket]
        number = start // periods_per_bucket + 1
        buckets.append(ScheduleBucket(
            label=f"{label_prefix}{separator}{number}",
            first_period=chunk[0].period,
            last_period=chunk[-1].period,
            payment=sum(item.payment for item in chunk),
            principal=sum(item.principal for item in chunk),
            interest=sum(item.interest for item in chunk),
            remaining_balance=chunk[-1].remaining_balance,
        ))
    return buckets


def payment_breakdown(items: list[PaymentScheduleItem]) -> PaymentBreakdown:
    """Total principal and interest over a schedule."""
    if not items:
        return PaymentBreakdown()

    principal = sum(item.principal for item in items)
    interest = sum(item.interest for item in items)
    total = principal + interest

    return PaymentBreakdown(
        principal=principal,
        interest=interest,
        total=total,
        interest_percentage=(interest / total * 100) if total > 0 else 0.0,
    )

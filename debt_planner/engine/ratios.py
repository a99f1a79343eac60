"""Debt-to-income ratio and debt-free progress."""

from debt_planner.engine.errors import InvalidInputError
from debt_planner.models.debt import Debt
from debt_planner.models.plan import DebtProgress, DebtToIncomeRatio, RiskLevel


DEFAULT_TARGET_DTI_RATIO = 36.0
MILESTONES = (5, 25, 50, 75, 100)


def risk_level(ratio: float) -> RiskLevel:
    """Lender risk bands: <= 36% low, <= 43% moderate, <= 50% high."""
    if ratio > 50:
        return RiskLevel.SEVERE
    if ratio > 43:
        return RiskLevel.HIGH
    if ratio > 36:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def debt_to_income_ratio(
    debts: list[Debt],
    monthly_income: float,
    target_ratio: float = DEFAULT_TARGET_DTI_RATIO,
) -> DebtToIncomeRatio:
    """
    Share of monthly income that goes to minimum debt payments.

    Paid-off debts do not count towards monthly payments.

    Raises:
        InvalidInputError: If monthly income is not positive
    """
    if monthly_income <= 0:
        raise InvalidInputError(f"Monthly income must be positive: {monthly_income}")
    if target_ratio <= 0:
        raise InvalidInputError(f"Target ratio must be positive: {target_ratio}")

    payments = sum(
        debt.minimum_payment for debt in debts if debt.current_balance > 0
    )
    ratio = payments / monthly_income * 100
    income_needed = payments / (target_ratio / 100)

    return DebtToIncomeRatio(
        ratio=ratio,
        total_debt=sum(debt.current_balance for debt in debts),
        monthly_debt_payments=payments,
        monthly_income=monthly_income,
        annual_income=monthly_income * 12,
        risk_level=risk_level(ratio),
        target_ratio=target_ratio,
        income_increase_needed=max(income_needed - monthly_income, 0.0),
    )


def debt_progress(debts: list[Debt]) -> DebtProgress:
    """
    How much of the originally recorded debt has been paid off.

    Debts without an original balance count as untouched (original equals
    current).
    """
    original = sum(
        debt.original_balance if debt.original_balance is not None else debt.current_balance
        for debt in debts
    )
    current = sum(debt.current_balance for debt in debts)
    paid = original - current

    percent = (paid / original * 100) if original > 0 else 0.0
    percent = min(100.0, max(0.0, percent))

    return DebtProgress(
        original_total=original,
        current_total=current,
        paid_off_amount=paid,
        progress_percent=percent,
        milestones_reached=[m for m in MILESTONES if percent >= m],
    )

"""Domain errors raised by the repayment engine."""

from typing import Optional
from uuid import UUID


class DebtPlannerError(Exception):
    """Base exception for repayment engine errors."""
    pass


class InvalidInputError(DebtPlannerError, ValueError):
    """A negative balance, negative rate, or non-positive required payment."""
    pass


class InsufficientPaymentError(DebtPlannerError):
    """
    The periodic payment does not exceed the periodic interest charge.

    Such a debt can never be retired at that payment, so we refuse to
    simulate it rather than loop until the horizon.
    """

    def __init__(
        self,
        payment: float,
        interest: float,
        debt_id: Optional[UUID] = None,
        debt_name: Optional[str] = None,
    ):
        self.payment = payment
        self.interest = interest
        self.debt_id = debt_id
        self.debt_name = debt_name

        subject = f"'{debt_name}'" if debt_name else "balance"
        super().__init__(
            f"Payment of {payment:,.2f} does not cover monthly interest of "
            f"{interest:,.2f} on {subject}"
        )

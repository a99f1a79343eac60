"""
Core Debt Models for Debt Planner

These models define the schemas for debts as the user enters them.
They are designed to:
1. Reject impossible values (negative balances, negative rates) at the edge
2. Be serializable for storage and logging
3. Carry everything the repayment engine needs, nothing more

DESIGN DECISION: Money is held as float. Every derived figure (interest,
schedules, totals) is computed with floating point and compared with a
tolerance, so storing Decimal here would only force conversions at the
engine boundary.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class DebtCategory(str, Enum):
    """Supported debt categories."""
    CREDIT_CARD = "credit_card"
    MORTGAGE = "mortgage"
    AUTO = "auto"
    STUDENT = "student"
    PERSONAL = "personal"
    MEDICAL = "medical"
    OTHER = "other"


class RepaymentStrategy(str, Enum):
    """
    Ordering rule used to decide which debt receives extra money first.

    AVALANCHE: highest interest rate first (least total interest)
    SNOWBALL:  smallest balance first (earliest wins)
    HYBRID:    rate weighted by the order of magnitude of the balance
    CUSTOM:    user supplied priority
    """
    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"
    HYBRID = "hybrid"
    CUSTOM = "custom"


# =============================================================================
# CORE DEBT MODEL
# =============================================================================

class Debt(BaseModel):
    """
    A single debt as entered by the user.

    Balances and payments are in the user's currency; interest_rate is an
    annual percentage (19.99 means 19.99% APR).
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    # Identity
    id: UUID = Field(
        default_factory=uuid4,
        description="Unique debt ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name (e.g., 'Visa Platinum')"
    )
    category: DebtCategory = Field(
        default=DebtCategory.OTHER,
        description="Debt category"
    )

    # Amounts
    current_balance: float = Field(
        ...,
        ge=0,
        description="Outstanding balance"
    )
    interest_rate: float = Field(
        ...,
        ge=0,
        description="Annual interest rate in percent"
    )
    minimum_payment: float = Field(
        ...,
        ge=0,
        description="Minimum monthly payment"
    )
    credit_limit: Optional[float] = Field(
        default=None,
        gt=0,
        description="Credit limit for revolving lines"
    )
    original_balance: Optional[float] = Field(
        default=None,
        ge=0,
        description="Balance when the debt was first recorded"
    )

    # Terms
    loan_term_months: Optional[int] = Field(
        default=None,
        ge=1,
        description="Remaining term in months, if the debt has one"
    )
    due_date: Optional[date] = Field(
        default=None,
        description="Next payment due date or final maturity"
    )
    priority: Optional[int] = Field(
        default=None,
        ge=1,
        description="User priority for the custom strategy (1 = first)"
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="User notes about this debt"
    )

    # Timestamps
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the debt was recorded"
    )
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    @model_validator(mode='after')
    def validate_original_balance(self) -> 'Debt':
        """Original balance, when given, cannot be below what is still owed."""
        if (
            self.original_balance is not None
            and self.original_balance < self.current_balance
        ):
            raise ValueError("Original balance cannot be less than current balance")
        return self

    @property
    def monthly_rate(self) -> float:
        """Periodic (monthly) interest rate as a fraction."""
        return self.interest_rate / 100 / 12

    @property
    def monthly_interest(self) -> float:
        """Interest charged on the current balance for one month."""
        return self.current_balance * self.monthly_rate

    @property
    def is_paid_off(self) -> bool:
        return self.current_balance <= 0

    @property
    def utilization(self) -> Optional[float]:
        """Credit utilization in percent, None when there is no limit."""
        if not self.credit_limit:
            return None
        return self.current_balance / self.credit_limit * 100


class CreditCard(BaseModel):
    """A revolving credit line as seen by the utilization optimizer."""

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=200)
    current_balance: float = Field(..., ge=0)
    credit_limit: float = Field(..., gt=0)

    @classmethod
    def from_debt(cls, debt: Debt) -> 'CreditCard':
        if not debt.credit_limit:
            raise ValueError(f"Debt '{debt.name}' has no credit limit")
        return cls(
            id=debt.id,
            name=debt.name,
            current_balance=debt.current_balance,
            credit_limit=debt.credit_limit,
        )

    @property
    def utilization(self) -> float:
        return self.current_balance / self.credit_limit * 100


def credit_cards_from_debts(debts: list[Debt]) -> list[CreditCard]:
    """Pick the credit card debts that carry a usable credit limit."""
    return [
        CreditCard.from_debt(debt)
        for debt in debts
        if debt.category == DebtCategory.CREDIT_CARD
        and debt.credit_limit
        and debt.credit_limit > 0
    ]


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found on a debt."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'insufficient_payment', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating a debt.

    Stage 1: Field checks (can the engine plan this debt at all?)
    Stage 2: Repository checks (duplicates)
    """

    debt_id: UUID
    validated_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    fields_valid: bool = Field(
        ...,
        description="Did field validation pass?"
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    can_plan: bool = Field(
        ...,
        description="Can the repayment engine use this debt?"
    )

    issues: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

"""
Result Models for the Repayment Engine

Everything in this module is DERIVED data: schedules, plans and analysis
results are recomputed on demand from a snapshot of debts and are never
persisted.

DESIGN DECISION: Results that may not resolve within the planning horizon
carry an explicit `unresolved` flag instead of truncated numbers, so callers
can tell "paid off in 360 months" apart from "still owing after 360 months".
"""

from datetime import date
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from debt_planner.models.debt import RepaymentStrategy


# =============================================================================
# SCHEDULES
# =============================================================================

class PaymentScheduleItem(BaseModel):
    """One period of an amortization schedule."""

    period: int = Field(..., ge=1, description="1-based period index")
    payment_date: date
    payment: float = Field(..., description="Total paid this period")
    principal: float = Field(..., description="Part of the payment reducing the balance")
    interest: float = Field(..., description="Part of the payment covering interest")
    remaining_balance: float = Field(..., ge=0, description="Balance after this payment")
    extra_payment: float = Field(
        default=0.0,
        ge=0,
        description="Amount paid above the debt's own minimum"
    )


class AmortizationSchedule(BaseModel):
    """Schedule for a single balance paid with a fixed periodic payment."""

    starting_balance: float
    annual_rate: float
    periodic_payment: float
    items: list[PaymentScheduleItem] = Field(default_factory=list)
    remaining_balance: float = Field(
        default=0.0,
        description="Balance left when the schedule stopped"
    )
    unresolved: bool = Field(
        default=False,
        description="True when the horizon ran out before payoff"
    )

    @property
    def periods(self) -> int:
        return len(self.items)

    @property
    def total_interest(self) -> float:
        return sum(item.interest for item in self.items)

    @property
    def total_paid(self) -> float:
        return sum(item.payment for item in self.items)

    @property
    def payoff_date(self) -> Optional[date]:
        if self.unresolved or not self.items:
            return None
        return self.items[-1].payment_date


class ScheduleBucket(BaseModel):
    """Schedule periods grouped into a quarter, a year, etc."""

    label: str
    first_period: int
    last_period: int
    payment: float
    principal: float
    interest: float
    remaining_balance: float


class PaymentBreakdown(BaseModel):
    """How much of everything paid went to principal versus interest."""

    principal: float = 0.0
    interest: float = 0.0
    total: float = 0.0
    interest_percentage: float = 0.0


# =============================================================================
# REPAYMENT PLANS
# =============================================================================

class DebtRepaymentPlan(BaseModel):
    """Projection for one debt under a repayment strategy."""

    debt_id: UUID
    debt_name: str
    total_balance: float
    interest_rate: float
    monthly_payment: float = Field(
        ...,
        description="Payment made in the first period"
    )
    payoff_date: Optional[date] = None
    total_interest: float = 0.0
    months_to_payoff: Optional[int] = None
    schedule: list[PaymentScheduleItem] = Field(default_factory=list)
    priority_rank: int = Field(
        ...,
        ge=1,
        description="Position of the debt in the strategy ordering"
    )
    extra_payment: float = Field(
        default=0.0,
        description="Total paid above the minimum over the whole schedule"
    )
    remaining_balance: float = 0.0
    unresolved: bool = False


class PlanSummary(BaseModel):
    """Totals across every plan produced by one allocation run."""

    total_interest: float = 0.0
    total_months: Optional[int] = 0
    first_payoff_months: Optional[int] = None
    earliest_payoff_date: Optional[date] = None
    latest_payoff_date: Optional[date] = None
    unresolved: bool = False


class PaymentScenario(BaseModel):
    """A named monthly extra-payment budget to test."""

    name: str = Field(..., min_length=1, max_length=100)
    extra_payment: float = Field(..., ge=0)


class ScenarioResult(BaseModel):
    """Outcome of running the allocator under one scenario."""

    name: str
    extra_payment: float
    strategy: RepaymentStrategy
    total_interest: float
    total_months: Optional[int] = Field(
        default=None,
        description="Months until the last debt is cleared; None if unresolved"
    )
    earliest_payoff_date: Optional[date] = None
    latest_payoff_date: Optional[date] = None
    unresolved: bool = False
    interest_saved: float = Field(
        default=0.0,
        description="Interest saved against paying minimums only"
    )
    months_saved: Optional[int] = Field(
        default=None,
        description="Months saved against paying minimums only"
    )
    plans: list[DebtRepaymentPlan] = Field(default_factory=list)


# =============================================================================
# CONSOLIDATION & REFINANCING
# =============================================================================

class ConsolidationOffer(BaseModel):
    """A consolidation loan on offer."""

    name: str = Field(default="Consolidation loan", max_length=100)
    interest_rate: float = Field(..., ge=0, description="Annual rate in percent")
    term_months: int = Field(..., ge=1)
    origination_fee: float = Field(default=0.0, ge=0)


class ConsolidationResult(BaseModel):
    """Current debts versus one consolidation loan."""

    offer: ConsolidationOffer
    total_balance: float
    blended_rate: float = Field(
        ...,
        description="Balance-weighted average annual rate of the current debts"
    )
    current_monthly_payment: float
    current_total_interest: float
    current_months: Optional[int] = None
    current_unresolved: bool = False

    new_loan_amount: float
    new_monthly_payment: float
    new_total_interest: float
    new_payoff_date: Optional[date] = None

    interest_saved: float
    monthly_payment_delta: float = Field(
        ...,
        description="Current payment minus new payment; positive means cheaper"
    )
    break_even_months: Optional[int] = Field(
        default=None,
        description="Months for payment savings to recover the fee; None if never"
    )

    @property
    def has_break_even(self) -> bool:
        return self.break_even_months is not None


class RefinanceOption(BaseModel):
    """A single loan and the refinance terms offered for it."""

    name: str = Field(..., min_length=1, max_length=100)
    balance: float = Field(..., gt=0)
    current_rate: float = Field(..., ge=0)
    current_monthly_payment: float = Field(..., gt=0)
    new_rate: float = Field(..., ge=0)
    new_term_months: int = Field(..., ge=1)
    closing_costs: float = Field(default=0.0, ge=0)


class RefinanceResult(BaseModel):
    option: RefinanceOption
    current_total_interest: float
    current_months: Optional[int] = None
    current_unresolved: bool = False
    new_monthly_payment: float
    new_total_interest: float
    interest_saved: float
    net_savings: float = Field(
        ...,
        description="Interest saved minus closing costs"
    )
    monthly_savings: float
    break_even_months: Optional[int] = None


class LoanOption(BaseModel):
    """A prospective loan: amount, rate, term and upfront fees."""

    name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., gt=0)
    interest_rate: float = Field(..., ge=0, description="Annual rate in percent")
    term_months: int = Field(..., ge=1)
    fees: float = Field(default=0.0, ge=0)


class LoanComparison(BaseModel):
    """One loan option fully amortized over its term."""

    option: LoanOption
    monthly_payment: float
    total_interest: float
    total_cost: float = Field(
        ...,
        description="Amount plus interest plus fees"
    )
    schedule: AmortizationSchedule
    is_best: bool = False
    cost_over_best: float = Field(
        default=0.0,
        description="Extra total cost compared with the cheapest option"
    )


# =============================================================================
# CREDIT UTILIZATION
# =============================================================================

class UtilizationStatus(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    HIGH = "high"


class CardUtilization(BaseModel):
    """Where one card stands against the target utilization."""

    card_id: UUID
    name: str
    current_balance: float
    credit_limit: float
    current_utilization: float
    status: UtilizationStatus
    optimal_balance: float
    transfer_amount: float = Field(
        ...,
        description="Positive: balance to move off; negative: spare capacity"
    )
    projected_balance: float = Field(
        ...,
        description="Balance after the transfer plan is carried out"
    )


class BalanceTransfer(BaseModel):
    from_card_id: UUID
    from_name: str
    to_card_id: UUID
    to_name: str
    amount: float = Field(..., gt=0)


class CreditScoreImpact(BaseModel):
    points: str
    description: str


class UtilizationPlan(BaseModel):
    target_utilization: float
    overall_utilization: float
    overall_status: UtilizationStatus
    per_card: list[CardUtilization] = Field(default_factory=list)
    transfer_plan: list[BalanceTransfer] = Field(default_factory=list)
    total_transferred: float = 0.0
    untransferred_amount: float = Field(
        default=0.0,
        description="Excess balance no card had room to absorb"
    )
    score_impact: CreditScoreImpact


# =============================================================================
# RATIOS & PROGRESS
# =============================================================================

class RiskLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    SEVERE = "severe"


class DebtToIncomeRatio(BaseModel):
    ratio: float = Field(..., description="Monthly debt payments / monthly income, in percent")
    total_debt: float
    monthly_debt_payments: float
    monthly_income: float
    annual_income: float
    risk_level: RiskLevel
    target_ratio: float
    income_increase_needed: float = Field(
        default=0.0,
        description="Extra monthly income that would bring the ratio to target"
    )


class DebtProgress(BaseModel):
    original_total: float
    current_total: float
    paid_off_amount: float
    progress_percent: float
    milestones_reached: list[int] = Field(default_factory=list)

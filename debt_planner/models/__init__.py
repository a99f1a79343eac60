"""
Data Models Package

This package contains all Pydantic models used in Debt Planner.
Debts flow in through these schemas; every engine result flows out through them.
"""

from debt_planner.models.debt import (
    CreditCard,
    Debt,
    DebtCategory,
    RepaymentStrategy,
    ValidationIssue,
    ValidationResult,
    credit_cards_from_debts,
)
from debt_planner.models.plan import (
    AmortizationSchedule,
    BalanceTransfer,
    CardUtilization,
    ConsolidationOffer,
    ConsolidationResult,
    CreditScoreImpact,
    DebtProgress,
    DebtRepaymentPlan,
    DebtToIncomeRatio,
    LoanComparison,
    LoanOption,
    PaymentBreakdown,
    PaymentScenario,
    PaymentScheduleItem,
    PlanSummary,
    RefinanceOption,
    RefinanceResult,
    RiskLevel,
    ScenarioResult,
    ScheduleBucket,
    UtilizationPlan,
    UtilizationStatus,
)
from debt_planner.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Debt models
    "CreditCard",
    "Debt",
    "DebtCategory",
    "RepaymentStrategy",
    "ValidationIssue",
    "ValidationResult",
    "credit_cards_from_debts",
    # Plan models
    "AmortizationSchedule",
    "BalanceTransfer",
    "CardUtilization",
    "ConsolidationOffer",
    "ConsolidationResult",
    "CreditScoreImpact",
    "DebtProgress",
    "DebtRepaymentPlan",
    "DebtToIncomeRatio",
    "LoanComparison",
    "LoanOption",
    "PaymentBreakdown",
    "PaymentScenario",
    "PaymentScheduleItem",
    "PlanSummary",
    "RefinanceOption",
    "RefinanceResult",
    "RiskLevel",
    "ScenarioResult",
    "ScheduleBucket",
    "UtilizationPlan",
    "UtilizationStatus",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

"""
Repayment Engine Package

Pure calculation functions over debt snapshots. Nothing in this package
performs I/O or keeps state between calls.
"""

from debt_planner.engine.allocator import (
    allocate,
    hybrid_score,
    order_debts,
    summarize_plans,
)
from debt_planner.engine.amortization import (
    DEFAULT_HORIZON_PERIODS,
    add_months,
    aggregate_schedule,
    amortize,
    annuity_payment,
    payment_breakdown,
    payoff_periods,
    periodic_rate,
)
from debt_planner.engine.consolidation import (
    analyze_consolidation,
    blended_rate,
    break_even_months,
    rank_consolidation_offers,
)
from debt_planner.engine.errors import (
    DebtPlannerError,
    InsufficientPaymentError,
    InvalidInputError,
)
from debt_planner.engine.loans import best_loan, compare_loans, price_loan
from debt_planner.engine.ratios import debt_progress, debt_to_income_ratio
from debt_planner.engine.refinancing import analyze_refinance
from debt_planner.engine.scenarios import compare, compare_strategies
from debt_planner.engine.utilization import (
    estimate_score_impact,
    optimize_utilization,
    overall_utilization,
    utilization_status,
)

__all__ = [
    # Amortization
    "DEFAULT_HORIZON_PERIODS",
    "add_months",
    "aggregate_schedule",
    "amortize",
    "annuity_payment",
    "payment_breakdown",
    "payoff_periods",
    "periodic_rate",
    # Allocation
    "allocate",
    "hybrid_score",
    "order_debts",
    "summarize_plans",
    # Scenarios
    "compare",
    "compare_strategies",
    # Consolidation & refinancing
    "analyze_consolidation",
    "analyze_refinance",
    "blended_rate",
    "break_even_months",
    "rank_consolidation_offers",
    # Loan comparison
    "best_loan",
    "compare_loans",
    "price_loan",
    # Utilization
    "estimate_score_impact",
    "optimize_utilization",
    "overall_utilization",
    "utilization_status",
    # Ratios
    "debt_progress",
    "debt_to_income_ratio",
    # Errors
    "DebtPlannerError",
    "InsufficientPaymentError",
    "InvalidInputError",
]

"""
Scenario Comparator

Runs the allocator under several named extra-payment budgets (or several
strategies) and reports comparable totals: months to debt freedom, total
interest, first and last payoff dates, and savings against paying only the
minimums.

More extra payment never lengthens the plan or adds interest, so results
for increasing budgets are weakly decreasing in both totals.
"""

from datetime import date
from typing import Iterable, Optional

from debt_planner.engine.allocator import allocate, summarize_plans
from debt_planner.engine.amortization import DEFAULT_HORIZON_PERIODS
from debt_planner.models.debt import Debt, RepaymentStrategy
from debt_planner.models.plan import (
    DebtRepaymentPlan,
    PaymentScenario,
    PlanSummary,
    ScenarioResult,
)


DEFAULT_COMPARED_STRATEGIES = (
    RepaymentStrategy.AVALANCHE,
    RepaymentStrategy.SNOWBALL,
    RepaymentStrategy.HYBRID,
)


def _to_result(
    name: str,
    extra_payment: float,
    strategy: RepaymentStrategy,
    plans: list[DebtRepaymentPlan],
    baseline: PlanSummary,
) -> ScenarioResult:
    summary = summarize_plans(plans)

    months_saved = None
    if summary.total_months is not None and baseline.total_months is not None:
        months_saved = baseline.total_months - summary.total_months

    return ScenarioResult(
        name=name,
        extra_payment=extra_payment,
        strategy=strategy,
        total_interest=summary.total_interest,
        total_months=summary.total_months,
        earliest_payoff_date=summary.earliest_payoff_date,
        latest_payoff_date=summary.latest_payoff_date,
        unresolved=summary.unresolved,
        interest_saved=baseline.total_interest - summary.total_interest,
        months_saved=months_saved,
        plans=plans,
    )


def compare(
    debts: list[Debt],
    scenarios: list[PaymentScenario],
    strategy: RepaymentStrategy,
    horizon_periods: int = DEFAULT_HORIZON_PERIODS,
    start_date: Optional[date] = None,
) -> list[ScenarioResult]:
    """
    Run the allocator once per scenario.

    Args:
        debts: Debts to plan
        scenarios: Named extra-payment budgets, reported in the given order
        strategy: Ordering strategy shared by every scenario
        horizon_periods: Maximum number of months to simulate
        start_date: Date the plans count from (defaults to today)

    Returns:
        One ScenarioResult per scenario. Savings are measured against a
        minimum-payments-only run of the same strategy.
    """
    if not scenarios:
        return []

    start = start_date or date.today()
    baseline = summarize_plans(
        allocate(debts, 0.0, strategy, horizon_periods, start)
    )

    return [
        _to_result(
            name=scenario.name,
            extra_payment=scenario.extra_payment,
            strategy=strategy,
            plans=allocate(debts, scenario.extra_payment, strategy, horizon_periods, start),
            baseline=baseline,
        )
        for scenario in scenarios
    ]


def compare_strategies(
    debts: list[Debt],
    extra_payment: float,
    strategies: Iterable[RepaymentStrategy] = DEFAULT_COMPARED_STRATEGIES,
    horizon_periods: int = DEFAULT_HORIZON_PERIODS,
    start_date: Optional[date] = None,
) -> list[ScenarioResult]:
    """Run the same budget under each strategy; results are named after the strategy."""
    start = start_date or date.today()
    results = []

    for strategy in strategies:
        baseline = summarize_plans(
            allocate(debts, 0.0, strategy, horizon_periods, start)
        )
        results.append(_to_result(
            name=strategy.value,
            extra_payment=extra_payment,
            strategy=strategy,
            plans=allocate(debts, extra_payment, strategy, horizon_periods, start),
            baseline=baseline,
        ))

    return results

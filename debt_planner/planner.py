"""
Debt Planning Service

This module ties the repository, the validator, the repayment engine and
the audit log together. It is the entry point a UI or API talks to.

DESIGN DECISION: The service enforces the boundaries:
- No debt is stored without passing validation
- Every calculation runs on a fresh snapshot loaded from the repository
- Every calculation and every debt change is audited

The repository is injected. The service never falls back to a shared
table when no backend is configured; create_app_components picks one
from settings at startup.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from debt_planner.audit import AuditLogger, create_correlation_id
from debt_planner.config import get_settings
from debt_planner.config.settings import PlannerSettings
from debt_planner.engine import (
    DebtPlannerError,
    allocate,
    compare,
    compare_strategies,
    debt_progress,
    debt_to_income_ratio,
    optimize_utilization,
    summarize_plans,
)
from debt_planner.engine import analyze_consolidation as run_consolidation
from debt_planner.models.audit import AuditEventBuilder
from debt_planner.models.debt import (
    Debt,
    DebtCategory,
    RepaymentStrategy,
    credit_cards_from_debts,
)
from debt_planner.models.plan import (
    ConsolidationOffer,
    ConsolidationResult,
    DebtProgress,
    DebtRepaymentPlan,
    DebtToIncomeRatio,
    PaymentScenario,
    ScenarioResult,
    UtilizationPlan,
)
from debt_planner.services.storage import (
    DebtRepositoryInterface,
    StorageError,
    create_storage,
)
from debt_planner.validation import DebtValidationError, DebtValidator


class DebtPlanningService:
    """
    Calculations and debt bookkeeping over one repository.

    Every public method takes an optional correlation_id; one is created
    when the caller does not pass it.
    """

    def __init__(
        self,
        repository: DebtRepositoryInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[PlannerSettings] = None,
        validator: Optional[DebtValidator] = None,
    ):
        self._repository = repository
        self._audit_logger = audit_logger
        self._settings = settings or get_settings().planner
        self._validator = validator or DebtValidator(repository, self._settings)

    @property
    def repository(self) -> DebtRepositoryInterface:
        return self._repository

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit_logger

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _audit(self, event) -> None:
        if self._audit_logger:
            await self._audit_logger.log(event)

    async def _calculation_failed(
        self,
        calculation: str,
        error: Exception,
        correlation_id: UUID,
    ) -> None:
        if self._audit_logger:
            await self._audit_logger.log_calculation_failed(calculation, error, correlation_id)

    async def _storage_failed(
        self,
        operation: str,
        error: StorageError,
        correlation_id: UUID,
    ) -> None:
        if self._audit_logger:
            await self._audit_logger.log_storage_error(operation, str(error), correlation_id)

    async def _validate_or_raise(self, debt: Debt, correlation_id: UUID) -> None:
        result = await self._validator.validate(debt)
        if result.is_valid:
            return

        if self._audit_logger:
            issues = [
                {"field": i.field, "type": i.issue_type, "message": i.message}
                for i in result.issues
            ]
            await self._audit_logger.log_validation_failed(debt.id, issues, correlation_id)
        raise DebtValidationError(result, self._validator.get_user_friendly_summary(result))

    async def _load_debts(self, correlation_id: UUID) -> list[Debt]:
        try:
            return await self._repository.list_debts()
        except StorageError as e:
            await self._storage_failed("list_debts", e, correlation_id)
            raise

    async def _load_card_debts(self, correlation_id: UUID) -> list[Debt]:
        try:
            return await self._repository.list_debts(category=DebtCategory.CREDIT_CARD)
        except StorageError as e:
            await self._storage_failed("list_debts", e, correlation_id)
            raise

    # =========================================================================
    # CALCULATIONS
    # =========================================================================

    async def build_plan(
        self,
        strategy: Optional[RepaymentStrategy] = None,
        extra_payment: float = 0.0,
        start_date: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[DebtRepaymentPlan]:
        """
        Repayment plan for every stored debt.

        Returns:
            One plan per debt, in the order the strategy pays them

        Raises:
            InvalidInputError, InsufficientPaymentError: From the engine
        """
        correlation_id = correlation_id or create_correlation_id()
        strategy = strategy or self._settings.default_strategy
        debts = await self._load_debts(correlation_id)

        try:
            plans = allocate(
                debts,
                extra_payment,
                strategy,
                horizon_periods=self._settings.horizon_periods,
                start_date=start_date,
            )
        except DebtPlannerError as e:
            await self._calculation_failed("build_plan", e, correlation_id)
            raise

        summary = summarize_plans(plans)
        await self._audit(AuditEventBuilder.plan_calculated(
            strategy=strategy.value,
            extra_payment=extra_payment,
            debt_count=len(debts),
            total_interest=summary.total_interest,
            total_months=summary.total_months,
            correlation_id=correlation_id,
        ))
        return plans

    async def compare_scenarios(
        self,
        scenarios: list[PaymentScenario],
        strategy: Optional[RepaymentStrategy] = None,
        start_date: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[ScenarioResult]:
        """Compare extra-payment budgets under one strategy."""
        correlation_id = correlation_id or create_correlation_id()
        strategy = strategy or self._settings.default_strategy
        debts = await self._load_debts(correlation_id)

        try:
            results = compare(
                debts,
                scenarios,
                strategy,
                horizon_periods=self._settings.horizon_periods,
                start_date=start_date,
            )
        except DebtPlannerError as e:
            await self._calculation_failed("compare_scenarios", e, correlation_id)
            raise

        await self._audit(AuditEventBuilder.scenarios_compared(
            strategy=strategy.value,
            scenario_names=[scenario.name for scenario in scenarios],
            correlation_id=correlation_id,
        ))
        return results

    async def compare_strategies(
        self,
        extra_payment: float = 0.0,
        start_date: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[ScenarioResult]:
        """Compare avalanche, snowball and hybrid for one budget."""
        correlation_id = correlation_id or create_correlation_id()
        debts = await self._load_debts(correlation_id)

        try:
            results = compare_strategies(
                debts,
                extra_payment,
                horizon_periods=self._settings.horizon_periods,
                start_date=start_date,
            )
        except DebtPlannerError as e:
            await self._calculation_failed("compare_strategies", e, correlation_id)
            raise

        await self._audit(AuditEventBuilder.scenarios_compared(
            strategy="all",
            scenario_names=[result.name for result in results],
            correlation_id=correlation_id,
        ))
        return results

    async def analyze_consolidation(
        self,
        offer: ConsolidationOffer,
        start_date: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ConsolidationResult:
        """Weigh a consolidation loan against the stored debts."""
        correlation_id = correlation_id or create_correlation_id()
        debts = await self._load_debts(correlation_id)

        try:
            result = run_consolidation(
                debts,
                offer,
                horizon_periods=self._settings.horizon_periods,
                start_date=start_date,
            )
        except DebtPlannerError as e:
            await self._calculation_failed("analyze_consolidation", e, correlation_id)
            raise

        await self._audit(AuditEventBuilder.consolidation_analyzed(
            offer_name=offer.name,
            interest_saved=result.interest_saved,
            break_even_months=result.break_even_months,
            correlation_id=correlation_id,
        ))
        return result

    async def optimize_utilization(
        self,
        target: Optional[float] = None,
        correlation_id: Optional[UUID] = None,
    ) -> UtilizationPlan:
        """
        Utilization plan for the stored credit cards.

        Args:
            target: Target utilization in percent (defaults to settings)
        """
        correlation_id = correlation_id or create_correlation_id()
        target = self._settings.target_utilization_percent if target is None else target
        cards = credit_cards_from_debts(await self._load_card_debts(correlation_id))

        try:
            plan = optimize_utilization(cards, target)
        except DebtPlannerError as e:
            await self._calculation_failed("optimize_utilization", e, correlation_id)
            raise

        await self._audit(AuditEventBuilder.utilization_optimized(
            target_utilization=target,
            card_count=len(cards),
            transfer_count=len(plan.transfer_plan),
            correlation_id=correlation_id,
        ))
        return plan

    async def debt_to_income(
        self,
        monthly_income: float,
        correlation_id: Optional[UUID] = None,
    ) -> DebtToIncomeRatio:
        """Debt-to-income ratio against the configured target."""
        correlation_id = correlation_id or create_correlation_id()
        debts = await self._load_debts(correlation_id)

        try:
            ratio = debt_to_income_ratio(
                debts,
                monthly_income,
                target_ratio=self._settings.target_dti_ratio,
            )
        except DebtPlannerError as e:
            await self._calculation_failed("debt_to_income", e, correlation_id)
            raise

        await self._audit(AuditEventBuilder.ratio_calculated(
            ratio=ratio.ratio,
            risk_level=ratio.risk_level.value,
            correlation_id=correlation_id,
        ))
        return ratio

    async def progress(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> DebtProgress:
        correlation_id = correlation_id or create_correlation_id()
        return debt_progress(await self._load_debts(correlation_id))

    # =========================================================================
    # DEBT BOOKKEEPING
    # =========================================================================

    async def add_debt(
        self,
        debt: Debt,
        correlation_id: Optional[UUID] = None,
    ) -> Debt:
        """
        Validate and store a new debt.

        Raises:
            DebtValidationError: If validation found errors (nothing is stored)
            DuplicateError: If a debt with this ID already exists
        """
        correlation_id = correlation_id or create_correlation_id()

        await self._validate_or_raise(debt, correlation_id)

        try:
            await self._repository.save_debt(debt)
        except StorageError as e:
            await self._storage_failed("save_debt", e, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_debt_saved(
                debt.id, debt.name, debt.current_balance, correlation_id
            )
        return debt

    async def update_debt(
        self,
        debt: Debt,
        correlation_id: Optional[UUID] = None,
    ) -> Debt:
        """
        Validate and replace a stored debt.

        Raises:
            DebtValidationError: If validation found errors
            NotFoundError: If the debt does not exist
        """
        correlation_id = correlation_id or create_correlation_id()

        await self._validate_or_raise(debt, correlation_id)

        try:
            await self._repository.update_debt(debt)
        except StorageError as e:
            await self._storage_failed("update_debt", e, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_debt_updated(debt.id, debt.name, correlation_id)
        return debt

    async def remove_debt(
        self,
        debt_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Delete a debt; False if it did not exist."""
        correlation_id = correlation_id or create_correlation_id()

        try:
            deleted = await self._repository.delete_debt(debt_id)
        except StorageError as e:
            await self._storage_failed("delete_debt", e, correlation_id)
            raise

        if deleted and self._audit_logger:
            await self._audit_logger.log_debt_deleted(debt_id, correlation_id)
        return deleted


def create_app_components(
    backend: Optional[str] = None,
) -> DebtPlanningService:
    """
    Factory function to create the planning service.

    Args:
        backend: 'memory' or 'google_sheets'. Defaults to the
                 storage_backend setting.

    Returns:
        A DebtPlanningService wired to the chosen repository, with audit
        events persisted to the same backend.
    """
    settings = get_settings()
    backend = backend or settings.app.storage_backend

    repository, audit_storage = create_storage(backend)
    return DebtPlanningService(
        repository=repository,
        audit_logger=AuditLogger(audit_storage),
        settings=settings.planner,
    )

"""
Two-Stage Debt Validation

STAGE 1 - FIELD CHECKS:
- Can the repayment engine plan this debt at all?
- Is anything about the numbers suspicious?

STAGE 2 - REPOSITORY CHECKS:
- Does another debt already use this name?
- Needs the repository, so it is skipped when none is configured

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for the user to review.
"""

from datetime import date
from typing import Optional

import structlog

from debt_planner.config import get_settings
from debt_planner.config.settings import PlannerSettings
from debt_planner.models.debt import (
    Debt,
    DebtCategory,
    ValidationIssue,
    ValidationResult,
)
from debt_planner.services.storage import DebtRepositoryInterface, StorageError


logger = structlog.get_logger("debt_planner.validation")


class DebtValidationError(ValueError):
    """A debt failed validation and was not stored."""

    def __init__(self, result: ValidationResult, message: str):
        self.result = result
        super().__init__(message)


class DebtValidator:
    """
    Validates a debt before it is stored or planned.

    Stage 1: Field checks (no storage needed)
    Stage 2: Duplicate name check (needs a repository)
    """

    def __init__(
        self,
        repository: Optional[DebtRepositoryInterface] = None,
        settings: Optional[PlannerSettings] = None,
    ):
        """
        Initialize validator.

        Args:
            repository: Debt repository for duplicate checking.
                        If None, duplicate checking is skipped.
            settings: Planner settings (defaults to the environment's)
        """
        self._repository = repository
        self._settings = settings or get_settings().planner

    def validate_fields(self, debt: Debt) -> list[ValidationIssue]:
        """
        Stage 1: Field checks.

        A minimum payment that cannot outrun interest is the only error;
        everything else here is a warning.
        """
        issues = []

        if debt.current_balance > 0 and debt.minimum_payment <= debt.monthly_interest:
            issues.append(ValidationIssue(
                field="minimum_payment",
                issue_type="insufficient_payment",
                message=(
                    f"Minimum payment ({debt.minimum_payment:,.2f}) does not cover "
                    f"monthly interest ({debt.monthly_interest:,.2f}); "
                    "this debt would never be paid off"
                ),
                severity="error",
                suggested_fix=(
                    f"Enter a minimum payment above {debt.monthly_interest:,.2f}"
                ),
            ))

        if debt.category == DebtCategory.CREDIT_CARD and not debt.credit_limit:
            issues.append(ValidationIssue(
                field="credit_limit",
                issue_type="missing",
                message="Credit card has no credit limit",
                severity="warning",
                suggested_fix="Add the limit to include this card in utilization planning",
            ))

        if debt.interest_rate > self._settings.max_reasonable_rate:
            issues.append(ValidationIssue(
                field="interest_rate",
                issue_type="suspicious_value",
                message=f"Interest rate ({debt.interest_rate:g}%) seems unusually high",
                severity="warning",
                suggested_fix="Enter the annual rate as a percentage (e.g., 19.99)",
            ))

        if debt.current_balance > 0 and debt.minimum_payment > debt.current_balance:
            issues.append(ValidationIssue(
                field="minimum_payment",
                issue_type="suspicious_value",
                message="Minimum payment is larger than the balance",
                severity="warning",
                suggested_fix="Please verify the minimum payment",
            ))

        if debt.credit_limit and debt.current_balance > debt.credit_limit:
            issues.append(ValidationIssue(
                field="current_balance",
                issue_type="over_limit",
                message=(
                    f"Balance ({debt.current_balance:,.2f}) is over the credit limit "
                    f"({debt.credit_limit:,.2f})"
                ),
                severity="warning",
                suggested_fix="Over-limit balances may carry fees",
            ))

        if debt.due_date and debt.due_date < date.today() and not debt.is_paid_off:
            issues.append(ValidationIssue(
                field="due_date",
                issue_type="past_due",
                message=f"Due date ({debt.due_date}) has passed",
                severity="warning",
                suggested_fix="Update the due date or check whether a payment was missed",
            ))

        return issues

    async def _check_duplicates(self, debt: Debt) -> list[ValidationIssue]:
        """Stage 2: another debt with the same name."""
        if self._repository is None:
            return []

        try:
            exists = await self._repository.debt_name_exists(debt.name, exclude_id=debt.id)
        except StorageError as e:
            # Storage trouble must not fail validation
            logger.warning("duplicate_check_failed", debt_id=str(debt.id), error=str(e))
            return []

        if not exists:
            return []
        return [ValidationIssue(
            field="name",
            issue_type="potential_duplicate",
            message=f"A debt named '{debt.name}' already exists",
            severity="warning",
            suggested_fix="Please verify this isn't a duplicate entry",
        )]

    async def validate(
        self,
        debt: Debt,
        check_duplicates: bool = True,
    ) -> ValidationResult:
        """
        Run both validation stages.

        Args:
            debt: The debt to validate
            check_duplicates: Whether to check for duplicates (requires repository)
        """
        issues = self.validate_fields(debt)
        fields_valid = not any(issue.severity == "error" for issue in issues)

        if check_duplicates:
            issues.extend(await self._check_duplicates(debt))

        warnings = [issue.message for issue in issues if issue.severity == "warning"]
        has_errors = any(issue.severity == "error" for issue in issues)

        return ValidationResult(
            debt_id=debt.id,
            fields_valid=fields_valid,
            is_valid=not has_errors,
            can_plan=not has_errors,
            issues=issues,
            warnings=warnings,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.

        This is what we show to non-technical users.
        """
        if result.is_valid and not result.warnings:
            return "✅ All checks passed!"

        lines = []

        if result.has_errors:
            lines.append("❌ This debt cannot be planned yet:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        lines.append("")
        if result.can_plan:
            lines.append("You can still save this debt, but please review carefully.")
        else:
            lines.append("Please fix the issues above before continuing.")

        return "\n".join(lines).strip()

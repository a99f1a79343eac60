"""
Tests for Debt Planner models

Test strategy:
1. Unit tests for individual components (models, engine, validator)
2. Integration tests for the planning service (in-memory storage)
3. No real API calls in tests (fake worksheets stand in for Google Sheets)
"""

import pytest
from datetime import date
from uuid import uuid4

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
    PaymentScenario,
    PaymentScheduleItem,
)
from debt_planner.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestDebtModels:
    """Tests for debt-related Pydantic models."""

    def test_debt_creation(self):
        """Test Debt model creation with defaults."""
        debt = Debt(
            name="Visa",
            current_balance=2500,
            interest_rate=19.99,
            minimum_payment=75,
        )
        assert debt.name == "Visa"
        assert debt.category == DebtCategory.OTHER
        assert debt.credit_limit is None
        assert debt.priority is None

    def test_debt_strips_whitespace(self):
        """Test that whitespace is stripped from the debt name."""
        debt = Debt(name="  Car loan  ", current_balance=1, interest_rate=0, minimum_payment=1)
        assert debt.name == "Car loan"

    def test_debt_rejects_negative_balance(self):
        """Test that negative balances are rejected."""
        with pytest.raises(ValueError):
            Debt(name="Bad", current_balance=-100, interest_rate=5, minimum_payment=10)

    def test_debt_rejects_negative_rate(self):
        """Test that negative interest rates are rejected."""
        with pytest.raises(ValueError):
            Debt(name="Bad", current_balance=100, interest_rate=-1, minimum_payment=10)

    def test_debt_original_balance_validation(self):
        """Test that the original balance cannot be below the current one."""
        with pytest.raises(ValueError, match="Original balance cannot be less than current balance"):
            Debt(
                name="Loan",
                current_balance=5000,
                original_balance=4000,
                interest_rate=5,
                minimum_payment=100,
            )

    def test_monthly_interest(self):
        """Test monthly rate and interest derived from the annual rate."""
        debt = Debt(name="Loan", current_balance=1200, interest_rate=12, minimum_payment=50)
        assert debt.monthly_rate == pytest.approx(0.01)
        assert debt.monthly_interest == pytest.approx(12.0)

    def test_utilization(self):
        """Test utilization is None without a limit."""
        card = Debt(
            name="Card",
            category=DebtCategory.CREDIT_CARD,
            current_balance=300,
            credit_limit=1000,
            interest_rate=20,
            minimum_payment=25,
        )
        loan = Debt(name="Loan", current_balance=300, interest_rate=5, minimum_payment=25)
        assert card.utilization == pytest.approx(30.0)
        assert loan.utilization is None

    def test_credit_cards_from_debts(self):
        """Test only credit cards with a limit become CreditCards."""
        debts = [
            Debt(
                name="Card A",
                category=DebtCategory.CREDIT_CARD,
                current_balance=500,
                credit_limit=1000,
                interest_rate=20,
                minimum_payment=25,
            ),
            Debt(
                name="Card B",
                category=DebtCategory.CREDIT_CARD,
                current_balance=500,
                interest_rate=20,
                minimum_payment=25,
            ),
            Debt(name="Loan", current_balance=500, interest_rate=5, minimum_payment=25),
        ]
        cards = credit_cards_from_debts(debts)
        assert [card.name for card in cards] == ["Card A"]
        assert cards[0].id == debts[0].id

    def test_credit_card_from_debt_requires_limit(self):
        """Test that a debt without a limit cannot become a CreditCard."""
        debt = Debt(name="Loan", current_balance=500, interest_rate=5, minimum_payment=25)
        with pytest.raises(ValueError, match="has no credit limit"):
            CreditCard.from_debt(debt)

    def test_strategy_values(self):
        """Test strategy string values."""
        assert RepaymentStrategy("avalanche") == RepaymentStrategy.AVALANCHE
        assert RepaymentStrategy.SNOWBALL.value == "snowball"


class TestPlanModels:
    """Tests for plan result models."""

    def test_schedule_properties(self):
        """Test totals and payoff date on a schedule."""
        items = [
            PaymentScheduleItem(
                period=1,
                payment_date=date(2025, 2, 1),
                payment=60,
                principal=50,
                interest=10,
                remaining_balance=50,
            ),
            PaymentScheduleItem(
                period=2,
                payment_date=date(2025, 3, 1),
                payment=55,
                principal=50,
                interest=5,
                remaining_balance=0,
            ),
        ]
        schedule = AmortizationSchedule(
            starting_balance=100,
            annual_rate=10,
            periodic_payment=60,
            items=items,
        )
        assert schedule.periods == 2
        assert schedule.total_interest == pytest.approx(15)
        assert schedule.total_paid == pytest.approx(115)
        assert schedule.payoff_date == date(2025, 3, 1)

    def test_unresolved_schedule_has_no_payoff_date(self):
        """Test an unresolved schedule reports no payoff date."""
        schedule = AmortizationSchedule(
            starting_balance=100,
            annual_rate=10,
            periodic_payment=60,
            remaining_balance=40,
            unresolved=True,
        )
        assert schedule.payoff_date is None

    def test_scenario_rejects_negative_extra(self):
        """Test that a scenario cannot have a negative extra payment."""
        with pytest.raises(ValueError):
            PaymentScenario(name="Bad", extra_payment=-10)


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.PLAN_CALCULATED,
            description="Plan calculated",
        )
        assert event.event_type == AuditEventType.PLAN_CALCULATED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.DEBT_SAVED,
            description="Debt saved",
            details={"name": "Visa", "balance": 1000.0},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "debt_saved"
        assert log_dict["details"]["name"] == "Visa"

    def test_audit_event_to_sheets_row(self):
        """Test conversion to sheets row."""
        event = AuditEventBuilder.debt_deleted(uuid4(), uuid4())
        row = event.to_sheets_row()
        assert len(row) == 11
        assert row[2] == "debt_deleted"
        assert row[10] == "True"

    def test_builder_debt_saved(self):
        """Test AuditEventBuilder.debt_saved."""
        debt_id = uuid4()
        correlation_id = uuid4()

        event = AuditEventBuilder.debt_saved(debt_id, "Visa", 1234.5, correlation_id)

        assert event.entity_id == debt_id
        assert event.correlation_id == correlation_id
        assert event.is_user_action is True
        assert "1,234.50" in event.description

    def test_builder_plan_calculated(self):
        """Test plan events round the interest figure."""
        event = AuditEventBuilder.plan_calculated(
            strategy="avalanche",
            extra_payment=100.0,
            debt_count=2,
            total_interest=1234.5678,
            total_months=24,
            correlation_id=uuid4(),
        )
        assert event.details["total_interest"] == 1234.57
        assert event.details["total_months"] == 24
        assert event.description.startswith("Avalanche")

    def test_builder_calculation_failed(self):
        """Test calculation failures are warnings carrying the error type."""
        event = AuditEventBuilder.calculation_failed(
            calculation="build_plan",
            error_type="InsufficientPaymentError",
            error_message="Payment too small",
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.error_code == "InsufficientPaymentError"


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            debt_id=uuid4(),
            fields_valid=False,
            is_valid=False,
            can_plan=False,
            issues=[
                ValidationIssue(
                    field="minimum_payment",
                    issue_type="insufficient_payment",
                    message="Payment too small",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            debt_id=uuid4(),
            fields_valid=True,
            is_valid=True,
            can_plan=True,
            issues=[
                ValidationIssue(
                    field="due_date",
                    issue_type="past_due",
                    message="Due date has passed",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0

    def test_issue_severity_pattern(self):
        """Test that unknown severities are rejected."""
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""
Audit Models for Debt Planner

Every change to a user's debts and every plan we compute is logged.
This provides:
1. Traceability of what numbers the user was shown, and from which inputs
2. Debugging information when a plan looks wrong
3. A history of debt edits

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Debt records
    DEBT_SAVED = "debt_saved"
    DEBT_UPDATED = "debt_updated"
    DEBT_DELETED = "debt_deleted"
    DEBT_VALIDATION_FAILED = "debt_validation_failed"

    # Calculations
    PLAN_CALCULATED = "plan_calculated"
    SCENARIOS_COMPARED = "scenarios_compared"
    CONSOLIDATION_ANALYZED = "consolidation_analyzed"
    UTILIZATION_OPTIMIZED = "utilization_optimized"
    RATIO_CALCULATED = "ratio_calculated"
    CALCULATION_FAILED = "calculation_failed"

    # System events
    SYSTEM_ERROR = "system_error"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'debt', 'plan')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one planning request)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, entity_type, entity_id,
         correlation_id, description, details_json, error_message, is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            str(self.entity_id) if self.entity_id else "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.debt_saved(debt_id, name, balance, correlation_id)
        event = AuditEventBuilder.plan_calculated("avalanche", 200.0, 3, ...)
    """

    @staticmethod
    def debt_saved(
        debt_id: UUID,
        name: str,
        balance: float,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_SAVED,
            entity_type="debt",
            entity_id=debt_id,
            correlation_id=correlation_id,
            description=f"Debt saved: {name} ({balance:,.2f})",
            details={
                "name": name,
                "balance": balance,
            },
            is_user_action=True,
        )

    @staticmethod
    def debt_updated(
        debt_id: UUID,
        name: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_UPDATED,
            entity_type="debt",
            entity_id=debt_id,
            correlation_id=correlation_id,
            description=f"Debt updated: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def debt_deleted(
        debt_id: UUID,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_DELETED,
            entity_type="debt",
            entity_id=debt_id,
            correlation_id=correlation_id,
            description="Debt deleted",
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        debt_id: UUID,
        issues: list[dict],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="debt",
            entity_id=debt_id,
            correlation_id=correlation_id,
            description=f"Debt validation failed with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def plan_calculated(
        strategy: str,
        extra_payment: float,
        debt_count: int,
        total_interest: float,
        total_months: Optional[int],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PLAN_CALCULATED,
            entity_type="plan",
            correlation_id=correlation_id,
            description=f"{strategy.capitalize()} plan calculated for {debt_count} debts",
            details={
                "strategy": strategy,
                "extra_payment": extra_payment,
                "debt_count": debt_count,
                "total_interest": round(total_interest, 2),
                "total_months": total_months,
            },
        )

    @staticmethod
    def scenarios_compared(
        strategy: str,
        scenario_names: list[str],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCENARIOS_COMPARED,
            entity_type="plan",
            correlation_id=correlation_id,
            description=f"Compared {len(scenario_names)} scenarios ({strategy})",
            details={
                "strategy": strategy,
                "scenarios": scenario_names,
            },
        )

    @staticmethod
    def consolidation_analyzed(
        offer_name: str,
        interest_saved: float,
        break_even_months: Optional[int],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONSOLIDATION_ANALYZED,
            entity_type="consolidation",
            correlation_id=correlation_id,
            description=f"Consolidation analyzed: {offer_name}",
            details={
                "offer": offer_name,
                "interest_saved": round(interest_saved, 2),
                "break_even_months": break_even_months,
            },
        )

    @staticmethod
    def utilization_optimized(
        target_utilization: float,
        card_count: int,
        transfer_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.UTILIZATION_OPTIMIZED,
            entity_type="utilization",
            correlation_id=correlation_id,
            description=f"Utilization plan for {card_count} cards at {target_utilization:g}%",
            details={
                "target_utilization": target_utilization,
                "card_count": card_count,
                "transfer_count": transfer_count,
            },
        )

    @staticmethod
    def ratio_calculated(
        ratio: float,
        risk_level: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RATIO_CALCULATED,
            entity_type="ratio",
            correlation_id=correlation_id,
            description=f"Debt-to-income ratio calculated: {ratio:.1f}%",
            details={
                "ratio": round(ratio, 2),
                "risk_level": risk_level,
            },
        )

    @staticmethod
    def calculation_failed(
        calculation: str,
        error_type: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CALCULATION_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Calculation failed: {calculation}",
            error_code=error_type,
            error_message=error_message,
            details={"calculation": calculation},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
            correlation_id=correlation_id,
        )

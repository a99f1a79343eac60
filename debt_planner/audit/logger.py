"""
Audit Logger

DESIGN DECISION: Every debt change and every calculation shown to the user
is logged. This provides:
1. Traceability from a displayed plan back to its inputs
2. Debugging capability when a plan looks wrong

The audit logger:
- Always writes a structured local log line
- Persists to audit storage when one is configured
- Never raises because persistence failed
- Supports correlation IDs to trace related events
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from debt_planner.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from debt_planner.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence), when configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Args:
            storage: Storage backend for persistence.
                     If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("debt_planner.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_debt_saved(self, debt_id: UUID, name: str, balance: float, correlation_id: UUID) -> None:
        await self.log(AuditEventBuilder.debt_saved(debt_id, name, balance, correlation_id))

    async def log_debt_updated(self, debt_id: UUID, name: str, correlation_id: UUID) -> None:
        await self.log(AuditEventBuilder.debt_updated(debt_id, name, correlation_id))

    async def log_debt_deleted(self, debt_id: UUID, correlation_id: UUID) -> None:
        await self.log(AuditEventBuilder.debt_deleted(debt_id, correlation_id))

    async def log_validation_failed(
        self,
        debt_id: UUID,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.validation_failed(debt_id, issues, correlation_id))

    async def log_calculation_failed(
        self,
        calculation: str,
        error: Exception,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a calculation that raised, keeping the exception type."""
        event = AuditEventBuilder.calculation_failed(
            calculation=calculation,
            error_type=type(error).__name__,
            error_message=str(error),
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.storage_error(operation, error_message, correlation_id))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an unexpected error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user request and pass it through every
    operation that request triggers.
    """
    return uuid4()

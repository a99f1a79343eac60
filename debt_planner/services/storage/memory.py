"""
In-Memory Storage Implementation

Used for tests and for sessions without a configured backend. Every
repository instance owns its own data; two instances never share state.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from debt_planner.models.audit import AuditEvent
from debt_planner.models.debt import Debt, DebtCategory
from debt_planner.services.storage.interface import (
    AuditStorageInterface,
    DebtRepositoryInterface,
    DuplicateError,
    NotFoundError,
)


class InMemoryDebtRepository(DebtRepositoryInterface):
    """Debts kept in a dict keyed by ID, in insertion order."""

    def __init__(self, debts: Optional[list[Debt]] = None):
        self._debts: dict[UUID, Debt] = {}
        for debt in debts or []:
            self._debts[debt.id] = debt.model_copy()

    async def save_debt(self, debt: Debt) -> bool:
        if debt.id in self._debts:
            raise DuplicateError(f"Debt already exists: {debt.id}")
        self._debts[debt.id] = debt.model_copy()
        return True

    async def get_debt(self, debt_id: UUID) -> Optional[Debt]:
        debt = self._debts.get(debt_id)
        return debt.model_copy() if debt else None

    async def update_debt(self, debt: Debt) -> bool:
        if debt.id not in self._debts:
            raise NotFoundError(f"Debt not found: {debt.id}")
        self._debts[debt.id] = debt.model_copy(update={"updated_at": datetime.utcnow()})
        return True

    async def delete_debt(self, debt_id: UUID) -> bool:
        return self._debts.pop(debt_id, None) is not None

    async def list_debts(
        self,
        category: Optional[DebtCategory] = None,
        include_paid_off: bool = True,
    ) -> list[Debt]:
        debts = []
        for debt in self._debts.values():
            if category and debt.category != category:
                continue
            if not include_paid_off and debt.current_balance <= 0:
                continue
            debts.append(debt.model_copy())
        return debts

    async def debt_name_exists(
        self,
        name: str,
        exclude_id: Optional[UUID] = None,
    ) -> bool:
        wanted = name.strip().lower()
        return any(
            debt.name.lower() == wanted
            for debt in self._debts.values()
            if debt.id != exclude_id
        )


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return sorted(self._events, key=lambda e: e.timestamp, reverse=True)[:limit]

"""
Abstract Storage Interface

DESIGN DECISION: Debts are read and written through an abstract repository
that is created at startup and passed in to whoever needs it. This allows us to:
1. Keep an in-memory store for tests and unauthenticated sessions
2. Keep Google Sheets (or a real database later) for persistence
3. Never fall back to a process-wide table when a backend is missing

The interface is intentionally simple - just the operations the planner needs.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from debt_planner.models.audit import AuditEvent
from debt_planner.models.debt import Debt, DebtCategory


class DebtRepositoryInterface(ABC):
    """
    Abstract interface for debt storage operations.

    Any storage implementation (in-memory, Google Sheets, PostgreSQL, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def save_debt(self, debt: Debt) -> bool:
        """
        Save a new debt.

        Returns:
            True if saved successfully

        Raises:
            DuplicateError: If a debt with the same ID exists
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def get_debt(self, debt_id: UUID) -> Optional[Debt]:
        """
        Retrieve a debt by its ID.

        Returns:
            The debt if found, None otherwise
        """
        pass

    @abstractmethod
    async def update_debt(self, debt: Debt) -> bool:
        """
        Update an existing debt.

        Raises:
            NotFoundError: If debt doesn't exist
            StorageError: If update fails
        """
        pass

    @abstractmethod
    async def delete_debt(self, debt_id: UUID) -> bool:
        """
        Delete a debt by ID.

        Returns:
            True if deleted, False if it did not exist
        """
        pass

    @abstractmethod
    async def list_debts(
        self,
        category: Optional[DebtCategory] = None,
        include_paid_off: bool = True,
    ) -> list[Debt]:
        """
        List debts in the order they were recorded.

        Args:
            category: Filter by category
            include_paid_off: Whether zero-balance debts are returned
        """
        pass

    @abstractmethod
    async def debt_name_exists(
        self,
        name: str,
        exclude_id: Optional[UUID] = None,
    ) -> bool:
        """
        Check whether another debt already uses this name (case-insensitive).

        Args:
            name: Debt name to look for
            exclude_id: Ignore this debt (the one being edited)
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one planning request).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass

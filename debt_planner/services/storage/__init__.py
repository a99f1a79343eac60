"""
Storage Services Package

Provides abstract interfaces and concrete implementations for debt and
audit storage. The backend is picked once, at startup, by create_repository.
"""

from typing import Optional

from debt_planner.services.storage.interface import (
    AuditStorageInterface,
    DebtRepositoryInterface,
    DuplicateError,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)
from debt_planner.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryDebtRepository,
)
from debt_planner.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsDebtRepository,
)


MEMORY_BACKEND = "memory"
GOOGLE_SHEETS_BACKEND = "google_sheets"


def create_storage(
    backend: str,
    client: Optional[GoogleSheetsClient] = None,
) -> tuple[DebtRepositoryInterface, AuditStorageInterface]:
    """
    Build the debt repository and audit storage for a backend.

    Both Google Sheets stores share one client (and one spreadsheet).

    Raises:
        ValueError: If the backend name is unknown
    """
    if backend == MEMORY_BACKEND:
        return InMemoryDebtRepository(), InMemoryAuditStorage()
    if backend == GOOGLE_SHEETS_BACKEND:
        client = client or GoogleSheetsClient()
        return GoogleSheetsDebtRepository(client), GoogleSheetsAuditStorage(client)
    raise ValueError(f"Unknown storage backend: {backend}")


def create_repository(backend: str) -> DebtRepositoryInterface:
    """Debt repository for a backend name ('memory' or 'google_sheets')."""
    repository, _ = create_storage(backend)
    return repository


__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "DebtRepositoryInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryDebtRepository",
    # Google Sheets implementation
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsDebtRepository",
    # Factories
    "create_repository",
    "create_storage",
]

"""Services package."""

from debt_planner.services.storage import (
    AuditStorageInterface,
    DebtRepositoryInterface,
    DuplicateError,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsDebtRepository,
    InMemoryAuditStorage,
    InMemoryDebtRepository,
    NotFoundError,
    StorageConnectionError,
    StorageError,
    create_repository,
    create_storage,
)

__all__ = [
    "AuditStorageInterface",
    "DebtRepositoryInterface",
    "DuplicateError",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsDebtRepository",
    "InMemoryAuditStorage",
    "InMemoryDebtRepository",
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    "create_repository",
    "create_storage",
]

"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as a persistent backend because:
1. Users can see and edit their debt list directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- No transactions (one debt per row, rows are rewritten whole)
- Limited query capabilities (we filter in Python)

The implementation follows the abstract interface, so the planner never
knows which backend it is talking to.
"""

import json
from datetime import date, datetime
from typing import Optional
from uuid import UUID

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from debt_planner.config import get_settings
from debt_planner.config.settings import GoogleSheetsSettings
from debt_planner.models.audit import AuditEvent, AuditEventType, AuditSeverity
from debt_planner.models.debt import Debt, DebtCategory
from debt_planner.services.storage.interface import (
    AuditStorageInterface,
    DebtRepositoryInterface,
    DuplicateError,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)


logger = structlog.get_logger("debt_planner.storage")


# Column mappings for Debts sheet
DEBT_COLUMNS = [
    "id",
    "name",
    "category",
    "current_balance",
    "interest_rate",
    "minimum_payment",
    "credit_limit",
    "original_balance",
    "loan_term_months",
    "due_date",
    "priority",
    "notes",
    "created_at",
    "updated_at",
]

# Column mappings for Audit sheet
AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]

# Lookups that fail with these are answers, not transient errors.
_sheets_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_not_exception_type((DuplicateError, NotFoundError)),
    reraise=True,
)


def _optional(value) -> str:
    return "" if value is None else str(value)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError as e:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                ) from e
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}") from e

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(self._settings.spreadsheet_id)
            except gspread.SpreadsheetNotFound as e:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                ) from e
        return self._spreadsheet

    def _get_or_create_sheet(self, title: str, columns: list[str], rows: int) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(title=title, rows=rows, cols=len(columns))
            sheet.append_row(columns)
        return sheet

    def get_debts_sheet(self) -> gspread.Worksheet:
        """Get or create the Debts worksheet."""
        return self._get_or_create_sheet(
            self._settings.debts_sheet_name, DEBT_COLUMNS, rows=500
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        """Get or create the Audit worksheet."""
        return self._get_or_create_sheet(
            self._settings.audit_sheet_name, AUDIT_COLUMNS, rows=5000
        )


class GoogleSheetsDebtRepository(DebtRepositoryInterface):
    """
    Google Sheets implementation of debt storage.

    One debt per row, columns as in DEBT_COLUMNS. Row 1 is the header.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _debt_to_row(self, debt: Debt) -> list:
        return [
            str(debt.id),
            debt.name,
            debt.category.value,
            str(debt.current_balance),
            str(debt.interest_rate),
            str(debt.minimum_payment),
            _optional(debt.credit_limit),
            _optional(debt.original_balance),
            _optional(debt.loan_term_months),
            debt.due_date.isoformat() if debt.due_date else "",
            _optional(debt.priority),
            debt.notes or "",
            debt.created_at.isoformat(),
            debt.updated_at.isoformat(),
        ]

    def _row_to_debt(self, row: list) -> Debt:
        # Handle missing columns gracefully
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return Debt(
            id=UUID(safe_get(0)),
            name=safe_get(1),
            category=DebtCategory(safe_get(2, DebtCategory.OTHER.value)),
            current_balance=float(safe_get(3, "0")),
            interest_rate=float(safe_get(4, "0")),
            minimum_payment=float(safe_get(5, "0")),
            credit_limit=float(safe_get(6)) if safe_get(6) else None,
            original_balance=float(safe_get(7)) if safe_get(7) else None,
            loan_term_months=int(safe_get(8)) if safe_get(8) else None,
            due_date=date.fromisoformat(safe_get(9)) if safe_get(9) else None,
            priority=int(safe_get(10)) if safe_get(10) else None,
            notes=safe_get(11) or None,
            created_at=datetime.fromisoformat(safe_get(12)) if safe_get(12) else datetime.utcnow(),
            updated_at=datetime.fromisoformat(safe_get(13)) if safe_get(13) else datetime.utcnow(),
        )

    def _find_row(self, rows: list[list], debt_id: UUID) -> Optional[int]:
        """1-based sheet row number of a debt, header included in the count."""
        for idx, row in enumerate(rows[1:], start=2):
            if row and row[0] == str(debt_id):
                return idx
        return None

    def _read_debts(self) -> list[Debt]:
        rows = self._client.get_debts_sheet().get_all_values()[1:]
        debts = []
        for row in rows:
            if not row or not row[0]:
                continue
            try:
                debts.append(self._row_to_debt(row))
            except ValueError as e:
                logger.warning("skipping_malformed_debt_row", row_id=row[0], error=str(e))
        return debts

    @_sheets_retry
    async def save_debt(self, debt: Debt) -> bool:
        try:
            sheet = self._client.get_debts_sheet()
            if self._find_row(sheet.get_all_values(), debt.id) is not None:
                raise DuplicateError(f"Debt already exists: {debt.id}")
            sheet.append_row(self._debt_to_row(debt), value_input_option="RAW")
            return True
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save debt: {e}") from e

    async def get_debt(self, debt_id: UUID) -> Optional[Debt]:
        try:
            rows = self._client.get_debts_sheet().get_all_values()
            idx = self._find_row(rows, debt_id)
            return self._row_to_debt(rows[idx - 1]) if idx else None
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to get debt: {e}") from e

    @_sheets_retry
    async def update_debt(self, debt: Debt) -> bool:
        try:
            sheet = self._client.get_debts_sheet()
            idx = self._find_row(sheet.get_all_values(), debt.id)
            if idx is None:
                raise NotFoundError(f"Debt not found: {debt.id}")

            updated = debt.model_copy(update={"updated_at": datetime.utcnow()})
            for col_idx, value in enumerate(self._debt_to_row(updated), start=1):
                sheet.update_cell(idx, col_idx, value)
            return True
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update debt: {e}") from e

    async def delete_debt(self, debt_id: UUID) -> bool:
        try:
            sheet = self._client.get_debts_sheet()
            idx = self._find_row(sheet.get_all_values(), debt_id)
            if idx is None:
                return False
            sheet.delete_rows(idx)
            return True
        except Exception as e:
            raise StorageError(f"Failed to delete debt: {e}") from e

    async def list_debts(
        self,
        category: Optional[DebtCategory] = None,
        include_paid_off: bool = True,
    ) -> list[Debt]:
        try:
            debts = self._read_debts()
        except Exception as e:
            raise StorageError(f"Failed to list debts: {e}") from e

        return [
            debt for debt in debts
            if (category is None or debt.category == category)
            and (include_paid_off or debt.current_balance > 0)
        ]

    async def debt_name_exists(
        self,
        name: str,
        exclude_id: Optional[UUID] = None,
    ) -> bool:
        wanted = name.strip().lower()
        debts = await self.list_debts()
        return any(
            debt.name.lower() == wanted
            for debt in debts
            if debt.id != exclude_id
        )


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return AuditEvent(
            event_id=UUID(safe_get(0)),
            timestamp=datetime.fromisoformat(safe_get(1)),
            event_type=AuditEventType(safe_get(2)),
            severity=AuditSeverity(safe_get(3)),
            entity_type=safe_get(4) or None,
            entity_id=UUID(safe_get(5)) if safe_get(5) else None,
            correlation_id=UUID(safe_get(6)) if safe_get(6) else None,
            description=safe_get(7),
            details=json.loads(safe_get(8)) if safe_get(8) else {},
            error_message=safe_get(9) or None,
            is_user_action=safe_get(10).lower() == "true",
        )

    def _read_events(self) -> list[AuditEvent]:
        rows = self._client.get_audit_sheet().get_all_values()[1:]
        events = []
        for row in rows:
            if not row or not row[0]:
                continue
            try:
                events.append(self._row_to_event(row))
            except ValueError as e:
                logger.warning("skipping_malformed_audit_row", row_id=row[0], error=str(e))
        return events

    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event.

        A failed write is logged and reported as False; audit trouble must
        not abort the calculation that produced the event.
        """
        try:
            sheet = self._client.get_audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            logger.warning(
                "audit_write_failed",
                event_type=event.event_type.value,
                error=str(e),
            )
            return False

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        try:
            events = [
                e for e in self._read_events()
                if e.correlation_id == correlation_id
            ]
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}") from e

        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        try:
            events = self._read_events()
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}") from e

        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]

"""
Configuration Management for Debt Planner

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The storage backend is chosen from configuration at startup and injected
into the planning service; nothing downstream reaches for a global store.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from debt_planner.models.debt import RepaymentStrategy


class PlannerSettings(BaseSettings):
    """Repayment engine defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PLANNER_",
        extra="ignore"
    )

    horizon_periods: int = Field(
        default=360,
        ge=1,
        le=1200,
        description="Maximum number of monthly periods simulated (360 = 30 years)"
    )
    default_strategy: RepaymentStrategy = Field(
        default=RepaymentStrategy.AVALANCHE,
        description="Strategy used when the caller does not pick one"
    )
    target_utilization_percent: float = Field(
        default=30.0,
        ge=0.0,
        le=100.0,
        description="Default credit utilization target"
    )
    target_dti_ratio: float = Field(
        default=36.0,
        gt=0.0,
        le=100.0,
        description="Debt-to-income ratio most lenders accept"
    )
    max_reasonable_rate: float = Field(
        default=100.0,
        gt=0.0,
        description="Annual rate above which a debt is flagged for review"
    )


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Sheet names within the spreadsheet
    debts_sheet_name: str = Field(
        default="Debts",
        description="Name of the sheet for debts"
    )
    audit_sheet_name: str = Field(
        default="AuditLog",
        description="Name of the sheet for audit logs"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    storage_backend: str = Field(
        default="memory",
        pattern="^(memory|google_sheets)$",
        description="Where debts are stored"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are built lazily so a missing Google Sheets configuration
    # does not stop the in-memory backend from working.

    @property
    def planner(self) -> PlannerSettings:
        return PlannerSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.planner
        results["planner"] = True
    except Exception as e:
        results["planner"] = False
        results["planner_error"] = str(e)

    try:
        _ = settings.google_sheets
        results["google_sheets"] = True
    except Exception as e:
        results["google_sheets"] = False
        results["google_sheets_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results

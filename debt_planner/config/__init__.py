"""Configuration package."""

from debt_planner.config.settings import (
    AppSettings,
    GoogleSheetsSettings,
    PlannerSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "GoogleSheetsSettings",
    "PlannerSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]

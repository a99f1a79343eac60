"""Validation package."""

from debt_planner.validation.validator import DebtValidationError, DebtValidator

__all__ = ["DebtValidationError", "DebtValidator"]

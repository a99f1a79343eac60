"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from debt_planner.config import AppSettings, PlannerSettings, get_settings, validate_all_settings
from debt_planner.models.debt import RepaymentStrategy


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestPlannerSettings:
    """Tests for PlannerSettings."""

    def test_defaults(self, monkeypatch):
        """Test the documented defaults."""
        for name in ("HORIZON_PERIODS", "DEFAULT_STRATEGY", "TARGET_UTILIZATION_PERCENT", "TARGET_DTI_RATIO"):
            monkeypatch.delenv(f"PLANNER_{name}", raising=False)

        settings = PlannerSettings()

        assert settings.horizon_periods == 360
        assert settings.default_strategy == RepaymentStrategy.AVALANCHE
        assert settings.target_utilization_percent == 30.0
        assert settings.target_dti_ratio == 36.0

    def test_environment_overrides(self, monkeypatch):
        """Test PLANNER_ variables override the defaults."""
        monkeypatch.setenv("PLANNER_HORIZON_PERIODS", "120")
        monkeypatch.setenv("PLANNER_DEFAULT_STRATEGY", "snowball")

        settings = get_settings().planner

        assert settings.horizon_periods == 120
        assert settings.default_strategy == RepaymentStrategy.SNOWBALL

    def test_invalid_horizon(self):
        """Test a zero horizon is rejected."""
        with pytest.raises(ValidationError):
            PlannerSettings(horizon_periods=0)

    def test_invalid_utilization_target(self):
        with pytest.raises(ValidationError):
            PlannerSettings(target_utilization_percent=120)


class TestAppSettings:
    """Tests for AppSettings."""

    def test_unknown_backend_rejected(self):
        """Test only known storage backends are accepted."""
        with pytest.raises(ValidationError):
            AppSettings(storage_backend="postgres")

    def test_validate_all_settings_without_sheets(self, monkeypatch):
        """Test missing Sheets configuration is reported, not raised."""
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)

        results = validate_all_settings()

        assert results["planner"] is True
        assert results["app"] is True
        assert results["google_sheets"] is False
        assert "google_sheets_error" in results

"""
Configuration Management for the Expense Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every constant the ledger depends on (storage keys, default budget,
budget tier thresholds, export layout) can be overridden from the
environment or a .env file without touching code.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Ledger storage and analytics configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_path: Path = Field(
        default=Path("expense_ledger.json"),
        description="JSON file holding the persisted ledger state"
    )
    expenses_key: str = Field(
        default="expenses",
        min_length=1,
        description="Storage key for the expense collection"
    )
    budget_key: str = Field(
        default="budget",
        min_length=1,
        description="Storage key for the budget scalar"
    )
    default_budget: Decimal = Field(
        default=Decimal("10000"),
        allow_inf_nan=False,
        description="Budget used when none has been stored yet"
    )

    # Budget tiers
    approaching_threshold: Decimal = Field(
        default=Decimal("80"),
        description="Percentage of the budget at which spending is 'approaching'"
    )
    exceeded_threshold: Decimal = Field(
        default=Decimal("100"),
        description="Percentage of the budget at which spending is 'exceeded'"
    )

    trend_months: int = Field(
        default=6,
        ge=1,
        le=120,
        description="How many months the spending trend shows"
    )

    @model_validator(mode="after")
    def validate_thresholds(self) -> "LedgerSettings":
        if self.approaching_threshold > self.exceeded_threshold:
            raise ValueError("approaching_threshold cannot be above exceeded_threshold")
        if self.expenses_key == self.budget_key:
            raise ValueError("expenses_key and budget_key must differ")
        return self


class ExportSettings(BaseSettings):
    """Tabular export configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    sheet_name: str = Field(
        default="Expenses",
        min_length=1,
        max_length=31,  # Excel's sheet name limit
        description="Name of the exported sheet"
    )
    date_format: str = Field(
        default="%d %b %Y",
        description="strftime format for the Date column"
    )


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets export configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to export into"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before exporting."
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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for log output"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON lines (console output otherwise)"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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

    # Note: These are loaded lazily to allow partial configuration

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def export(self) -> ExportSettings:
        return ExportSettings()

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

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    ``<name>_error`` entry for every group that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("ledger", "export", "google_sheets", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results

"""
Configuration Management for FairSplit

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here. The balance
engine itself reads none of it; only the edges (ingestion checks, the
ledger facade, reporting and logging) do.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParticipantSettings(BaseSettings):
    """Display names of the two participants."""

    model_config = SettingsConfigDict(
        env_prefix="FAIRSPLIT_PARTICIPANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    first_name: str = Field(
        default="Participant 1",
        min_length=1,
        description="Display name of the FIRST participant"
    )
    second_name: str = Field(
        default="Participant 2",
        min_length=1,
        description="Display name of the SECOND participant"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FAIRSPLIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Standard library log level name"
    )

    # Projection
    projection_months: int = Field(
        default=6,
        ge=0,
        le=60,
        description="Default number of months in a spending projection"
    )

    # Reporting
    currency_symbol: str = Field(
        default="$",
        description="Symbol printed in front of amounts"
    )

    # Validation thresholds (warnings only, never rejections)
    max_expense_amount: float = Field(
        default=100000.0,
        gt=0,
        description="Amounts above this are flagged for a second look"
    )
    max_installments: int = Field(
        default=120,
        ge=1,
        description="Installment counts above this are flagged"
    )
    future_date_tolerance_days: int = Field(
        default=366,
        ge=0,
        description="How many days in the future an anchor date can be"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
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

    @property
    def participants(self) -> ParticipantSettings:
        return ParticipantSettings()

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

    Returns a dict of {setting_name: is_valid}, plus a
    "<setting_name>_error" entry for each failure.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.participants
        results["participants"] = True
    except ValueError as e:
        results["participants"] = False
        results["participants_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except ValueError as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results

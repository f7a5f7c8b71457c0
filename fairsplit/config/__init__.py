"""Configuration package."""

from fairsplit.config.settings import (
    AppSettings,
    ParticipantSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ParticipantSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]

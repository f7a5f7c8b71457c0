"""
Shared fixtures.

Settings are cached process-wide, so every test starts from a clean
cache and a clean FAIRSPLIT_* environment.
"""

import os

import pytest

from fairsplit.config import get_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for key in list(os.environ):
        if key.startswith("FAIRSPLIT_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

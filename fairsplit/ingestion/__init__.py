"""
Ingestion Package

Everything a record passes through before the balance engine sees it:
legacy migration, two-stage validation and batch loading.
"""

from fairsplit.ingestion.migration import (
    DEFAULT_OWNERSHIP_PERCENTAGE,
    migrate_record,
    migrate_settings,
)
from fairsplit.ingestion.validator import ExpenseInput, ExpenseValidator
from fairsplit.ingestion.loader import load_expenses

__all__ = [
    "DEFAULT_OWNERSHIP_PERCENTAGE",
    "ExpenseInput",
    "ExpenseValidator",
    "load_expenses",
    "migrate_record",
    "migrate_settings",
]

"""
Balance Engine Package

Pure functions over an in-memory expense collection:
the recurrence resolver and the balance aggregator built on it.
"""

from fairsplit.engine.recurrence import installment_number, is_active_in_month
from fairsplit.engine.balance import (
    DEFAULT_PROJECTION_MONTHS,
    compute_balance,
    generate_projection,
)

__all__ = [
    "DEFAULT_PROJECTION_MONTHS",
    "compute_balance",
    "generate_projection",
    "installment_number",
    "is_active_in_month",
]

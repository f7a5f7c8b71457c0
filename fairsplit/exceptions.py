"""
Exception hierarchy for FairSplit.

The balance engine itself never raises for validated input. Everything
below is raised at the edges: when records enter the system or when the
ledger is asked about an expense it does not hold.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from fairsplit.models.expense import ValidationIssue


class FairSplitError(Exception):
    """Base error for the package."""
    pass


class ExpenseValidationError(FairSplitError):
    """
    A record was rejected at the point of entry.

    Carries the structured issues so callers can show each one
    next to the offending field.
    """

    def __init__(
        self,
        message: str,
        issues: Optional[list["ValidationIssue"]] = None,
        record_index: Optional[int] = None,
    ):
        super().__init__(message)
        self.issues = issues or []
        self.record_index = record_index


class LedgerError(FairSplitError):
    """Base error for ledger operations."""
    pass


class ExpenseNotFoundError(LedgerError):
    """No expense with the given id exists in the ledger."""
    pass


class DuplicateExpenseError(LedgerError):
    """An expense with the same id is already in the ledger."""
    pass

"""
Data Models Package

This package contains all Pydantic models used in FairSplit.
Every record handed to the balance engine must conform to these schemas.
"""

from fairsplit.models.month import MonthLike, YearMonth
from fairsplit.models.expense import (
    Category,
    Expense,
    ExpenseValidationResult,
    Frequency,
    Participant,
    ValidationIssue,
)
from fairsplit.models.balance import MonthlyBalance, ProjectionPoint
from fairsplit.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Month keys
    "MonthLike",
    "YearMonth",
    # Expense models
    "Category",
    "Expense",
    "ExpenseValidationResult",
    "Frequency",
    "Participant",
    "ValidationIssue",
    # Derived models
    "MonthlyBalance",
    "ProjectionPoint",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

"""
Core Data Models for FairSplit

These models define the strict schemas for every expense record that
reaches the balance engine. They are designed to:
1. Reject malformed amounts and percentages at the point of entry
2. Provide clear validation error messages
3. Stay immutable once stored (edits replace the whole record)
4. Keep date handling at calendar-date granularity

DESIGN DECISION: We use Pydantic v2 models with frozen=True. An expense
is never patched in place; an edit builds a new record with the same id.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from fairsplit.models.month import YearMonth


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Participant(str, Enum):
    """
    The two people sharing expenses.

    DESIGN DECISION: A closed two-member enum rather than open identities.
    Settlement math is binary; display names are attached only at the
    reporting edge.
    """
    FIRST = "first"
    SECOND = "second"

    @property
    def other(self) -> "Participant":
        return Participant.SECOND if self is Participant.FIRST else Participant.FIRST


class Category(str, Enum):
    """Expense categories. Cosmetic: never used in settlement math."""
    HOME = "home"
    FOOD = "food"
    TRANSPORT = "transport"
    LEISURE = "leisure"
    HEALTH = "health"
    OTHER = "other"


class Frequency(str, Enum):
    """
    Recurrence policy of an expense.

    ONE_TIME applies only to its anchor month, MONTHLY to every month from
    the anchor onwards, INSTALLMENTS to `installments_count` consecutive
    months starting at the anchor.
    """
    ONE_TIME = "one_time"
    MONTHLY = "monthly"
    INSTALLMENTS = "installments"


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class Expense(BaseModel):
    """
    A shared expense.

    `ownership_percentage` is the FIRST participant's fair share of the
    amount; the SECOND participant carries the complement.

    `frequency` keeps unrecognised policy strings instead of rejecting
    them, so records written by a newer schema still load. The resolver
    treats such records as inactive in every month.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        min_length=1,
        description="Opaque identifier, stable for the record's lifetime"
    )
    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display label"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Amount in the base currency unit"
    )
    date: dt.date = Field(
        ...,
        description="Anchor date: first (or only) month the expense applies to"
    )
    payer: Participant = Field(
        ...,
        description="Who actually paid"
    )
    category: Category = Field(
        default=Category.OTHER,
        description="Expense category"
    )
    ownership_percentage: int = Field(
        ...,
        ge=0,
        le=100,
        description="FIRST participant's share of the amount, in percent"
    )
    frequency: Union[Frequency, str] = Field(
        ...,
        union_mode="left_to_right",
        description="Recurrence policy"
    )
    installments_count: Optional[int] = Field(
        default=None,
        ge=1,
        description="Number of consecutive months, for INSTALLMENTS only"
    )

    @field_validator("date", mode="before")
    @classmethod
    def truncate_to_calendar_date(cls, v: Any) -> Any:
        """
        Keep only the calendar date.

        A datetime keeps its own wall-clock date (no timezone conversion)
        and an ISO timestamp string is cut down to its "YYYY-MM-DD" prefix.
        """
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str):
            return v.strip()[:10]
        return v

    @field_validator("payer", "category", "frequency", mode="before")
    @classmethod
    def normalize_enum_case(cls, v: Any) -> Any:
        """Accept "MONTHLY", "Food", " first " as well as the canonical values."""
        if isinstance(v, Enum):
            return v
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def require_installments_count(self) -> "Expense":
        if self.frequency == Frequency.INSTALLMENTS and self.installments_count is None:
            raise ValueError("installments_count is required for installment expenses")
        return self

    @property
    def anchor_month(self) -> YearMonth:
        return YearMonth.from_date(self.date)

    @property
    def second_percentage(self) -> int:
        return 100 - self.ownership_percentage

    @property
    def first_share(self) -> Decimal:
        """FIRST participant's fair share of this expense."""
        return self.amount * self.ownership_percentage / 100

    @property
    def second_share(self) -> Decimal:
        """Complement of the first share, so the two always add up exactly."""
        return self.amount - self.first_share

    def share_of(self, participant: Participant) -> Decimal:
        if participant is Participant.FIRST:
            return self.first_share
        return self.second_share


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'out_of_range', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ExpenseValidationResult(BaseModel):
    """
    Result of the two-stage validation.

    Stage 1: Schema validation (types, ranges, required fields)
    Stage 2: Semantic validation (plausibility checks, warnings only)
    """

    schema_valid: bool = Field(
        ...,
        description="Did schema validation pass?"
    )
    semantic_valid: bool = Field(
        ...,
        description="Did semantic validation pass?"
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )

    # Only set when stage 1 passed
    expense: Optional[Expense] = None

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

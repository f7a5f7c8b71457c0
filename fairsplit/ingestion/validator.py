"""
Two-Stage Expense Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Type checking
- Required field presence (installments_count for INSTALLMENTS)
- Range checks (finite non-negative amount, percentage within 0-100)
- A record failing this stage never reaches the balance engine

STAGE 2 - SEMANTIC VALIDATION:
- Plausibility checks that produce warnings only
- Absurd amounts, far-future anchor dates, huge installment plans
- Fields that will be ignored, policies that will never be active

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the person entering the expense can correct them.
"""

from collections.abc import Mapping
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import ValidationError

from fairsplit.config import AppSettings, get_settings
from fairsplit.exceptions import ExpenseValidationError
from fairsplit.models.expense import (
    Expense,
    ExpenseValidationResult,
    Frequency,
    ValidationIssue,
)


ExpenseInput = Union[Expense, Mapping[str, Any]]

# pydantic error types -> our issue types
_ISSUE_TYPES = {
    "missing": "missing",
    "greater_than_equal": "out_of_range",
    "less_than_equal": "out_of_range",
    "greater_than": "out_of_range",
    "finite_number": "not_finite",
    "string_too_short": "missing",
    "string_too_long": "too_long",
    "enum": "invalid_choice",
}

_SUGGESTED_FIXES = {
    "amount": "Enter a non-negative amount, e.g. 120.50",
    "ownership_percentage": "Enter a whole number between 0 and 100",
    "installments_count": "Enter how many monthly installments the purchase has",
    "date": "Use the YYYY-MM-DD format",
    "title": "Give the expense a short description",
    "payer": "Choose who paid",
}


class ExpenseValidator:
    """
    Validates expense records through a two-stage pipeline.

    Stage 1: Schema validation (the Expense model)
    Stage 2: Semantic validation (thresholds from AppSettings)
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        """
        Initialize validator.

        Args:
            settings: Thresholds to apply. Defaults to the configured
                      application settings.
        """
        self._settings = settings or get_settings().app

    def _validate_schema(
        self,
        data: ExpenseInput,
    ) -> tuple[Optional[Expense], list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (expense or None, list_of_issues)
        """
        if isinstance(data, Expense):
            data = data.model_dump()

        try:
            return Expense.model_validate(data), []
        except ValidationError as e:
            issues = []
            for error in e.errors():
                field = ".".join(str(part) for part in error["loc"]) or "record"
                issues.append(ValidationIssue(
                    field=field,
                    issue_type=_ISSUE_TYPES.get(error["type"], error["type"]),
                    message=f"{field}: {error['msg']}",
                    severity="error",
                    suggested_fix=_SUGGESTED_FIXES.get(field),
                ))
            return None, issues

    def _validate_semantic(
        self,
        expense: Expense,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Checks:
        - Zero and absurdly large amounts
        - Anchor dates far in the future
        - Installment plans longer than the configured maximum
        - installments_count given for a non-installment policy
        - Unrecognised recurrence policies

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        today = date.today()

        if expense.amount == 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message="Amount is zero; this expense will not change any balance",
                severity="warning",
                suggested_fix="Please verify the amount",
            ))

        max_amount = Decimal(str(self._settings.max_expense_amount))
        if expense.amount > max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({expense.amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        max_future_date = today + timedelta(days=self._settings.future_date_tolerance_days)
        if expense.date > max_future_date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Start date ({expense.date}) is far in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        if expense.frequency == Frequency.INSTALLMENTS:
            if expense.installments_count > self._settings.max_installments:
                issues.append(ValidationIssue(
                    field="installments_count",
                    issue_type="suspicious_value",
                    message=f"{expense.installments_count} installments seems unusually many",
                    severity="warning",
                    suggested_fix="Please verify the number of installments",
                ))
        elif expense.installments_count is not None and isinstance(expense.frequency, Frequency):
            issues.append(ValidationIssue(
                field="installments_count",
                issue_type="ignored",
                message="Installment count is ignored for non-installment expenses",
                severity="info",
            ))

        if not isinstance(expense.frequency, Frequency):
            issues.append(ValidationIssue(
                field="frequency",
                issue_type="unknown_policy",
                message=(
                    f"Recurrence policy {expense.frequency!r} is not recognised; "
                    "this expense will not count towards any month"
                ),
                severity="warning",
                suggested_fix="Choose one-time, monthly or installments",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues

    def validate(self, data: ExpenseInput) -> ExpenseValidationResult:
        """
        Run the full two-stage validation pipeline.

        Never raises for bad data; everything found is in the result.
        """
        all_issues = []

        # Stage 1: Schema validation
        expense, schema_issues = self._validate_schema(data)
        all_issues.extend(schema_issues)
        schema_valid = expense is not None

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if expense is not None:
            semantic_valid, semantic_issues = self._validate_semantic(expense)
            all_issues.extend(semantic_issues)

        warnings = [issue.message for issue in all_issues if issue.severity == "warning"]

        return ExpenseValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            expense=expense,
            issues=all_issues,
            warnings=warnings,
        )

    def accept(self, result: ExpenseValidationResult) -> Expense:
        """
        The validated Expense of a result.

        Raises:
            ExpenseValidationError: The result holds errors.
        """
        if not result.is_valid or result.expense is None:
            errors = [issue for issue in result.issues if issue.severity == "error"]
            raise ExpenseValidationError(
                "; ".join(issue.message for issue in errors) or "Invalid expense",
                issues=result.issues,
            )
        return result.expense

    def validate_or_raise(self, data: ExpenseInput) -> Expense:
        """
        Validate and return the Expense.

        Raises:
            ExpenseValidationError: The record failed validation.
        """
        return self.accept(self.validate(data))

    def get_user_friendly_summary(
        self,
        result: ExpenseValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.

        This is what we show next to the expense form.
        """
        if result.is_valid and not result.warnings:
            return "✅ All checks passed!"

        lines = []

        if not result.schema_valid:
            lines.append("❌ This expense cannot be saved yet:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        lines.append("")
        if result.is_valid:
            lines.append("You can still save, but please double-check.")
        else:
            lines.append("Please fix the issues above before saving.")

        return "\n".join(lines)

"""
Batch loading of stored expense records.

Every stored record is migrated to the current schema and then validated.
The first invalid record aborts the whole load so a half-read collection
never reaches the balance engine.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Optional
from uuid import UUID

from fairsplit.audit import AuditLogger, create_correlation_id
from fairsplit.exceptions import ExpenseValidationError
from fairsplit.ingestion.migration import migrate_record
from fairsplit.ingestion.validator import ExpenseValidator
from fairsplit.models.expense import Expense


def load_expenses(
    raw_records: Iterable[Mapping[str, Any]],
    validator: Optional[ExpenseValidator] = None,
    audit_logger: Optional[AuditLogger] = None,
    correlation_id: Optional[UUID] = None,
) -> list[Expense]:
    """
    Migrate and validate a stored collection, preserving its order.

    Raises:
        ExpenseValidationError: A record is invalid. `record_index` tells
            which one.
    """
    validator = validator or ExpenseValidator()
    correlation_id = correlation_id or create_correlation_id()

    expenses = []
    migrated_count = 0

    for index, raw in enumerate(raw_records):
        record, changes = migrate_record(raw)

        if changes:
            migrated_count += 1
            if audit_logger:
                audit_logger.log_record_migrated(
                    record_id=record.get("id"),
                    changes=changes,
                    correlation_id=correlation_id,
                )

        try:
            expense = validator.validate_or_raise(record)
        except ExpenseValidationError as e:
            if audit_logger:
                audit_logger.log_validation_failed(
                    record_id=record.get("id"),
                    issues=[issue.model_dump() for issue in e.issues],
                    correlation_id=correlation_id,
                )
            raise ExpenseValidationError(
                f"Record {index}: {e}",
                issues=e.issues,
                record_index=index,
            ) from e

        expenses.append(expense)

    if audit_logger:
        audit_logger.log_batch_loaded(
            record_count=len(expenses),
            migrated_count=migrated_count,
            correlation_id=correlation_id,
        )

    return expenses

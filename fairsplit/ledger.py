"""
Expense Ledger

The in-memory expense collection and the flows around it:
1. Add (validate -> assign id -> append -> audit)
2. Edit (validate -> replace whole record in place -> audit)
3. Remove (drop by id -> audit)
4. Report (snapshot -> balance engine)

DESIGN DECISION: The ledger enforces the boundaries:
- No record enters the collection without passing validation
- Records are replaced wholesale, never patched
- The engine always receives an immutable snapshot
- Every change is audited

Where the collection is persisted is up to the caller: seed the ledger
with `from_records` and read it back with `snapshot`.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Optional

from fairsplit.audit import AuditLogger
from fairsplit.config import get_settings
from fairsplit.engine import compute_balance, generate_projection
from fairsplit.exceptions import DuplicateExpenseError, ExpenseNotFoundError
from fairsplit.ingestion import ExpenseInput, ExpenseValidator, load_expenses
from fairsplit.models.balance import MonthlyBalance, ProjectionPoint
from fairsplit.models.expense import Expense, ExpenseValidationResult
from fairsplit.models.month import MonthLike


class ExpenseLedger:
    """
    Ordered collection of validated expenses.

    Order is insertion order; an edited expense keeps its position.
    """

    def __init__(
        self,
        expenses: Iterable[Expense] = (),
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger
        self._expenses: list[Expense] = []
        for expense in expenses:
            self._ensure_unique(expense.id)
            self._expenses.append(expense)

    @classmethod
    def from_records(
        cls,
        raw_records: Iterable[Mapping[str, Any]],
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ) -> "ExpenseLedger":
        """Build a ledger from stored (possibly legacy) records."""
        validator = validator or ExpenseValidator()
        expenses = load_expenses(raw_records, validator=validator, audit_logger=audit_logger)
        return cls(expenses, validator=validator, audit_logger=audit_logger)

    # ------------------------------------------------------------------
    # Collection access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._expenses)

    def __iter__(self) -> Iterator[Expense]:
        return iter(self.snapshot())

    def __contains__(self, expense_id: object) -> bool:
        return any(e.id == expense_id for e in self._expenses)

    def snapshot(self) -> tuple[Expense, ...]:
        """Immutable view of the collection, safe to hand to the engine."""
        return tuple(self._expenses)

    def get(self, expense_id: str) -> Expense:
        return self._expenses[self._position(expense_id)]

    def _position(self, expense_id: str) -> int:
        for position, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                return position
        raise ExpenseNotFoundError(f"No expense with id {expense_id!r}")

    def _ensure_unique(self, expense_id: str) -> None:
        if expense_id in self:
            raise DuplicateExpenseError(f"Expense {expense_id!r} already exists")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def check(self, data: ExpenseInput) -> ExpenseValidationResult:
        """Dry-run validation, for showing issues before saving."""
        return self._validator.validate(data)

    def add(self, data: ExpenseInput) -> Expense:
        """
        Validate and append a new expense.

        An id is generated when the data carries none.

        Raises:
            ExpenseValidationError: The data is invalid.
            DuplicateExpenseError: The id is already taken.
        """
        expense = self._accept(data)
        self._ensure_unique(expense.id)
        self._expenses.append(expense)

        if self._audit_logger:
            self._audit_logger.log_expense_added(
                expense_id=expense.id,
                title=expense.title,
                amount=str(expense.amount),
            )
        return expense

    def replace(self, expense_id: str, data: ExpenseInput) -> Expense:
        """
        Replace an expense wholesale, keeping its id and position.

        Any id in `data` is ignored.

        Raises:
            ExpenseNotFoundError: No expense has that id.
            ExpenseValidationError: The new data is invalid.
        """
        position = self._position(expense_id)
        previous = self._expenses[position]

        if isinstance(data, Expense):
            data = data.model_dump()
        expense = self._accept({**data, "id": expense_id})
        self._expenses[position] = expense

        if self._audit_logger:
            old_fields = previous.model_dump()
            changed = [
                name for name, value in expense.model_dump().items()
                if old_fields.get(name) != value
            ]
            self._audit_logger.log_expense_replaced(
                expense_id=expense_id,
                changed_fields=changed,
            )
        return expense

    def remove(self, expense_id: str) -> Expense:
        """
        Remove an expense and return it.

        Raises:
            ExpenseNotFoundError: No expense has that id.
        """
        expense = self._expenses.pop(self._position(expense_id))

        if self._audit_logger:
            self._audit_logger.log_expense_removed(
                expense_id=expense.id,
                title=expense.title,
            )
        return expense

    def _accept(self, data: ExpenseInput) -> Expense:
        result = self._validator.validate(data)

        if self._audit_logger:
            if not result.is_valid:
                record_id = data.get("id") if isinstance(data, Mapping) else None
                self._audit_logger.log_validation_failed(
                    record_id=record_id,
                    issues=[issue.model_dump() for issue in result.issues],
                )
            elif result.warnings:
                self._audit_logger.log_validation_warning(
                    record_id=result.expense.id,
                    warnings=result.warnings,
                )

        return self._validator.accept(result)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def balance(self, month: MonthLike) -> MonthlyBalance:
        return compute_balance(self.snapshot(), month)

    def projection(
        self,
        start_month: MonthLike,
        months: Optional[int] = None,
    ) -> list[ProjectionPoint]:
        """Projection from `start_month`; length defaults to FAIRSPLIT_PROJECTION_MONTHS."""
        if months is None:
            months = get_settings().app.projection_months
        return generate_projection(self.snapshot(), start_month, months)

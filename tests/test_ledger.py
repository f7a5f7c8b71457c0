"""Tests for the in-memory ExpenseLedger."""

from datetime import date
from decimal import Decimal

import pytest

from fairsplit.audit import AuditLogger
from fairsplit.exceptions import (
    DuplicateExpenseError,
    ExpenseNotFoundError,
    ExpenseValidationError,
)
from fairsplit.ledger import ExpenseLedger
from fairsplit.models import AuditEventType, Frequency, Participant
from tests.factories import make_expense, raw_record


@pytest.fixture
def audit():
    return AuditLogger(keep_history=True)


@pytest.fixture
def ledger(audit):
    return ExpenseLedger(audit_logger=audit)


class TestLedgerMutations:
    """Tests for add / replace / remove."""

    def test_add_generates_id(self, ledger):
        """Test that add assigns an id."""
        expense = ledger.add(raw_record())
        assert expense.id
        assert len(ledger) == 1
        assert expense.id in ledger
        assert ledger.get(expense.id) == expense

    def test_add_keeps_given_id(self, ledger):
        """Test that add keeps a supplied id."""
        assert ledger.add(raw_record(id="abc")).id == "abc"

    def test_add_rejects_invalid_data(self, ledger, audit):
        """Test that invalid data is rejected and audited."""
        with pytest.raises(ExpenseValidationError):
            ledger.add(raw_record(amount="-10"))
        assert len(ledger) == 0
        assert audit.history[-1].event_type == AuditEventType.SCHEMA_VALIDATION_FAILED

    def test_add_rejects_duplicate_id(self, ledger):
        """Test that a duplicate id is rejected."""
        ledger.add(raw_record(id="abc"))
        with pytest.raises(DuplicateExpenseError):
            ledger.add(raw_record(id="abc"))
        assert len(ledger) == 1

    def test_add_with_warnings_is_audited(self, ledger, audit):
        """Test that warnings are audited before the addition."""
        ledger.add(raw_record(amount="0"))
        types = [event.event_type for event in audit.history]
        assert types == [AuditEventType.SEMANTIC_VALIDATION_WARNING, AuditEventType.EXPENSE_ADDED]

    def test_replace_keeps_id_and_position(self, ledger, audit):
        """Test that replace keeps the id and the position."""
        first = ledger.add(raw_record(title="First"))
        ledger.add(raw_record(title="Second"))

        edited = ledger.replace(first.id, raw_record(title="First, edited", amount="95", id="ignored"))

        assert edited.id == first.id
        assert [e.title for e in ledger] == ["First, edited", "Second"]
        assert audit.history[-1].event_type == AuditEventType.EXPENSE_REPLACED
        assert set(audit.history[-1].details["changed_fields"]) == {"title", "amount"}

    def test_replace_with_expense_instance(self, ledger):
        """Test replacing with an Expense instance."""
        original = ledger.add(raw_record())
        edited = ledger.replace(original.id, make_expense(title="Other"))
        assert edited.id == original.id
        assert edited.title == "Other"

    def test_replace_unknown_id(self, ledger):
        """Test replacing an unknown id."""
        with pytest.raises(ExpenseNotFoundError):
            ledger.replace("missing", raw_record())

    def test_replace_invalid_data_leaves_record_untouched(self, ledger):
        """Test that a failed replace keeps the old record."""
        original = ledger.add(raw_record())
        with pytest.raises(ExpenseValidationError):
            ledger.replace(original.id, raw_record(ownership_percentage=150))
        assert ledger.get(original.id) == original

    def test_remove(self, ledger, audit):
        """Test removing an expense."""
        expense = ledger.add(raw_record())
        assert ledger.remove(expense.id) == expense
        assert len(ledger) == 0
        assert expense.id not in ledger
        assert audit.history[-1].event_type == AuditEventType.EXPENSE_REMOVED

    def test_remove_unknown_id(self, ledger):
        """Test removing an unknown id."""
        with pytest.raises(ExpenseNotFoundError):
            ledger.remove("missing")

    def test_get_unknown_id(self, ledger):
        """Test getting an unknown id."""
        with pytest.raises(ExpenseNotFoundError):
            ledger.get("missing")

    def test_check_does_not_store(self, ledger):
        """Test that check validates without storing."""
        result = ledger.check(raw_record(amount="-1"))
        assert not result.is_valid
        assert len(ledger) == 0

    def test_add_accepts_upper_case_policy_names(self, ledger):
        """Test that MONTHLY entered through add counts in every later month."""
        expense = ledger.add(raw_record(
            frequency="MONTHLY",
            payer="FIRST",
            category="HOME",
            amount="2500",
            date="2023-10-01",
        ))

        assert expense.frequency is Frequency.MONTHLY
        assert expense.payer is Participant.FIRST
        assert ledger.balance("2023-10").total_expenses == Decimal("2500")
        assert ledger.balance("2024-03").total_expenses == Decimal("2500")

    def test_replace_accepts_upper_case_policy_names(self, ledger):
        """Test that replace normalises policy names the same way as add."""
        original = ledger.add(raw_record())
        edited = ledger.replace(original.id, raw_record(frequency="INSTALLMENTS", installments_count=3))
        assert edited.frequency is Frequency.INSTALLMENTS
        assert ledger.check(raw_record(frequency="One_Time")).is_valid


class TestLedgerConstruction:
    """Tests for seeding a ledger."""

    def test_from_expenses(self):
        """Test seeding from expenses."""
        expenses = [make_expense(), make_expense()]
        assert len(ExpenseLedger(expenses)) == 2

    def test_duplicate_ids_rejected(self):
        """Test that seeding rejects duplicate ids."""
        expense = make_expense()
        with pytest.raises(DuplicateExpenseError):
            ExpenseLedger([expense, expense])

    def test_from_legacy_records(self):
        """Test seeding from stored legacy records."""
        ledger = ExpenseLedger.from_records([
            {
                "id": "1",
                "title": "Aluguel",
                "amount": 2500,
                "date": "2023-10-01",
                "payer": "ME",
                "category": "HOME",
                "frequency": "MONTHLY",
                "ownershipPercentage": 50,
            },
        ])
        balance = ledger.balance("2023-10")
        assert balance.settlement == Decimal("1250")


class TestLedgerReporting:
    """Tests for balance and projection through the ledger."""

    def test_snapshot_is_immutable_copy(self, ledger):
        """Test that a snapshot does not follow later changes."""
        ledger.add(raw_record())
        snapshot = ledger.snapshot()
        assert isinstance(snapshot, tuple)
        ledger.add(raw_record())
        assert len(snapshot) == 1

    def test_balance(self, ledger):
        """Test the monthly balance through the ledger."""
        ledger.add(raw_record(amount="100", payer="second", ownership_percentage=50))
        balance = ledger.balance("2024-01")
        assert balance.paid_by_second == Decimal("100")
        assert balance.debtor is Participant.FIRST

    def test_balance_after_remove(self, ledger):
        """Test that a removed expense no longer counts."""
        expense = ledger.add(raw_record(amount="100"))
        ledger.remove(expense.id)
        assert ledger.balance("2024-01").total_expenses == 0

    def test_projection_defaults_to_settings(self, ledger, monkeypatch):
        """Test the projection length default from settings."""
        ledger.add(make_expense(frequency=Frequency.MONTHLY, date=date(2024, 1, 1)))
        assert len(ledger.projection("2024-01")) == 6

        monkeypatch.setenv("FAIRSPLIT_PROJECTION_MONTHS", "3")
        assert len(ledger.projection("2024-01")) == 3

    def test_projection_explicit_length(self, ledger):
        """Test an explicit projection length."""
        assert ledger.projection("2024-01", months=0) == []

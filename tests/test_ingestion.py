"""Tests for legacy migration, two-stage validation and batch loading."""

from datetime import date
from decimal import Decimal

import pytest

from fairsplit.audit import AuditLogger
from fairsplit.config import AppSettings
from fairsplit.exceptions import ExpenseValidationError
from fairsplit.ingestion import (
    ExpenseValidator,
    load_expenses,
    migrate_record,
    migrate_settings,
)
from fairsplit.models import AuditEventType, Category, Frequency, Participant
from tests.factories import make_expense, raw_record


LEGACY_RENT = {
    "id": "1",
    "title": "Aluguel",
    "amount": 2500,
    "date": "2023-10-01",
    "payer": "ME",
    "category": "HOME",
    "frequency": "MONTHLY",
    "ownershipPercentage": 50,
}


class TestMigrateRecord:
    """Tests for migrate_record."""

    def test_current_record_is_unchanged(self):
        """Test that a current record reports no changes."""
        record, changes = migrate_record(raw_record())
        assert record == raw_record()
        assert changes == []

    def test_input_is_not_mutated(self):
        """Test that the stored record is left untouched."""
        legacy = dict(LEGACY_RENT)
        migrate_record(legacy)
        assert legacy == LEGACY_RENT

    def test_legacy_keys_and_values(self):
        """Test upgrading an old record with camelCase keys and upper-case values."""
        record, changes = migrate_record(LEGACY_RENT)
        assert record["ownership_percentage"] == 50
        assert "ownershipPercentage" not in record
        assert record["payer"] == "first"
        assert record["category"] == "home"
        assert record["frequency"] == "monthly"
        assert changes

    def test_partner_payer(self):
        """Test mapping the legacy PARTNER payer."""
        record, _ = migrate_record({**LEGACY_RENT, "payer": "PARTNER"})
        assert record["payer"] == "second"

    def test_installments_count_key(self):
        """Test renaming installmentsCount."""
        record, _ = migrate_record({**LEGACY_RENT, "frequency": "INSTALLMENTS", "installmentsCount": 4})
        assert record["installments_count"] == 4
        assert record["frequency"] == "installments"

    def test_missing_category_defaults_to_other(self):
        """Test the category default."""
        legacy = dict(LEGACY_RENT)
        del legacy["category"]
        record, changes = migrate_record(legacy)
        assert record["category"] == "other"
        assert "category defaulted to other" in changes

    @pytest.mark.parametrize(
        "split_type, expected",
        [
            ("ME_ONLY", 100),
            ("PARTNER_ONLY", 0),
            ("EQUAL", 50),
            (None, 50),
        ],
    )
    def test_missing_percentage_from_split_type(self, split_type, expected):
        """Test deriving the percentage from the legacy split type."""
        legacy = dict(LEGACY_RENT)
        del legacy["ownershipPercentage"]
        if split_type is not None:
            legacy["splitType"] = split_type
        record, _ = migrate_record(legacy)
        assert record["ownership_percentage"] == expected
        assert "splitType" not in record

    def test_explicit_percentage_wins_over_split_type(self):
        """Test that a stored percentage is kept over the split type."""
        record, changes = migrate_record({**LEGACY_RENT, "ownershipPercentage": 70, "splitType": "ME_ONLY"})
        assert record["ownership_percentage"] == 70
        assert "dropped obsolete splitType" in changes


class TestMigrateSettings:
    """Tests for migrate_settings."""

    def test_oldest_keys(self):
        """Test the oldest participant name keys."""
        assert migrate_settings({"userName": "Ana", "partnerName": "Bia"}) == {
            "first_name": "Ana",
            "second_name": "Bia",
        }

    def test_newer_keys_win(self):
        """Test that newer name keys take precedence."""
        migrated = migrate_settings({"user1Name": "Ana", "user2Name": "Bia", "userName": "Old"})
        assert migrated == {"first_name": "Ana", "second_name": "Bia"}

    def test_empty(self):
        """Test migrating empty settings."""
        assert migrate_settings({}) == {}


class TestExpenseValidator:
    """Tests for ExpenseValidator."""

    def test_valid_record(self):
        """Test validation of a clean record."""
        result = ExpenseValidator().validate(raw_record())
        assert result.is_valid
        assert result.schema_valid
        assert result.semantic_valid
        assert result.issues == []
        assert result.expense.amount == Decimal("80.00")
        assert result.expense.payer is Participant.FIRST
        assert result.expense.category is Category.FOOD

    def test_accepts_expense_instances(self):
        """Test validating an already built expense."""
        expense = make_expense()
        assert ExpenseValidator().validate_or_raise(expense) == expense

    def test_negative_amount_is_error(self):
        """Test that a negative amount is a schema error."""
        result = ExpenseValidator().validate(raw_record(amount="-5"))
        assert not result.is_valid
        assert not result.schema_valid
        assert result.expense is None
        assert result.has_errors
        issue = result.issues[0]
        assert issue.field == "amount"
        assert issue.issue_type == "out_of_range"
        assert issue.suggested_fix

    def test_non_finite_amount_is_error(self):
        """Test that an infinite amount is a schema error."""
        result = ExpenseValidator().validate(raw_record(amount="NaN"))
        assert not result.is_valid
        assert [i.field for i in result.issues] == ["amount"]

    def test_percentage_out_of_range_is_error(self):
        """Test that a percentage above 100 is a schema error."""
        result = ExpenseValidator().validate(raw_record(ownership_percentage=101))
        assert not result.is_valid
        assert result.issues[0].field == "ownership_percentage"
        assert result.issues[0].issue_type == "out_of_range"

    def test_missing_installments_count_is_error(self):
        """Test the installments rule as a record-level error."""
        result = ExpenseValidator().validate(raw_record(frequency="installments"))
        assert not result.is_valid
        assert any("installments_count" in issue.message for issue in result.issues)

    def test_missing_fields_reported_together(self):
        """Test that all missing fields are reported at once."""
        result = ExpenseValidator().validate({"title": "x"})
        missing = {i.field for i in result.issues if i.issue_type == "missing"}
        assert {"amount", "date", "payer", "ownership_percentage", "frequency"} <= missing
        assert result.error_count == len(result.issues)

    def test_zero_amount_is_warning(self):
        """Test the zero amount warning."""
        result = ExpenseValidator().validate(raw_record(amount="0"))
        assert result.is_valid
        assert len(result.warnings) == 1
        assert not result.has_errors

    def test_large_amount_is_warning(self):
        """Test the large amount warning."""
        validator = ExpenseValidator(AppSettings(max_expense_amount=1000))
        result = validator.validate(raw_record(amount="1000.01"))
        assert result.is_valid
        assert any("unusually high" in w for w in result.warnings)

    def test_far_future_date_is_warning(self):
        """Test the far-future date warning."""
        result = ExpenseValidator().validate(raw_record(date="2999-01-01"))
        assert result.is_valid
        assert [i.issue_type for i in result.issues] == ["future_date"]

    def test_long_installment_plan_is_warning(self):
        """Test the long installment plan warning."""
        validator = ExpenseValidator(AppSettings(max_installments=12))
        result = validator.validate(raw_record(frequency="installments", installments_count=24))
        assert result.is_valid
        assert result.issues[0].field == "installments_count"

    def test_ignored_installments_count_is_info(self):
        """Test that a count on a non-installment policy is informational."""
        result = ExpenseValidator().validate(raw_record(frequency="monthly", installments_count=3))
        assert result.is_valid
        assert result.warnings == []
        assert [i.severity for i in result.issues] == ["info"]

    def test_unknown_frequency_is_warning(self):
        """Test the unknown policy warning."""
        result = ExpenseValidator().validate(raw_record(frequency="weekly"))
        assert result.is_valid
        assert result.issues[0].issue_type == "unknown_policy"

    def test_validate_or_raise(self):
        """Test that validate_or_raise raises with the issues attached."""
        with pytest.raises(ExpenseValidationError) as exc_info:
            ExpenseValidator().validate_or_raise(raw_record(ownership_percentage=-1))
        assert exc_info.value.issues
        assert "ownership_percentage" in str(exc_info.value)

    def test_user_friendly_summary(self):
        """Test the human-readable summary."""
        validator = ExpenseValidator()
        ok = validator.get_user_friendly_summary(validator.validate(raw_record()))
        assert ok.startswith("✅")

        bad = validator.get_user_friendly_summary(validator.validate(raw_record(amount="-1")))
        assert "❌" in bad
        assert "Please fix the issues above before saving." in bad

        warned = validator.get_user_friendly_summary(validator.validate(raw_record(amount="0")))
        assert "⚠️" in warned
        assert "You can still save" in warned


class TestLoadExpenses:
    """Tests for load_expenses."""

    def test_loads_legacy_and_current_records_in_order(self):
        """Test loading a mixed batch in order."""
        records = [LEGACY_RENT, raw_record(id="2")]
        expenses = load_expenses(records)
        assert [e.id for e in expenses] == ["1", "2"]
        rent = expenses[0]
        assert rent.payer is Participant.FIRST
        assert rent.frequency is Frequency.MONTHLY
        assert rent.date == date(2023, 10, 1)

    def test_invalid_record_reports_index(self):
        """Test that the failing record index is reported."""
        records = [raw_record(), raw_record(amount="-3"), raw_record()]
        with pytest.raises(ExpenseValidationError) as exc_info:
            load_expenses(records)
        assert exc_info.value.record_index == 1
        assert exc_info.value.issues

    def test_audit_trail(self):
        """Test the audit events of a successful load."""
        audit = AuditLogger(keep_history=True)
        load_expenses([LEGACY_RENT, raw_record()], audit_logger=audit)
        types = [event.event_type for event in audit.history]
        assert types == [AuditEventType.RECORD_MIGRATED, AuditEventType.BATCH_LOADED]
        assert audit.history[-1].details == {"record_count": 2, "migrated_count": 1}

    def test_rejection_is_audited(self):
        """Test that a rejected record is audited."""
        audit = AuditLogger(keep_history=True)
        with pytest.raises(ExpenseValidationError):
            load_expenses([raw_record(amount="-3")], audit_logger=audit)
        assert audit.history[-1].event_type == AuditEventType.SCHEMA_VALIDATION_FAILED

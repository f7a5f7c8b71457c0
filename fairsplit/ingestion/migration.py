"""
Legacy Record Migration

Upgrades saved records from older schema versions before they are
validated. The input mapping is never mutated; a new dict is returned.

Upgrades applied:
- camelCase keys (ownershipPercentage, installmentsCount) -> snake_case
- Legacy payer values ME / PARTNER -> first / second
- Upper-case enum values (MONTHLY, HOME, ...) -> lower-case
- Missing category -> other
- Missing ownership percentage -> derived from the legacy splitType flag

NOTE: The 50/50 default for records that predate per-expense percentages
is a best-effort guess for missing data, not a rule anybody chose. Only
the explicit ME_ONLY / PARTNER_ONLY flags carry real information.
"""

from collections.abc import Mapping
from typing import Any

from fairsplit.models.expense import Category, Participant


DEFAULT_OWNERSHIP_PERCENTAGE = 50

_KEY_RENAMES = {
    "ownershipPercentage": "ownership_percentage",
    "installmentsCount": "installments_count",
}

_LEGACY_PAYERS = {
    "ME": Participant.FIRST.value,
    "PARTNER": Participant.SECOND.value,
}

_LEGACY_SPLIT_PERCENTAGES = {
    "ME_ONLY": 100,
    "PARTNER_ONLY": 0,
}

_LEGACY_SETTINGS_KEYS = {
    "user1Name": "first_name",
    "user2Name": "second_name",
    "userName": "first_name",
    "partnerName": "second_name",
}


def migrate_record(raw: Mapping[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """
    Upgrade one stored expense record to the current schema.

    Returns:
        (record, changes) where changes lists what was upgraded,
        empty when the record was already current.
    """
    record = dict(raw)
    changes: list[str] = []

    for old_key, new_key in _KEY_RENAMES.items():
        if old_key in record:
            value = record.pop(old_key)
            if new_key not in record:
                record[new_key] = value
                changes.append(f"renamed {old_key} to {new_key}")

    payer = record.get("payer")
    if isinstance(payer, str):
        if payer in _LEGACY_PAYERS:
            record["payer"] = _LEGACY_PAYERS[payer]
            changes.append(f"payer {payer} -> {record['payer']}")
        elif payer != payer.lower():
            record["payer"] = payer.lower()

    for key in ("category", "frequency"):
        value = record.get(key)
        if isinstance(value, str) and value != value.lower():
            record[key] = value.lower()

    if not record.get("category"):
        record["category"] = Category.OTHER.value
        changes.append("category defaulted to other")

    split_type = record.pop("splitType", None)
    if record.get("ownership_percentage") is None:
        percentage = _LEGACY_SPLIT_PERCENTAGES.get(split_type, DEFAULT_OWNERSHIP_PERCENTAGE)
        record["ownership_percentage"] = percentage
        if split_type in _LEGACY_SPLIT_PERCENTAGES:
            changes.append(f"ownership_percentage {percentage} from splitType {split_type}")
        else:
            changes.append(f"ownership_percentage defaulted to {percentage}")
    elif split_type is not None:
        changes.append("dropped obsolete splitType")

    return record, changes


def migrate_settings(raw: Mapping[str, Any]) -> dict[str, Any]:
    """
    Map stored participant-name settings onto the current field names.

    The newer user1Name / user2Name keys win over the older
    userName / partnerName pair when both are present.
    """
    migrated: dict[str, Any] = {}
    for old_key, new_key in _LEGACY_SETTINGS_KEYS.items():
        if raw.get(old_key) and new_key not in migrated:
            migrated[new_key] = raw[old_key]
    for key in ("first_name", "second_name"):
        if raw.get(key):
            migrated[key] = raw[key]
    return migrated

"""Reporting package: text built from balance engine output."""

from fairsplit.reporting.summary import (
    ParticipantNames,
    build_share_summary,
    category_breakdown,
    describe_settlement,
    describe_split,
    format_currency,
)

__all__ = [
    "ParticipantNames",
    "build_share_summary",
    "category_breakdown",
    "describe_settlement",
    "describe_split",
    "format_currency",
]

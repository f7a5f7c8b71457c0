"""
Monthly Summary Text

Turns a MonthlyBalance into human-readable text for sharing. This is the
only place where participant display names meet the FIRST / SECOND roles.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from fairsplit.config import get_settings
from fairsplit.engine import installment_number
from fairsplit.models.balance import ZERO, MonthlyBalance
from fairsplit.models.expense import Category, Expense, Participant


_CENT = Decimal("0.01")

SEPARATOR = "-" * 29


class ParticipantNames(BaseModel):
    """Display names for the two roles."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    first: str = Field(default="Participant 1", min_length=1)
    second: str = Field(default="Participant 2", min_length=1)

    @classmethod
    def from_settings(cls) -> "ParticipantNames":
        participants = get_settings().participants
        return cls(first=participants.first_name, second=participants.second_name)

    def name_for(self, participant: Participant) -> str:
        return self.first if participant is Participant.FIRST else self.second


def _currency_symbol(symbol: Optional[str]) -> str:
    return get_settings().app.currency_symbol if symbol is None else symbol


def format_currency(amount: Decimal, symbol: Optional[str] = None) -> str:
    """
    Format an amount rounded to cents, e.g. "$ 1,250.00".

    Negative amounts get a leading minus: "-$ 3.50".
    """
    rounded = Decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{_currency_symbol(symbol)} {abs(rounded):,.2f}"


def describe_split(expense: Expense, names: ParticipantNames) -> str:
    """How responsibility for an expense is divided, in words."""
    percentage = expense.ownership_percentage
    if percentage == 50:
        return "Split equally"
    if percentage == 100:
        return f"Only {names.first}"
    if percentage == 0:
        return f"Only {names.second}"
    return f"{percentage}% {names.first} / {100 - percentage}% {names.second}"


def describe_settlement(
    balance: MonthlyBalance,
    names: ParticipantNames,
    currency_symbol: Optional[str] = None,
) -> str:
    """Who owes whom, e.g. "Bob owes $ 1,250.00 to Alice"."""
    if balance.is_settled:
        return "All settled."
    debtor = names.name_for(balance.debtor)
    creditor = names.name_for(balance.creditor)
    return f"{debtor} owes {format_currency(balance.amount_owed, currency_symbol)} to {creditor}"


def category_breakdown(balance: MonthlyBalance) -> dict[Category, Decimal]:
    """
    Spending per category in the month, largest first.

    Categories with no active expense are left out.
    """
    totals: dict[Category, Decimal] = {}
    for expense in balance.items:
        totals[expense.category] = totals.get(expense.category, ZERO) + expense.amount
    return dict(sorted(totals.items(), key=lambda item: item[1], reverse=True))


def _item_line(
    expense: Expense,
    balance: MonthlyBalance,
    names: ParticipantNames,
    currency_symbol: Optional[str],
) -> str:
    line = (
        f"- {expense.title}: {format_currency(expense.amount, currency_symbol)} "
        f"({names.name_for(expense.payer)})"
    )
    number = installment_number(expense, balance.month)
    if number is not None:
        line += f" [{number}/{expense.installments_count}]"
    return line


def build_share_summary(
    balance: MonthlyBalance,
    names: Optional[ParticipantNames] = None,
    currency_symbol: Optional[str] = None,
) -> str:
    """
    Plain-text monthly summary, suitable for pasting into a chat.

    Args:
        balance: Output of compute_balance.
        names: Display names; defaults to the configured ones.
        currency_symbol: Defaults to FAIRSPLIT_CURRENCY_SYMBOL.
    """
    names = names or ParticipantNames.from_settings()

    lines = [
        f"Summary - {balance.month.label}",
        SEPARATOR,
        f"Total spent: {format_currency(balance.total_expenses, currency_symbol)}",
        f"{names.first} paid: {format_currency(balance.paid_by_first, currency_symbol)}",
        f"{names.second} paid: {format_currency(balance.paid_by_second, currency_symbol)}",
        SEPARATOR,
        f"Result: {describe_settlement(balance, names, currency_symbol)}",
        SEPARATOR,
        "Details:",
    ]
    if balance.items:
        lines.extend(
            _item_line(expense, balance, names, currency_symbol)
            for expense in balance.items
        )
    else:
        lines.append("No expenses this month.")

    return "\n".join(lines)

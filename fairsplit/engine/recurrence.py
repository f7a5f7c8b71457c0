"""
Recurrence Resolver

Decides whether a single expense contributes to a given month.

DESIGN DECISION: The decision is made on month ordinals (plain integers),
never on timestamps. Both the anchor date and the target month are
reduced to (year, month) before any comparison.

An expense whose policy is not recognised, or an installment expense
without a usable count, is inactive in every month. That keeps report
generation alive when records from another schema version show up.
"""

from typing import Optional

from fairsplit.models.expense import Expense, Frequency
from fairsplit.models.month import MonthLike, YearMonth


def is_active_in_month(expense: Expense, target_month: MonthLike) -> bool:
    """
    Does `expense` count towards `target_month`?

    ONE_TIME      only the anchor month
    MONTHLY       the anchor month and every month after it
    INSTALLMENTS  installments_count months starting at the anchor month
    """
    target = YearMonth.coerce(target_month).index
    anchor = expense.anchor_month.index

    if expense.frequency == Frequency.ONE_TIME:
        return target == anchor

    if expense.frequency == Frequency.MONTHLY:
        return target >= anchor

    if expense.frequency == Frequency.INSTALLMENTS:
        count = expense.installments_count
        if not count or count < 1:
            return False
        return anchor <= target < anchor + count

    return False


def installment_number(expense: Expense, target_month: MonthLike) -> Optional[int]:
    """
    Which installment falls in `target_month`, counting from 1.

    None when the expense is not an installment plan or is not
    active in that month.
    """
    if expense.frequency != Frequency.INSTALLMENTS:
        return None
    if not is_active_in_month(expense, target_month):
        return None
    return YearMonth.coerce(target_month).index - expense.anchor_month.index + 1

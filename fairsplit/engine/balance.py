"""
Balance Aggregator

Turns the full expense collection into one month's totals, fair shares
and settlement, and repeats that over a window of months for projections.

GUARANTEES:
- Pure: reads its input, allocates fresh output, keeps no state
- Input order is preserved in MonthlyBalance.items
- paid_by_first + paid_by_second == total_expenses
  == first_fair_share + second_fair_share (exact, Decimal arithmetic)

The aggregator assumes validated records. Range checks on amounts and
percentages happen at ingestion (see fairsplit.ingestion.validator).
"""

from collections.abc import Iterable

from fairsplit.audit.logger import get_logger
from fairsplit.engine.recurrence import is_active_in_month
from fairsplit.models.balance import ZERO, MonthlyBalance, ProjectionPoint
from fairsplit.models.expense import Expense, Participant
from fairsplit.models.month import MAX_MONTH_INDEX, MonthLike, YearMonth


DEFAULT_PROJECTION_MONTHS = 6

logger = get_logger(__name__)


def compute_balance(
    expenses: Iterable[Expense],
    target_month: MonthLike,
) -> MonthlyBalance:
    """
    Compute the balance of `target_month`.

    Args:
        expenses: The full, already validated collection. Not mutated.
        target_month: YearMonth, date or "YYYY-MM" key.

    Returns:
        MonthlyBalance whose items are the active expenses in input order.
    """
    month = YearMonth.coerce(target_month)
    active = [e for e in expenses if is_active_in_month(e, month)]

    total = ZERO
    paid_by_first = ZERO
    paid_by_second = ZERO
    first_fair_share = ZERO
    second_fair_share = ZERO

    for expense in active:
        total += expense.amount

        if expense.payer == Participant.FIRST:
            paid_by_first += expense.amount
        else:
            paid_by_second += expense.amount

        first_share = expense.first_share
        first_fair_share += first_share
        second_fair_share += expense.amount - first_share

    settlement = paid_by_first - first_fair_share

    logger.debug(
        "balance_computed",
        month=str(month),
        active_count=len(active),
        total=str(total),
        settlement=str(settlement),
    )

    return MonthlyBalance(
        month=month,
        total_expenses=total,
        paid_by_first=paid_by_first,
        paid_by_second=paid_by_second,
        first_fair_share=first_fair_share,
        second_fair_share=second_fair_share,
        settlement=settlement,
        items=tuple(active),
    )


def generate_projection(
    expenses: Iterable[Expense],
    start_month: MonthLike,
    horizon_months: int = DEFAULT_PROJECTION_MONTHS,
) -> list[ProjectionPoint]:
    """
    Fair-share spending for `horizon_months` consecutive months.

    Each month is an independent compute_balance call over the whole
    collection; nothing is carried from one month to the next.

    Raises:
        ValueError: horizon_months is negative, or the horizon runs past
            9999-12.
    """
    if horizon_months < 0:
        raise ValueError(f"horizon_months must be >= 0, got {horizon_months}")

    start = YearMonth.coerce(start_month)
    if start.index + horizon_months - 1 > MAX_MONTH_INDEX:
        raise ValueError(
            f"A {horizon_months}-month projection from {start} runs past 9999-12"
        )

    # Iterables such as generators can only be read once
    snapshot = tuple(expenses)

    points = []
    for offset in range(horizon_months):
        balance = compute_balance(snapshot, start.shift(offset))
        points.append(ProjectionPoint(
            month=balance.month,
            first_spend=balance.first_fair_share,
            second_spend=balance.second_fair_share,
            total=balance.total_expenses,
        ))

    return points

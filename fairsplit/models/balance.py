"""
Derived Balance Models

MonthlyBalance and ProjectionPoint are outputs of the balance engine.
They are recomputed on demand and never stored.

The settlement sign convention:
    settlement = paid_by_first - first_fair_share
    > 0  the SECOND participant owes the FIRST
    < 0  the FIRST participant owes the SECOND
    == 0 nobody owes anything
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from fairsplit.models.expense import Expense, Participant
from fairsplit.models.month import YearMonth


ZERO = Decimal("0")


class MonthlyBalance(BaseModel):
    """Totals, fair shares and settlement for one month."""
    model_config = ConfigDict(frozen=True)

    month: YearMonth
    total_expenses: Decimal = ZERO
    paid_by_first: Decimal = ZERO
    paid_by_second: Decimal = ZERO
    first_fair_share: Decimal = ZERO
    second_fair_share: Decimal = ZERO
    settlement: Decimal = Field(
        default=ZERO,
        description="paid_by_first - first_fair_share; positive means SECOND owes FIRST"
    )

    # Active expenses, in the order of the input collection
    items: tuple[Expense, ...] = ()

    @property
    def is_settled(self) -> bool:
        return self.settlement == 0

    @property
    def debtor(self) -> Optional[Participant]:
        """Who has to pay at settlement time, None when settled."""
        if self.settlement > 0:
            return Participant.SECOND
        if self.settlement < 0:
            return Participant.FIRST
        return None

    @property
    def creditor(self) -> Optional[Participant]:
        debtor = self.debtor
        return debtor.other if debtor is not None else None

    @property
    def amount_owed(self) -> Decimal:
        return abs(self.settlement)

    def paid_by(self, participant: Participant) -> Decimal:
        if participant is Participant.FIRST:
            return self.paid_by_first
        return self.paid_by_second

    def fair_share(self, participant: Participant) -> Decimal:
        if participant is Participant.FIRST:
            return self.first_fair_share
        return self.second_fair_share


class ProjectionPoint(BaseModel):
    """One month of a spending projection."""
    model_config = ConfigDict(frozen=True)

    month: YearMonth
    first_spend: Decimal = Field(..., description="FIRST participant's fair share")
    second_spend: Decimal = Field(..., description="SECOND participant's fair share")
    total: Decimal

    @property
    def label(self) -> str:
        return self.month.label

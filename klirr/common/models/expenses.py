"""Expense ledger: canonical item lists per billing period."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from klirr.common.errors import (
    CannotExpenseForFortnightWhenMonthly,
    CannotExpenseForMonthWhenBiWeekly,
    InvalidData,
    TargetPeriodMustHaveExpenses,
)
from klirr.common.models.calendar import Period, YearAndMonth, YearMonthAndFortnight, parse_period
from klirr.common.models.items import Item
from klirr.common.models.service_fees import Cadence

logger = logging.getLogger(__name__)

EXPLANATION = "Expenses for periods"


def merge_items(items: Iterable[Item]) -> List[Item]:
    """Merge items sharing name, date, unit price and currency.

    Quantities are summed; the first occurrence decides the position.
    """
    merged: Dict[tuple, Item] = {}
    for item in items:
        key = item.merge_key
        if key in merged:
            existing = merged[key]
            merged[key] = existing.with_quantity(existing.quantity + item.quantity)
        else:
            merged[key] = item
    return list(merged.values())


def validate_cadence_for_expenses(cadence: Cadence, period: Period):
    if cadence is Cadence.MONTHLY and isinstance(period, YearMonthAndFortnight):
        raise CannotExpenseForFortnightWhenMonthly(period)
    if cadence is Cadence.BI_WEEKLY and isinstance(period, YearAndMonth):
        raise CannotExpenseForMonthWhenBiWeekly(period)


@dataclass
class ExpensedPeriods:
    periods: Dict[Period, List[Item]] = field(default_factory=dict)

    def insert_expenses(self, period: Period, items: Iterable[Item]):
        bucket = self.periods.get(period, []) + list(items)
        self.periods[period] = merge_items(bucket)
        logger.debug(f"Period {period} now has {len(self.periods[period])} expense items")

    def get(self, period: Period) -> List[Item]:
        if period not in self.periods:
            raise TargetPeriodMustHaveExpenses(period)
        return list(self.periods[period])

    def contains(self, period: Period) -> bool:
        return period in self.periods

    def __contains__(self, period: Period) -> bool:
        return self.contains(period)

    def __len__(self) -> int:
        return len(self.periods)

    def to_dict(self) -> dict:
        return {
            "explanation": EXPLANATION,
            "expenses_for_periods": {
                str(period): [item.to_dict() for item in self.periods[period]]
                for period in sorted(self.periods)
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExpensedPeriods":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise InvalidData(data, "expenses must be a mapping")
        ledger = cls()
        for period_text, items in (data.get("expenses_for_periods") or {}).items():
            ledger.insert_expenses(
                parse_period(period_text),
                [Item.from_dict(item) for item in items or []],
            )
        return ledger

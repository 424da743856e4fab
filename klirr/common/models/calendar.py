"""Calendar and billing period models.

A billing period is either a whole month (``YearAndMonth``) or one half of a
month (``YearMonthAndFortnight``). Both are frozen, totally ordered within
their own kind, and render to the same text they are parsed from:

    2025-01               YearAndMonth
    2025-01-first-half    YearMonthAndFortnight
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta
from enum import IntEnum
from typing import Optional, Union

from klirr.common.errors import (
    InvalidDate,
    InvalidDay,
    InvalidPeriod,
    PeriodKindMismatch,
    StartAfterEnd,
)

MIN_YEAR = 1000
MAX_YEAR = 9999


class Month(IntEnum):
    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12


class Granularity(IntEnum):
    """Time unit a service is priced in, ordered from finest to coarsest."""

    HOUR = 1
    DAY = 2
    FORTNIGHT = 3
    MONTH = 4

    def __str__(self) -> str:
        return self.name.lower()


class MonthHalf(IntEnum):
    FIRST = 1
    SECOND = 2

    def __str__(self) -> str:
        return "first-half" if self is MonthHalf.FIRST else "second-half"

    @classmethod
    def parse(cls, text: str) -> "MonthHalf":
        value = text.strip().lower()
        if value in ("1", "first", "first-half"):
            return cls.FIRST
        if value in ("2", "second", "second-half"):
            return cls.SECOND
        raise InvalidPeriod(text, "month half must be first-half or second-half")

    @classmethod
    def of_date(cls, day: date) -> "MonthHalf":
        return cls.FIRST if day.day <= last_day_of_first_half(Month(day.month)) else cls.SECOND


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


_DAYS_IN_MONTH = {
    Month.JANUARY: 31,
    Month.FEBRUARY: 28,
    Month.MARCH: 31,
    Month.APRIL: 30,
    Month.MAY: 31,
    Month.JUNE: 30,
    Month.JULY: 31,
    Month.AUGUST: 31,
    Month.SEPTEMBER: 30,
    Month.OCTOBER: 31,
    Month.NOVEMBER: 30,
    Month.DECEMBER: 31,
}


def last_day_of_month(month: Month, leap: bool) -> int:
    if month == Month.FEBRUARY and leap:
        return 29
    return _DAYS_IN_MONTH[Month(month)]


def last_day_of_first_half(month: Month) -> int:
    return 14 if month == Month.FEBRUARY else 15


def validate_day(day: int) -> int:
    if not isinstance(day, int) or not 1 <= day <= 31:
        raise InvalidDay(day, "day must be in 1..=31")
    return day


def _validate_year(year: int) -> int:
    if not isinstance(year, int) or not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidPeriod(year, "year must have four digits")
    return year


def _validate_month(month) -> Month:
    try:
        return Month(month)
    except ValueError:
        raise InvalidPeriod(month, "month must be in 1..=12") from None


def parse_date(text: str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` date."""
    try:
        return date.fromisoformat(str(text).strip())
    except ValueError as e:
        raise InvalidDate(text, str(e)) from None


def advance(start: date, days: int) -> date:
    """Date ``days`` calendar days after ``start``."""
    return start + timedelta(days=days)


class _PeriodOrdering:
    """Ordering within one period kind; comparing across kinds is an error."""

    kind = "period"

    def _key(self) -> tuple:
        raise NotImplementedError

    def _check_kind(self, other):
        if not isinstance(other, _PeriodOrdering):
            return NotImplemented
        if type(other) is not type(self):
            raise PeriodKindMismatch(self.kind, other.kind)
        return None

    def __lt__(self, other):
        not_comparable = self._check_kind(other)
        if not_comparable is not None:
            return not_comparable
        return self._key() < other._key()

    def __le__(self, other):
        not_comparable = self._check_kind(other)
        if not_comparable is not None:
            return not_comparable
        return self._key() <= other._key()

    def __gt__(self, other):
        not_comparable = self._check_kind(other)
        if not_comparable is not None:
            return not_comparable
        return self._key() > other._key()

    def __ge__(self, other):
        not_comparable = self._check_kind(other)
        if not_comparable is not None:
            return not_comparable
        return self._key() >= other._key()


@dataclass(frozen=True)
class YearAndMonth(_PeriodOrdering):
    year: int
    month: Month

    kind = "year-and-month"

    def __post_init__(self):
        _validate_year(self.year)
        object.__setattr__(self, "month", _validate_month(self.month))

    def _key(self) -> tuple:
        return (self.year, int(self.month))

    def __str__(self) -> str:
        return f"{self.year:04d}-{int(self.month):02d}"

    @classmethod
    def of_date(cls, day: date) -> "YearAndMonth":
        return cls(day.year, Month(day.month))

    @property
    def max_granularity(self) -> Granularity:
        return Granularity.MONTH

    @property
    def year_and_month(self) -> "YearAndMonth":
        return self

    def one_month_earlier(self) -> "YearAndMonth":
        if self.month is Month.JANUARY:
            return YearAndMonth(self.year - 1, Month.DECEMBER)
        return YearAndMonth(self.year, Month(self.month - 1))

    def elapsed_months_since(self, start: "YearAndMonth") -> int:
        if start > self:
            raise StartAfterEnd(start, self)
        return (self.year - start.year) * 12 + int(self.month) - int(start.month)

    def elapsed_periods_since(self, start: "Period") -> int:
        if not isinstance(start, YearAndMonth):
            raise PeriodKindMismatch(self.kind, start.kind)
        return self.elapsed_months_since(start)

    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def last_day(self) -> date:
        return date(self.year, self.month, last_day_of_month(self.month, is_leap_year(self.year)))

    def to_date_end_of_period(self) -> date:
        return self.last_day()


@dataclass(frozen=True)
class YearMonthAndFortnight(_PeriodOrdering):
    year: int
    month: Month
    half: MonthHalf

    kind = "year-month-and-fortnight"

    def __post_init__(self):
        _validate_year(self.year)
        object.__setattr__(self, "month", _validate_month(self.month))
        object.__setattr__(self, "half", MonthHalf(self.half))

    def _key(self) -> tuple:
        return (self.year, int(self.month), int(self.half))

    def __str__(self) -> str:
        return f"{self.year:04d}-{int(self.month):02d}-{self.half}"

    @classmethod
    def of_date(cls, day: date) -> "YearMonthAndFortnight":
        return cls(day.year, Month(day.month), MonthHalf.of_date(day))

    @property
    def max_granularity(self) -> Granularity:
        return Granularity.FORTNIGHT

    @property
    def year_and_month(self) -> YearAndMonth:
        return YearAndMonth(self.year, self.month)

    def one_half_earlier(self) -> "YearMonthAndFortnight":
        if self.half is MonthHalf.SECOND:
            return YearMonthAndFortnight(self.year, self.month, MonthHalf.FIRST)
        previous = self.year_and_month.one_month_earlier()
        return YearMonthAndFortnight(previous.year, previous.month, MonthHalf.SECOND)

    def elapsed_periods_since(self, start: "Period") -> int:
        if not isinstance(start, YearMonthAndFortnight):
            raise PeriodKindMismatch(self.kind, start.kind)
        if start > self:
            raise StartAfterEnd(start, self)
        months = self.year_and_month.elapsed_months_since(start.year_and_month)
        return 2 * months + (int(self.half) - int(start.half))

    def to_date_end_of_period(self) -> date:
        if self.half is MonthHalf.FIRST:
            return date(self.year, self.month, last_day_of_first_half(self.month))
        return self.year_and_month.last_day()


Period = Union[YearAndMonth, YearMonthAndFortnight]

_PERIOD_RE = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{1,2})(?:-(?P<half>.+))?$")


def parse_period(text: str) -> Period:
    """Parse ``YYYY-MM`` or ``YYYY-MM-<half>``."""
    match = _PERIOD_RE.match(str(text).strip())
    if not match:
        raise InvalidPeriod(text, "expected YYYY-MM or YYYY-MM-first-half|second-half")
    year = int(match.group("year"))
    month = _validate_month(int(match.group("month")))
    half = match.group("half")
    if half is None:
        return YearAndMonth(year, month)
    return YearMonthAndFortnight(year, month, MonthHalf.parse(half))


def resolve_period_alias(text: str, today: Optional[date] = None) -> Period:
    """Parse a period, accepting the ``current`` and ``last`` aliases."""
    alias = str(text).strip().lower()
    if alias in ("current", "last"):
        current = YearMonthAndFortnight.of_date(today or date.today())
        return current if alias == "current" else current.one_half_earlier()
    return parse_period(text)


def downcast_period(target: Period, like: Period) -> Period:
    """Express ``target`` in the same kind of period as ``like``.

    A fortnight becomes its month when the data is monthly; a month can
    not be turned into a fortnight.
    """
    if isinstance(like, YearAndMonth):
        return target.year_and_month
    if isinstance(target, YearMonthAndFortnight):
        return target
    raise PeriodKindMismatch(like.kind, target.kind)


def working_days(period: Period) -> int:
    """Weekdays (Mon-Fri) in the whole month containing ``period``."""
    ym = period.year_and_month
    count = 0
    for day in range(1, last_day_of_month(ym.month, is_leap_year(ym.year)) + 1):
        if calendar.weekday(ym.year, ym.month, day) < 5:
            count += 1
    return count

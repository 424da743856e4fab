"""Service pricing: cadence, rate, fees and time off."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from klirr.common.errors import CannotInvoiceMonthWhenBiWeekly, InvalidData, InvalidQuantity
from klirr.common.models.calendar import Granularity
from klirr.common.models.money import format_decimal, non_negative_decimal, to_decimal


class Cadence(str, Enum):
    """How often the vendor invoices."""

    MONTHLY = "monthly"
    BI_WEEKLY = "bi-weekly"

    def __str__(self) -> str:
        return self.value

    def validate(self, granularity: Granularity):
        """Raise if this cadence can not bill in ``granularity``."""
        if self is Cadence.BI_WEEKLY and granularity == Granularity.MONTH:
            raise CannotInvoiceMonthWhenBiWeekly()


def parse_granularity(text: str) -> Granularity:
    try:
        return Granularity[str(text).strip().upper()]
    except KeyError:
        raise InvalidData(text, "granularity must be hour, day, fortnight or month") from None


def parse_cadence(text: str) -> Cadence:
    try:
        return Cadence(str(text).strip().lower())
    except ValueError:
        raise InvalidData(text, "cadence must be monthly or bi-weekly") from None


@dataclass(frozen=True)
class Rate:
    unit_price: Decimal
    granularity: Granularity

    def __post_init__(self):
        object.__setattr__(self, "unit_price", non_negative_decimal(self.unit_price))
        object.__setattr__(self, "granularity", Granularity(self.granularity))

    @classmethod
    def hourly(cls, unit_price) -> "Rate":
        return cls(unit_price, Granularity.HOUR)

    @classmethod
    def daily(cls, unit_price) -> "Rate":
        return cls(unit_price, Granularity.DAY)

    @classmethod
    def fortnight(cls, unit_price) -> "Rate":
        return cls(unit_price, Granularity.FORTNIGHT)

    @classmethod
    def monthly(cls, unit_price) -> "Rate":
        return cls(unit_price, Granularity.MONTH)

    def to_dict(self) -> dict:
        return {str(self.granularity): format_decimal(self.unit_price)}

    @classmethod
    def from_dict(cls, data: dict) -> "Rate":
        if not isinstance(data, dict) or len(data) != 1:
            raise InvalidData(data, "rate must be a single {granularity: price} entry")
        (granularity, price), = data.items()
        return cls(price, parse_granularity(granularity))


@dataclass(frozen=True)
class ServiceFees:
    name: str
    rate: Rate
    cadence: Cadence

    def __post_init__(self):
        self.cadence.validate(self.rate.granularity)

    @property
    def granularity(self) -> Granularity:
        return self.rate.granularity

    @property
    def unit_price(self) -> Decimal:
        return self.rate.unit_price

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "rate": self.rate.to_dict(),
            "cadence": str(self.cadence),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ServiceFees":
        try:
            return cls(
                name=str(data["name"]),
                rate=Rate.from_dict(data["rate"]),
                cadence=parse_cadence(data["cadence"]),
            )
        except (KeyError, TypeError) as e:
            raise InvalidData(data, f"service fees missing {e}") from None


@dataclass(frozen=True)
class TimeOff:
    """Time not worked in a period, subtracted from the billable quantity."""

    quantity: Decimal
    granularity: Granularity

    def __post_init__(self):
        if self.granularity not in (Granularity.HOUR, Granularity.DAY):
            raise InvalidQuantity(self.granularity, "time off is given in hours or days")
        object.__setattr__(self, "quantity", non_negative_decimal(self.quantity))

    @classmethod
    def hours(cls, quantity) -> "TimeOff":
        return cls(to_decimal(quantity), Granularity.HOUR)

    @classmethod
    def days(cls, quantity) -> "TimeOff":
        return cls(to_decimal(quantity), Granularity.DAY)

    @classmethod
    def from_unit(cls, quantity, unit: str) -> "TimeOff":
        unit = unit.strip().lower()
        if unit in ("day", "days"):
            return cls.days(quantity)
        if unit in ("hour", "hours"):
            return cls.hours(quantity)
        raise InvalidQuantity(unit, "unit must be days or hours")


def time_off_quantity(time_off: Optional[TimeOff]) -> Decimal:
    return time_off.quantity if time_off is not None else Decimal(0)

"""Invoice numbering anchor, periods off and presentation settings."""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional

from klirr.common.errors import (
    InvalidData,
    InvalidHexColor,
    InvalidInvoiceNumber,
    RecordsOffMustNotContainOffsetPeriod,
)
from klirr.common.models.calendar import Period, parse_period

MAX_INVOICE_NUMBER = 0xFFFF

DEFAULT_FOOTER_TEXT = (
    "Reverse VAT according to chapter 1 2§ first section 4b in the VAT regulation."
)


def validate_invoice_number(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInvoiceNumber(value, "must be an integer")
    if not 0 <= value <= MAX_INVOICE_NUMBER:
        raise InvalidInvoiceNumber(value, f"must be in 0..={MAX_INVOICE_NUMBER}")
    return value


_HEX_RE = re.compile(r"^#([0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class HexColor:
    value: str = "#000000"

    def __post_init__(self):
        match = _HEX_RE.match(str(self.value).strip())
        if not match:
            raise InvalidHexColor(self.value, "expected #rrggbb")
        object.__setattr__(self, "value", f"#{match.group(1).lower()}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TimestampedInvoiceNumber:
    """Invoice ``offset`` issued for ``period``; later numbers count from here."""

    offset: int
    period: Period

    def __post_init__(self):
        validate_invoice_number(self.offset)

    def to_dict(self) -> dict:
        return {"offset": self.offset, "period": str(self.period)}

    @classmethod
    def from_dict(cls, data: dict) -> "TimestampedInvoiceNumber":
        if not isinstance(data, dict) or "offset" not in data or "period" not in data:
            raise InvalidData(data, "offset needs 'offset' and 'period'")
        return cls(data["offset"], parse_period(data["period"]))


@dataclass
class RecordOfPeriodsOff:
    periods: List[Period] = field(default_factory=list)

    def __post_init__(self):
        unique = []
        for period in self.periods:
            if period not in unique:
                unique.append(period)
        self.periods = sorted(unique)

    def insert(self, period: Period):
        if period not in self.periods:
            self.periods = sorted(self.periods + [period])

    def contains(self, period: Period) -> bool:
        return period in self.periods

    def __contains__(self, period: Period) -> bool:
        return self.contains(period)

    def __iter__(self):
        return iter(self.periods)

    def __len__(self) -> int:
        return len(self.periods)

    def to_list(self) -> List[str]:
        return [str(period) for period in self.periods]

    @classmethod
    def from_list(cls, values: Optional[Iterable[str]]) -> "RecordOfPeriodsOff":
        return cls([parse_period(value) for value in values or []])


@dataclass
class ProtoInvoiceInfo:
    offset: TimestampedInvoiceNumber
    record_of_periods_off: RecordOfPeriodsOff = field(default_factory=RecordOfPeriodsOff)
    purchase_order: Optional[str] = None
    footer_text: Optional[str] = None
    emphasize_color_hex: Optional[HexColor] = None

    def validate(self):
        if self.offset.period in self.record_of_periods_off:
            raise RecordsOffMustNotContainOffsetPeriod(self.offset.period)

    def insert_period_off(self, period: Period):
        self.record_of_periods_off.insert(period)

    def to_dict(self) -> dict:
        return {
            "offset": self.offset.to_dict(),
            "record_of_periods_off": self.record_of_periods_off.to_list(),
            "purchase_order": self.purchase_order,
            "footer_text": self.footer_text,
            "emphasize_color_hex": str(self.emphasize_color_hex) if self.emphasize_color_hex else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProtoInvoiceInfo":
        if not isinstance(data, dict) or "offset" not in data:
            raise InvalidData(data, "invoice info needs an 'offset'")
        color = data.get("emphasize_color_hex")
        return cls(
            offset=TimestampedInvoiceNumber.from_dict(data["offset"]),
            record_of_periods_off=RecordOfPeriodsOff.from_list(data.get("record_of_periods_off")),
            purchase_order=data.get("purchase_order"),
            footer_text=data.get("footer_text"),
            emphasize_color_hex=HexColor(color) if color else None,
        )


@dataclass(frozen=True)
class InvoiceInfoFull:
    number: int
    invoice_date: date
    due_date: date
    purchase_order: Optional[str] = None
    footer_text: Optional[str] = None
    emphasize_color_hex: HexColor = HexColor()

    def to_typst_dict(self) -> dict:
        return {
            "number": self.number,
            "invoice_date": self.invoice_date.isoformat(),
            "due_date": self.due_date.isoformat(),
            "purchase_order": self.purchase_order,
            "footer_text": self.footer_text,
            "emphasize_color_hex": str(self.emphasize_color_hex),
        }

"""Currencies, decimal amounts and exchange rates."""

import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Dict

from klirr.common.errors import (
    FoundNoExchangeRate,
    InvalidCurrency,
    InvalidDecimalF64Conversion,
    InvalidQuantity,
)


class Currency(str, Enum):
    """Supported currencies, parsed case-sensitively from their code."""

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    CAD = "CAD"
    AUD = "AUD"
    CHF = "CHF"
    SEK = "SEK"
    NOK = "NOK"
    DKK = "DKK"
    CNY = "CNY"
    INR = "INR"
    BRL = "BRL"
    RUB = "RUB"
    ZAR = "ZAR"
    MXN = "MXN"
    NZD = "NZD"
    SGD = "SGD"
    HKD = "HKD"
    KRW = "KRW"
    SAR = "SAR"
    AED = "AED"
    TRY = "TRY"
    PLN = "PLN"
    THB = "THB"
    TWD = "TWD"
    XAF = "XAF"
    XOF = "XOF"
    XCD = "XCD"
    # Crypto
    XBT = "XBT"
    ETH = "ETH"
    XRD = "XRD"
    DOT = "DOT"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, code: str) -> "Currency":
        try:
            return cls(code)
        except ValueError:
            raise InvalidCurrency(code, "unsupported currency code") from None

    @property
    def is_crypto(self) -> bool:
        return self in CRYPTO_CURRENCIES


CRYPTO_CURRENCIES = frozenset({Currency.XBT, Currency.ETH, Currency.XRD, Currency.DOT})


def to_decimal(value, error=InvalidQuantity) -> Decimal:
    """Decimal from str/int/float/Decimal, floats go through ``str``."""
    if isinstance(value, bool):
        raise error(value, "not a number")
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise error(value, "not a number") from None
    if not result.is_finite():
        raise error(value, "not a finite number")
    return result


def non_negative_decimal(value) -> Decimal:
    result = to_decimal(value)
    if result < 0:
        raise InvalidQuantity(value, "must not be negative")
    return result


def decimal_to_f64(value: Decimal) -> float:
    """Float for the renderer; non-finite results are refused."""
    try:
        result = float(value)
    except (OverflowError, ValueError, TypeError):
        raise InvalidDecimalF64Conversion(value) from None
    if not math.isfinite(result):
        raise InvalidDecimalF64Conversion(value)
    return result


def format_decimal(value: Decimal) -> str:
    """Plain notation without exponent or trailing zeros, for storage."""
    if value == value.to_integral_value():
        return format(value, "f").split(".")[0]
    return format(value.normalize(), "f")


@dataclass(frozen=True)
class ExchangeRates:
    """Rates from each source currency into ``target_currency``."""

    target_currency: Currency
    rates: Dict[Currency, Decimal] = field(default_factory=dict)

    def convert(self, price: Decimal, currency: Currency) -> Decimal:
        if currency == self.target_currency:
            return price
        rate = self.rates.get(currency)
        if rate is None:
            raise FoundNoExchangeRate(self.target_currency, currency)
        return price * rate

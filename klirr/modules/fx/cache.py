"""Persistent exchange rate cache: date -> from -> to -> rate."""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Optional

from klirr.common.errors import KlirrError
from klirr.common.models import Currency
from klirr.common.models.calendar import parse_date
from klirr.common.models.money import format_decimal, to_decimal
from klirr.common.storage import StorageBackend
from klirr.common.storage.backend import CACHED_RATES

logger = logging.getLogger(__name__)


@dataclass
class CachedRates:
    rates: Dict[date, Dict[Currency, Dict[Currency, Decimal]]] = field(default_factory=dict)

    def get(self, on: date, from_currency: Currency, to_currency: Currency) -> Optional[Decimal]:
        return self.rates.get(on, {}).get(from_currency, {}).get(to_currency)

    def insert(self, on: date, from_currency: Currency, to_currency: Currency, rate: Decimal):
        self.rates.setdefault(on, {}).setdefault(from_currency, {})[to_currency] = rate

    def __len__(self) -> int:
        return sum(len(to) for by_from in self.rates.values() for to in by_from.values())

    def to_dict(self) -> dict:
        return {
            on.isoformat(): {
                str(from_currency): {
                    str(to_currency): format_decimal(rate)
                    for to_currency, rate in by_to.items()
                }
                for from_currency, by_to in by_from.items()
            }
            for on, by_from in sorted(self.rates.items())
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CachedRates":
        cache = cls()
        for on, by_from in (data or {}).items():
            for from_currency, by_to in by_from.items():
                for to_currency, rate in by_to.items():
                    cache.insert(
                        parse_date(on),
                        Currency.parse(from_currency),
                        Currency.parse(to_currency),
                        to_decimal(rate),
                    )
        return cache


def load_cached_rates(store: StorageBackend) -> CachedRates:
    """Load the cache; a missing or unreadable cache starts empty."""
    if not store.exists(CACHED_RATES):
        return CachedRates()
    try:
        return CachedRates.from_dict(store.load(CACHED_RATES))
    except (KlirrError, AttributeError, TypeError) as e:
        logger.warning(f"Corrupted exchange rate cache, starting fresh: {e}")
        return CachedRates()


def save_cached_rates(store: StorageBackend, cache: CachedRates):
    store.save(CACHED_RATES, cache.to_dict())

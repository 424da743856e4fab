"""Exchange rates for invoice items, served from cache before the network."""

import logging
from decimal import Decimal
from typing import Iterable, Tuple

from klirr.common.errors import KlirrError
from klirr.common.models import Currency, ExchangeRates, Item
from klirr.common.storage import StorageBackend

from .cache import CachedRates, load_cached_rates, save_cached_rates
from .client import RateOracle

logger = logging.getLogger(__name__)


class ExchangeRatesFetcher:
    """Resolves rates per item date and writes new ones back to the cache."""

    def __init__(self, store: StorageBackend, oracle: RateOracle):
        self.store = store
        self.oracle = oracle
        self.cache: CachedRates = load_cached_rates(store)

    def load_else_fetch(self, on, from_currency: Currency, to_currency: Currency) -> Tuple[Decimal, bool]:
        """Return ``(rate, fetched_new)``."""
        cached = self.cache.get(on, from_currency, to_currency)
        if cached is not None:
            logger.debug(f"Cache hit {from_currency}->{to_currency} on {on}: {cached}")
            return cached, False
        rate = self.oracle.get_rate(on, from_currency, to_currency)
        self.cache.insert(on, from_currency, to_currency, rate)
        return rate, True

    def fetch_for_items(self, target: Currency, items: Iterable[Item]) -> ExchangeRates:
        rates = {}
        fetched_new_any = False
        for item in items:
            if item.currency == target:
                rate = Decimal(1)
            else:
                rate, fetched_new = self.load_else_fetch(item.transaction_date, item.currency, target)
                fetched_new_any = fetched_new_any or fetched_new
            rates[item.currency] = rate

        if fetched_new_any:
            self._persist()
        return ExchangeRates(target, rates)

    def _persist(self):
        try:
            save_cached_rates(self.store, self.cache)
            logger.debug(f"Saved {len(self.cache)} cached exchange rates")
        except KlirrError as e:
            logger.warning(f"Failed to save exchange rate cache: {e}")

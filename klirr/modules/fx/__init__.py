"""Exchange rates: Frankfurter client, on-disk cache and item conversion."""

from .cache import CachedRates, load_cached_rates
from .client import FrankfurterClient, RateOracle
from .service import ExchangeRatesFetcher

__all__ = ['CachedRates', 'load_cached_rates', 'FrankfurterClient', 'RateOracle', 'ExchangeRatesFetcher']

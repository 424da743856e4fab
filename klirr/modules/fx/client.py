"""
Exchange Rate Client
====================
Fetches historical exchange rates from the Frankfurter API.

    GET https://api.frankfurter.app/2025-05-31?from=GBP&to=EUR
    {"amount": 1.0, "base": "GBP", "date": "2025-05-30", "rates": {"EUR": 1.1869}}
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal, InvalidOperation

import requests

from klirr.common.errors import FoundNoExchangeRate, NetworkError, ParseError
from klirr.common.models import Currency

logger = logging.getLogger(__name__)


class RateOracle(ABC):
    """Source of the rate converting one ``from_currency`` into ``to_currency``."""

    @abstractmethod
    def get_rate(self, on: date, from_currency: Currency, to_currency: Currency) -> Decimal:
        pass


class FrankfurterClient(RateOracle):
    """Frankfurter exchange rate API client."""

    BASE_URL = "https://api.frankfurter.app"

    def __init__(self, base_url: str = None, timeout: float = 10):
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout

    def url_for(self, on: date, from_currency: Currency, to_currency: Currency) -> str:
        return f"{self.base_url}/{on.isoformat()}?from={from_currency}&to={to_currency}"

    def get_rate(self, on: date, from_currency: Currency, to_currency: Currency) -> Decimal:
        url = self.url_for(on, from_currency, to_currency)
        logger.debug(f"Fetching exchange rate: {url}")
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(str(e)) from e

        # Unquoted currencies (e.g. crypto) come back as 404
        if response.status_code == 404:
            raise FoundNoExchangeRate(to_currency, from_currency)
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise NetworkError(str(e)) from e

        try:
            payload = response.json()
            rates = payload["rates"]
        except (ValueError, KeyError, TypeError) as e:
            raise ParseError(f"{type(e).__name__}: {e}") from e

        if not isinstance(rates, dict) or str(to_currency) not in rates:
            raise FoundNoExchangeRate(to_currency, from_currency)

        try:
            rate = Decimal(str(rates[str(to_currency)]))
        except InvalidOperation as e:
            raise ParseError(f"rate is not a number: {rates[str(to_currency)]!r}") from e

        logger.info(f"💱 1 {from_currency} = {rate} {to_currency} on {on}")
        return rate

#!/usr/bin/env python3
"""
Unit Tests for Exchange Rates

Tests the Frankfurter client (requests mocked), the rate cache and
item conversion.
"""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import requests

from klirr.common.errors import FoundNoExchangeRate, NetworkError, ParseError, StorageWriteError
from klirr.common.models import Currency, Item
from klirr.common.storage.backend import CACHED_RATES
from klirr.modules.fx import CachedRates, ExchangeRatesFetcher, FrankfurterClient, load_cached_rates
from klirr.modules.fx.cache import save_cached_rates

from tests.fixtures.klirr import gbp_expense

MAY_31 = date(2025, 5, 31)


def mock_response(status_code=200, payload=None, json_error=None):
    response = MagicMock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    return response


# =============================================================================
# Frankfurter client
# =============================================================================

class TestFrankfurterClient:
    """Tests for the HTTP rate oracle."""

    def test_url(self):
        client = FrankfurterClient()
        assert client.url_for(MAY_31, Currency.GBP, Currency.EUR) == (
            "https://api.frankfurter.app/2025-05-31?from=GBP&to=EUR"
        )

    def test_custom_base_url(self):
        client = FrankfurterClient("http://localhost:8080/")
        assert client.url_for(MAY_31, Currency.GBP, Currency.EUR).startswith("http://localhost:8080/2025")

    @patch("klirr.modules.fx.client.requests.get")
    def test_get_rate(self, mock_get):
        mock_get.return_value = mock_response(payload={
            "amount": 1.0, "base": "GBP", "date": "2025-05-30", "rates": {"EUR": 1.1869},
        })
        rate = FrankfurterClient(timeout=5).get_rate(MAY_31, Currency.GBP, Currency.EUR)
        assert rate == Decimal("1.1869")
        mock_get.assert_called_once_with("https://api.frankfurter.app/2025-05-31?from=GBP&to=EUR", timeout=5)

    @patch("klirr.modules.fx.client.requests.get")
    def test_missing_target_code(self, mock_get):
        mock_get.return_value = mock_response(payload={"rates": {"USD": 1.1}})
        with pytest.raises(FoundNoExchangeRate) as exc_info:
            FrankfurterClient().get_rate(MAY_31, Currency.GBP, Currency.EUR)
        assert exc_info.value.target == Currency.EUR
        assert exc_info.value.base == Currency.GBP

    @patch("klirr.modules.fx.client.requests.get")
    def test_unquoted_currency_is_not_found(self, mock_get):
        mock_get.return_value = mock_response(status_code=404, payload={"message": "not found"})
        with pytest.raises(FoundNoExchangeRate):
            FrankfurterClient().get_rate(MAY_31, Currency.XBT, Currency.EUR)

    @patch("klirr.modules.fx.client.requests.get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("no route to host")
        with pytest.raises(NetworkError):
            FrankfurterClient().get_rate(MAY_31, Currency.GBP, Currency.EUR)

    @patch("klirr.modules.fx.client.requests.get")
    def test_server_error(self, mock_get):
        mock_get.return_value = mock_response(status_code=500)
        with pytest.raises(NetworkError):
            FrankfurterClient().get_rate(MAY_31, Currency.GBP, Currency.EUR)

    @patch("klirr.modules.fx.client.requests.get")
    def test_invalid_json(self, mock_get):
        mock_get.return_value = mock_response(json_error=ValueError("Expecting value"))
        with pytest.raises(ParseError):
            FrankfurterClient().get_rate(MAY_31, Currency.GBP, Currency.EUR)


# =============================================================================
# Cache
# =============================================================================

class TestCachedRates:
    """Tests for the persisted rate cache."""

    def test_insert_and_get(self):
        cache = CachedRates()
        cache.insert(MAY_31, Currency.GBP, Currency.EUR, Decimal("1.2"))
        assert cache.get(MAY_31, Currency.GBP, Currency.EUR) == Decimal("1.2")
        assert cache.get(MAY_31, Currency.EUR, Currency.GBP) is None

    def test_round_trip_through_store(self, store):
        cache = CachedRates()
        cache.insert(MAY_31, Currency.GBP, Currency.EUR, Decimal("1.2"))
        cache.insert(date(2025, 6, 1), Currency.USD, Currency.SEK, Decimal("9.5123"))
        save_cached_rates(store, cache)
        assert load_cached_rates(store) == cache

    def test_missing_cache_is_empty(self, store):
        assert len(load_cached_rates(store)) == 0

    def test_corrupt_cache_is_empty(self, store):
        store.save(CACHED_RATES, {"not-a-date": {"GBP": {"EUR": "1.2"}}})
        assert len(load_cached_rates(store)) == 0


# =============================================================================
# Fetcher
# =============================================================================

class TestExchangeRatesFetcher:
    """Tests for cache-first rate resolution."""

    def test_cache_hit_does_not_fetch_or_rewrite(self, store, oracle):
        """Test that a cached rate is served without touching network or file."""
        cache = CachedRates()
        cache.insert(MAY_31, Currency.GBP, Currency.EUR, Decimal("1.2"))
        save_cached_rates(store, cache)

        fetcher = ExchangeRatesFetcher(store, oracle)
        with patch.object(store, "save") as mock_save:
            rates = fetcher.fetch_for_items(Currency.EUR, [gbp_expense(on=MAY_31)])
            rate, fetched_new = fetcher.load_else_fetch(MAY_31, Currency.GBP, Currency.EUR)

        assert rates.rates[Currency.GBP] == Decimal("1.2")
        assert (rate, fetched_new) == (Decimal("1.2"), False)
        oracle.get_rate.assert_not_called()
        mock_save.assert_not_called()

    def test_cache_miss_fetches_and_persists(self, store, oracle):
        fetcher = ExchangeRatesFetcher(store, oracle)
        rates = fetcher.fetch_for_items(Currency.EUR, [gbp_expense(on=MAY_31)])

        assert rates.rates[Currency.GBP] == Decimal("1.15")
        oracle.get_rate.assert_called_once_with(MAY_31, Currency.GBP, Currency.EUR)
        assert load_cached_rates(store).get(MAY_31, Currency.GBP, Currency.EUR) == Decimal("1.15")

    def test_second_call_makes_no_network_calls(self, store, oracle):
        items = [gbp_expense(on=MAY_31), gbp_expense(name="Taxi", on=date(2025, 6, 2))]
        ExchangeRatesFetcher(store, oracle).fetch_for_items(Currency.EUR, items)
        assert oracle.get_rate.call_count == 2

        oracle.get_rate.reset_mock()
        ExchangeRatesFetcher(store, oracle).fetch_for_items(Currency.EUR, items)
        oracle.get_rate.assert_not_called()

    def test_target_currency_needs_no_rate(self, store, oracle):
        item = Item("Lunch", Decimal("25"), Currency.EUR, Decimal("1"), MAY_31)
        rates = ExchangeRatesFetcher(store, oracle).fetch_for_items(Currency.EUR, [item])
        assert rates.rates[Currency.EUR] == Decimal(1)
        oracle.get_rate.assert_not_called()
        assert not store.exists(CACHED_RATES)

    def test_cache_write_failure_is_a_warning(self, store, oracle, caplog):
        fetcher = ExchangeRatesFetcher(store, oracle)
        with patch.object(store, "save", side_effect=StorageWriteError("cache", "disk full")):
            rates = fetcher.fetch_for_items(Currency.EUR, [gbp_expense(on=MAY_31)])
        assert rates.rates[Currency.GBP] == Decimal("1.15")
        assert "Failed to save exchange rate cache" in caplog.text

    def test_oracle_errors_propagate(self, store, oracle):
        oracle.get_rate.side_effect = FoundNoExchangeRate(Currency.EUR, Currency.XBT)
        item = Item("Coin", Decimal("1"), Currency.XBT, Decimal("1"), MAY_31)
        with pytest.raises(FoundNoExchangeRate):
            ExchangeRatesFetcher(store, oracle).fetch_for_items(Currency.EUR, [item])

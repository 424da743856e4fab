#!/usr/bin/env python3
"""
Unit Tests for Storage

Tests the YAML file store and loading/saving the dataset.
"""

import pytest

from klirr.common.errors import (
    FileNotFound,
    InvalidData,
    InvalidNetDays,
    PeriodKindMismatch,
    RecordsOffMustNotContainOffsetPeriod,
    StorageReadError,
)
from klirr.common.models import (
    CompanyInformation,
    Data,
    Month,
    MonthHalf,
    PaymentInformation,
    PaymentTerms,
    ProtoInvoiceInfo,
    ServiceFees,
    YearAndMonth,
    YearMonthAndFortnight,
)
from klirr.common.storage import YamlFileStore
from klirr.common.storage.backend import DATA_KEYS, INVOICE_INFO, PAYMENT as PAYMENT_KEY, VENDOR
from klirr.modules.data import load_data, sample_data, sample_data_monthly, save_data

from tests.fixtures.klirr import CLIENT, PAYMENT, VENDOR as VENDOR_INFO, monthly_data


class TestYamlFileStore:
    """Tests for the one-file-per-key store."""

    def test_save_and_load(self, store):
        store.save("thing", {"name": "Åsa", "values": [1, 2]})
        assert store.load("thing") == {"name": "Åsa", "values": [1, 2]}

    def test_file_is_human_readable_yaml(self, store):
        store.save("thing", {"name": "Åsa"})
        assert store.path_for("thing").read_text(encoding="utf-8") == "name: Åsa\n"

    def test_creates_directory(self, tmp_path):
        nested = YamlFileStore(tmp_path / "a" / "b")
        nested.save("thing", {"x": 1})
        assert nested.exists("thing")

    def test_missing_file_raises(self, store):
        with pytest.raises(FileNotFound):
            store.load("missing")

    def test_corrupt_yaml_raises(self, store):
        store.base_path.mkdir(parents=True)
        store.path_for("broken").write_text("a: [unclosed\n", encoding="utf-8")
        with pytest.raises(StorageReadError):
            store.load("broken")

    def test_keys(self, store):
        assert store.keys() == []
        store.save("b", 1)
        store.save("a", 2)
        assert store.keys() == ["a", "b"]


class TestRecordRoundTrips:
    """Tests that every record kind survives a save/load cycle."""

    def test_company(self, store):
        store.save(VENDOR, VENDOR_INFO.to_dict())
        assert CompanyInformation.from_dict(store.load(VENDOR)) == VENDOR_INFO

    def test_company_with_second_street_line(self, store):
        store.save("client", CLIENT.to_dict())
        assert CompanyInformation.from_dict(store.load("client")) == CLIENT

    def test_payment(self, store):
        store.save("payment", PAYMENT.to_dict())
        assert PaymentInformation.from_dict(store.load("payment")) == PAYMENT

    def test_service_fees(self, store):
        fees = monthly_data().service_fees
        store.save("service_fees", fees.to_dict())
        assert ServiceFees.from_dict(store.load("service_fees")) == fees

    def test_invoice_info(self, store):
        info = sample_data_monthly().information
        store.save(INVOICE_INFO, info.to_dict())
        restored = ProtoInvoiceInfo.from_dict(store.load(INVOICE_INFO))
        assert restored.offset == info.offset
        assert restored.emphasize_color_hex == info.emphasize_color_hex
        assert restored.footer_text == info.footer_text

    @pytest.mark.parametrize("make_data", [sample_data, sample_data_monthly, monthly_data])
    def test_whole_dataset(self, store, make_data):
        data = make_data()
        save_data(store, data)
        restored = load_data(store)
        assert restored.vendor == data.vendor
        assert restored.client == data.client
        assert restored.payment_info == data.payment_info
        assert restored.service_fees == data.service_fees
        assert restored.information.offset == data.information.offset
        assert restored.expensed_periods.periods == data.expensed_periods.periods

    def test_every_data_key_written(self, store):
        save_data(store, sample_data())
        assert sorted(store.keys()) == sorted(DATA_KEYS)


class TestLoadValidation:
    """Tests for invariants checked when loading."""

    def test_missing_expenses_file_is_empty_ledger(self, data_store):
        data_store.path_for("expenses").unlink()
        assert len(load_data(data_store).expensed_periods) == 0

    def test_offset_in_periods_off_rejected(self, store):
        data = monthly_data()
        save_data(store, data)
        raw = store.load(INVOICE_INFO)
        raw["record_of_periods_off"] = ["2025-01"]
        store.save(INVOICE_INFO, raw)
        with pytest.raises(RecordsOffMustNotContainOffsetPeriod):
            load_data(store)

    def test_mixed_period_kinds_rejected(self, store):
        data = monthly_data(periods_off=[YearMonthAndFortnight(2025, Month.MARCH, MonthHalf.FIRST)])
        with pytest.raises(PeriodKindMismatch):
            save_data(store, data)

    def test_malformed_record_rejected(self, data_store):
        data_store.save(VENDOR, {"company_name": "No address"})
        with pytest.raises(InvalidData):
            load_data(data_store)

    def test_validate_returns_self(self):
        data = monthly_data(periods_off=[YearAndMonth(2025, Month.MARCH)])
        assert isinstance(data.validate(), Data)

    @pytest.mark.parametrize("net", [0, 32, 365, -1, True, "30"])
    def test_invalid_net_days_rejected(self, data_store, net):
        data_store.save(PAYMENT_KEY, {**PAYMENT.to_dict(), "terms": {"net": net}})
        with pytest.raises(InvalidNetDays):
            load_data(data_store)


class TestPaymentTerms:
    """Tests for net payment terms."""

    @pytest.mark.parametrize("days", [1, 30, 31])
    def test_valid_days(self, days):
        assert PaymentTerms.net(days).net_days == days

    @pytest.mark.parametrize("days", [0, 32, 365])
    def test_days_outside_month_range(self, days):
        with pytest.raises(InvalidNetDays):
            PaymentTerms.net(days)

    def test_str(self):
        assert str(PaymentTerms.net(14)) == "Net 14"

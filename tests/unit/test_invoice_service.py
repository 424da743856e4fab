#!/usr/bin/env python3
"""
Unit Tests for the Invoice Service

Tests the load → assemble → convert → render → save pipeline with a fake
renderer and a mocked rate oracle.
"""

import os
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from klirr.common.errors import KlirrError, StorageWriteError, TargetPeriodMustHaveExpenses
from klirr.common.models import Currency
from klirr.modules.data import load_data, save_data
from klirr.modules.invoicing import InvoiceInput, InvoiceService, TargetItems, render_sample
from klirr.modules.invoicing.service import (
    SAMPLE_FILE_NAME,
    TMP_FILE_FOR_PATH_TO_PDF,
    report_pdf_path,
    save_pdf,
)
from klirr.modules.rendering import Language, Layout

from tests.fixtures.klirr import FAKE_PDF, JAN_2025, gbp_expense


@pytest.fixture
def service(data_store, renderer, oracle, tmp_path) -> InvoiceService:
    return InvoiceService(data_store, renderer, oracle, tmp_path / "invoices")


# =============================================================================
# Pipeline
# =============================================================================

class TestCreateInvoice:
    """Tests for create_invoice."""

    def test_services_invoice_saved(self, service, tmp_path):
        named_pdf = service.create_invoice(InvoiceInput(period=JAN_2025))

        expected = tmp_path / "invoices" / "2025-01-31_Nordic_Code_AB_invoice_100.pdf"
        assert named_pdf.saved_at == expected
        assert named_pdf.name == expected.name
        assert expected.read_bytes() == FAKE_PDF
        assert named_pdf.prepared.line_items.grand_total == Decimal(23000)

    def test_renderer_receives_language_and_layout(self, service, renderer):
        service.create_invoice(InvoiceInput(period=JAN_2025, language=Language.SV, layout=Layout.TEST))

        l10n, invoice, layout = renderer.calls[0]
        assert l10n.language is Language.SV
        assert invoice.information.number == 100
        assert layout is Layout.TEST

    def test_services_need_no_rates(self, service, oracle):
        service.create_invoice(InvoiceInput(period=JAN_2025))
        oracle.get_rate.assert_not_called()

    def test_expenses_converted_with_fetched_rates(self, service, data_store, oracle):
        data = load_data(data_store)
        data.expensed_periods.insert_expenses(JAN_2025, [gbp_expense(unit_price="40")])
        save_data(data_store, data)

        named_pdf = service.create_invoice(InvoiceInput(period=JAN_2025, items=TargetItems.expenses()))

        oracle.get_rate.assert_called_once_with(gbp_expense().transaction_date, Currency.GBP, Currency.EUR)
        assert named_pdf.prepared.information.number == 101
        assert named_pdf.prepared.line_items.grand_total == Decimal("46.00")
        assert named_pdf.name == "2025-01-31_Nordic_Code_AB_expenses_invoice_101.pdf"

    def test_expenses_missing_for_period(self, service, renderer):
        with pytest.raises(TargetPeriodMustHaveExpenses):
            service.create_invoice(InvoiceInput(period=JAN_2025, items=TargetItems.expenses()))
        assert renderer.calls == []

    def test_email_sent_after_render(self, data_store, renderer, oracle, tmp_path):
        email_service = MagicMock()
        service = InvoiceService(data_store, renderer, oracle, tmp_path, email_service=email_service)

        named_pdf = service.create_invoice(InvoiceInput(period=JAN_2025, email=True))

        email_service.send_invoice.assert_called_once_with(named_pdf)

    def test_email_not_sent_unless_requested(self, data_store, renderer, oracle, tmp_path):
        email_service = MagicMock()
        service = InvoiceService(data_store, renderer, oracle, tmp_path, email_service=email_service)
        service.create_invoice(InvoiceInput(period=JAN_2025))
        email_service.send_invoice.assert_not_called()

    def test_email_without_service(self, service):
        with pytest.raises(KlirrError):
            service.create_invoice(InvoiceInput(period=JAN_2025, email=True))


class TestPdfOutput:
    """Tests for writing the PDF and reporting its path."""

    def test_save_creates_parent(self, tmp_path):
        path = save_pdf(FAKE_PDF, tmp_path / "a" / "b" / "x.pdf")
        assert path.read_bytes() == FAKE_PDF

    def test_save_failure(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(StorageWriteError):
            save_pdf(FAKE_PDF, blocker / "x.pdf")

    def test_path_reported_to_tmp_file(self, service, tmp_path):
        report_file = tmp_path / "pdf-path.txt"
        with patch.dict(os.environ, {TMP_FILE_FOR_PATH_TO_PDF: str(report_file)}):
            named_pdf = service.create_invoice(InvoiceInput(period=JAN_2025))
        assert report_file.read_text(encoding="utf-8") == str(named_pdf.saved_at.resolve())

    def test_no_report_without_env(self, tmp_path):
        report_pdf_path(tmp_path / "x.pdf")
        assert list(tmp_path.iterdir()) == []

    def test_report_failure_is_a_warning(self, tmp_path, caplog):
        with patch.dict(os.environ, {TMP_FILE_FOR_PATH_TO_PDF: str(tmp_path / "missing" / "p.txt")}):
            report_pdf_path(tmp_path / "x.pdf")
        assert "Could not write PDF path" in caplog.text


# =============================================================================
# Sample
# =============================================================================

class TestSampleInvoice:
    """Tests for rendering the built-in sample."""

    def test_render_sample(self, renderer, tmp_path):
        named_pdf = render_sample(renderer, tmp_path)

        assert named_pdf.saved_at == tmp_path / SAMPLE_FILE_NAME
        assert named_pdf.prepared.information.number == 29
        assert named_pdf.prepared.line_items.grand_total == Decimal(17871)
        assert (tmp_path / SAMPLE_FILE_NAME).read_bytes() == FAKE_PDF

    def test_sample_defaults_to_home(self, renderer, tmp_path):
        with patch.object(Path, "home", return_value=tmp_path):
            named_pdf = render_sample(renderer)
        assert named_pdf.saved_at == tmp_path / SAMPLE_FILE_NAME

    def test_sample_needs_no_data_or_network(self, store, renderer, oracle, tmp_path):
        service = InvoiceService(store, renderer, oracle, tmp_path)
        named_pdf = service.create_sample_invoice(tmp_path, Language.SV)
        assert named_pdf.prepared.information.number == 29
        assert renderer.calls[0][0].language is Language.SV
        oracle.get_rate.assert_not_called()
        assert store.keys() == []

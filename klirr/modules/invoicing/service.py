#!/usr/bin/env python3
"""
INVOICING SERVICE
=================
Generates invoice PDFs from the stored dataset.

    load data ─► to_partial ─► fetch rates ─► to_typst ─► render ─► save
                                                                    │
                                                        email (optional)

Usage:
  from klirr.modules.invoicing import InvoiceService, InvoiceInput

  svc = InvoiceService(store, TypstRenderer(), FrankfurterClient(), invoices_dir)
  svc.create_invoice(InvoiceInput(period=resolve_period_alias("last")))
"""

import logging
import os
from pathlib import Path
from typing import Optional

from klirr.common.errors import KlirrError, StorageWriteError
from klirr.common.models import NamedPdf, PreparedInvoice
from klirr.common.storage import StorageBackend
from klirr.modules.data.repository import load_data
from klirr.modules.data.sample import SAMPLE_PERIOD, sample_data, sample_exchange_rates
from klirr.modules.fx import ExchangeRatesFetcher, RateOracle
from klirr.modules.rendering import InvoiceRenderer, Language, Layout, load_l10n

from .assembler import InvoiceInput, TargetItems, to_partial

logger = logging.getLogger(__name__)

TMP_FILE_FOR_PATH_TO_PDF = "TMP_FILE_FOR_PATH_TO_PDF"
SAMPLE_FILE_NAME = "klirr_sample.pdf"


def save_pdf(pdf: bytes, path: Path) -> Path:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(pdf)
    except OSError as e:
        raise StorageWriteError(path, str(e)) from e
    logger.info(f"✅ Saved invoice to {path}")
    return path


def report_pdf_path(path: Path):
    """Write the absolute PDF path to the file named by TMP_FILE_FOR_PATH_TO_PDF."""
    target = os.environ.get(TMP_FILE_FOR_PATH_TO_PDF)
    if not target:
        return
    try:
        Path(target).write_text(str(Path(path).resolve()), encoding="utf-8")
    except OSError as e:
        logger.warning(f"Could not write PDF path to {target}: {e}")


def render_to_file(
    renderer: InvoiceRenderer,
    prepared: PreparedInvoice,
    language: Language = Language.EN,
    layout: Layout = Layout.AIOO,
) -> NamedPdf:
    pdf = renderer.render(load_l10n(language), prepared, layout)
    saved_at = save_pdf(pdf, prepared.output_path)
    report_pdf_path(saved_at)
    return NamedPdf(prepared=prepared, pdf=pdf, saved_at=saved_at)


def render_sample(
    renderer: InvoiceRenderer,
    output_dir: Optional[Path] = None,
    language: Language = Language.EN,
    layout: Layout = Layout.AIOO,
) -> NamedPdf:
    """Render the built-in sample invoice, without network access."""
    output_dir = Path(output_dir) if output_dir is not None else Path.home()
    invoice_input = InvoiceInput(
        period=SAMPLE_PERIOD,
        items=TargetItems.services(),
        output_path=output_dir / SAMPLE_FILE_NAME,
        language=language,
        layout=layout,
    )
    partial = to_partial(sample_data(), invoice_input, output_dir)
    prepared = partial.to_typst(sample_exchange_rates())
    return render_to_file(renderer, prepared, language, layout)


class InvoiceService:
    """Builds, renders and optionally emails invoices."""

    def __init__(
        self,
        store: StorageBackend,
        renderer: InvoiceRenderer,
        oracle: RateOracle,
        invoices_dir: Path,
        email_service=None,
    ):
        self.store = store
        self.renderer = renderer
        self.oracle = oracle
        self.invoices_dir = Path(invoices_dir)
        self.email_service = email_service

    def prepare(self, invoice_input: InvoiceInput) -> PreparedInvoice:
        data = load_data(self.store)
        partial = to_partial(data, invoice_input, self.invoices_dir)
        fetcher = ExchangeRatesFetcher(self.store, self.oracle)
        rates = fetcher.fetch_for_items(data.payment_info.currency, partial.items.items)
        return partial.to_typst(rates)

    def create_invoice(self, invoice_input: InvoiceInput) -> NamedPdf:
        prepared = self.prepare(invoice_input)
        named_pdf = render_to_file(self.renderer, prepared, invoice_input.language, invoice_input.layout)
        if invoice_input.email:
            if self.email_service is None:
                raise KlirrError("Email requested but no email service is configured")
            self.email_service.send_invoice(named_pdf)
        return named_pdf

    def create_sample_invoice(
        self,
        output_dir: Optional[Path] = None,
        language: Language = Language.EN,
        layout: Layout = Layout.AIOO,
    ) -> NamedPdf:
        return render_sample(self.renderer, output_dir, language, layout)

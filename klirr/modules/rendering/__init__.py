"""Rendering of prepared invoices into PDFs."""

from .layout import Layout
from .localization import L10n, Language, load_l10n
from .renderer import InvoiceRenderer, TypstRenderer

__all__ = ['Layout', 'L10n', 'Language', 'load_l10n', 'InvoiceRenderer', 'TypstRenderer']

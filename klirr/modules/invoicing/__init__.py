"""
Invoicing Module
================
Invoice numbering, billable quantities and the invoice pipeline.

Usage:
    from klirr.modules.invoicing import InvoiceService, InvoiceInput

    svc = InvoiceService(store, renderer, oracle, invoices_dir)
    svc.create_invoice(InvoiceInput(period=resolve_period_alias("last")))
"""

from .assembler import InvoiceInput, TargetItems, to_partial
from .numbering import calculate_invoice_number
from .quantity import billable_quantity, quantity_in_period
from .service import InvoiceService, render_sample

__all__ = [
    'InvoiceInput', 'TargetItems', 'to_partial',
    'calculate_invoice_number',
    'billable_quantity', 'quantity_in_period',
    'InvoiceService', 'render_sample',
]

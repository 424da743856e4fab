"""Turn the persisted dataset and a target period into an invoice record.

    Data + InvoiceInput ── to_partial ──► DataWithSourceItems
                                              │ ExchangeRates
                                              ▼
                                          to_typst ──► PreparedInvoice
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from klirr.common.errors import SpecifiedOutputPathDoesNotExist
from klirr.common.models import (
    Data,
    DataWithSourceItems,
    ExpenseItems,
    HexColor,
    InvoiceInfoFull,
    Item,
    Period,
    ServiceItems,
    TimeOff,
    downcast_period,
)
from klirr.common.models.calendar import advance
from klirr.modules.rendering import Language, Layout

from .numbering import calculate_invoice_number
from .quantity import billable_quantity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetItems:
    """What to invoice: services (optionally minus time off) or expenses."""

    is_expenses: bool = False
    time_off: Optional[TimeOff] = None

    @classmethod
    def services(cls, time_off: Optional[TimeOff] = None) -> "TargetItems":
        return cls(is_expenses=False, time_off=time_off)

    @classmethod
    def expenses(cls) -> "TargetItems":
        return cls(is_expenses=True)


@dataclass(frozen=True)
class InvoiceInput:
    period: Period
    items: TargetItems = field(default_factory=TargetItems.services)
    output_path: Optional[Path] = None
    language: Language = Language.EN
    layout: Layout = Layout.AIOO
    email: bool = False


def invoice_file_name(data: Data, invoice_date, number: int, is_expenses: bool) -> str:
    vendor = data.vendor.company_name.replace(" ", "_")
    suffix = "_expenses" if is_expenses else ""
    return f"{invoice_date.isoformat()}_{vendor}{suffix}_invoice_{number}.pdf"


def resolve_output_path(
    requested: Optional[Path], invoices_dir: Path, file_name: str
) -> Path:
    if requested is None:
        return Path(invoices_dir) / file_name
    path = Path(requested).expanduser().resolve()
    if not path.parent.is_dir():
        raise SpecifiedOutputPathDoesNotExist(path)
    return path


def to_partial(data: Data, invoice_input: InvoiceInput, invoices_dir: Path) -> DataWithSourceItems:
    period = downcast_period(invoice_input.period, data.offset_period)
    invoice_date = period.to_date_end_of_period()
    due_date = advance(invoice_date, data.payment_info.terms.net_days)
    is_expenses = invoice_input.items.is_expenses

    number = calculate_invoice_number(
        data.information.offset,
        period,
        is_expenses,
        data.information.record_of_periods_off,
    )

    if is_expenses:
        items = ExpenseItems(data.expensed_periods.get(period))
    else:
        quantity = billable_quantity(
            period,
            data.service_fees,
            data.information.record_of_periods_off,
            invoice_input.items.time_off,
        )
        items = ServiceItems(
            Item(
                name=data.service_fees.name,
                unit_price=data.service_fees.unit_price,
                currency=data.payment_info.currency,
                quantity=quantity,
                transaction_date=invoice_date,
            )
        )

    output_path = resolve_output_path(
        invoice_input.output_path,
        invoices_dir,
        invoice_file_name(data, invoice_date, number, is_expenses),
    )

    information = InvoiceInfoFull(
        number=number,
        invoice_date=invoice_date,
        due_date=due_date,
        purchase_order=data.information.purchase_order,
        footer_text=data.information.footer_text,
        emphasize_color_hex=data.information.emphasize_color_hex or HexColor(),
    )
    logger.info(
        f"Invoice #{number} for {period}: {len(items.items)} "
        f"{'expense' if is_expenses else 'service'} item(s), dated {invoice_date}"
    )
    return DataWithSourceItems(
        information=information,
        vendor=data.vendor,
        client=data.client,
        payment_info=data.payment_info,
        items=items,
        output_path=output_path,
    )

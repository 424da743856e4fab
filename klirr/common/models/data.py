"""The persisted dataset and the invoice records derived from it."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from klirr.common.errors import PeriodKindMismatch
from klirr.common.models.calendar import Period
from klirr.common.models.company import CompanyInformation, PaymentInformation
from klirr.common.models.expenses import ExpensedPeriods
from klirr.common.models.invoice_info import InvoiceInfoFull, ProtoInvoiceInfo
from klirr.common.models.items import InvoicedItems, LineItemsFlat, convert_line_items
from klirr.common.models.money import ExchangeRates
from klirr.common.models.service_fees import ServiceFees


@dataclass
class Data:
    information: ProtoInvoiceInfo
    vendor: CompanyInformation
    client: CompanyInformation
    payment_info: PaymentInformation
    service_fees: ServiceFees
    expensed_periods: ExpensedPeriods = field(default_factory=ExpensedPeriods)

    @property
    def offset_period(self) -> Period:
        return self.information.offset.period

    def _stored_periods(self) -> Iterator[Period]:
        yield from self.information.record_of_periods_off
        yield from self.expensed_periods.periods

    def validate(self) -> "Data":
        """Check cross-record invariants, returns self for chaining."""
        self.information.validate()
        kind = type(self.offset_period)
        for period in self._stored_periods():
            if not isinstance(period, kind):
                raise PeriodKindMismatch(self.offset_period.kind, period.kind)
        return self


@dataclass(frozen=True)
class DataWithSourceItems:
    """An invoice with everything resolved except currency conversion."""

    information: InvoiceInfoFull
    vendor: CompanyInformation
    client: CompanyInformation
    payment_info: PaymentInformation
    items: InvoicedItems
    output_path: Path

    @property
    def is_expenses(self) -> bool:
        return self.items.is_expenses

    def to_typst(self, rates: ExchangeRates) -> "PreparedInvoice":
        return PreparedInvoice(
            information=self.information,
            vendor=self.vendor,
            client=self.client,
            payment_info=self.payment_info,
            line_items=convert_line_items(self.items, rates),
            output_path=self.output_path,
        )


@dataclass(frozen=True)
class PreparedInvoice:
    information: InvoiceInfoFull
    vendor: CompanyInformation
    client: CompanyInformation
    payment_info: PaymentInformation
    line_items: LineItemsFlat
    output_path: Path

    def to_typst_dict(self) -> dict:
        return {
            "information": self.information.to_typst_dict(),
            "vendor": self.vendor.to_dict(),
            "client": self.client.to_dict(),
            "payment_info": self.payment_info.to_dict(),
            "line_items": self.line_items.to_typst_dict(),
        }


@dataclass(frozen=True)
class NamedPdf:
    """A rendered invoice together with the file it was written to."""

    prepared: PreparedInvoice
    pdf: bytes = field(repr=False)
    saved_at: Path

    @property
    def name(self) -> str:
        return self.saved_at.name

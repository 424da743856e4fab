# klirr Test Fixtures
# Used by test_*.py under tests/unit

from datetime import date
from decimal import Decimal
from pathlib import Path

from klirr.common.models import (
    Cadence,
    CompanyInformation,
    Currency,
    Data,
    ExchangeRates,
    ExpensedPeriods,
    Item,
    Month,
    PaymentInformation,
    PaymentTerms,
    PostalAddress,
    PreparedInvoice,
    ProtoInvoiceInfo,
    Rate,
    RecordOfPeriodsOff,
    ServiceFees,
    TimestampedInvoiceNumber,
    YearAndMonth,
)
from klirr.modules.invoicing import InvoiceInput, to_partial
from klirr.modules.rendering import InvoiceRenderer

FAKE_PDF = b"%PDF-1.7\n% klirr test\n"

JAN_2025 = YearAndMonth(2025, Month.JANUARY)

VENDOR = CompanyInformation(
    company_name="Nordic Code AB",
    contact_person="Astrid Berg",
    organisation_number="556677-8899",
    vat_number="SE556677889901",
    postal_address=PostalAddress(
        street_line_1="Drottninggatan 1",
        zip="111 51",
        city="Stockholm",
        country="Sweden",
    ),
)

CLIENT = CompanyInformation(
    company_name="Acme Corp",
    contact_person="Wile E. Coyote",
    organisation_number="12-3456789",
    vat_number="US123456789",
    postal_address=PostalAddress(
        street_line_1="1 Desert Road",
        street_line_2="Suite 9",
        zip="85001",
        city="Phoenix",
        country="USA",
    ),
)

PAYMENT = PaymentInformation(
    iban="SE35 5000 0000 0549 1000 0003",
    bank_name="Nordbank",
    bic="NBSESESS",
    currency=Currency.EUR,
    terms=PaymentTerms.net(30),
)


def monthly_data(offset=100, offset_period=JAN_2025, unit_price="1000", periods_off=()) -> Data:
    """Monthly cadence, priced per day, invoicing in EUR."""
    return Data(
        information=ProtoInvoiceInfo(
            offset=TimestampedInvoiceNumber(offset, offset_period),
            record_of_periods_off=RecordOfPeriodsOff(list(periods_off)),
            purchase_order="PO-42",
        ),
        vendor=VENDOR,
        client=CLIENT,
        payment_info=PAYMENT,
        service_fees=ServiceFees("Consulting", Rate.daily(Decimal(unit_price)), Cadence.MONTHLY),
        expensed_periods=ExpensedPeriods(),
    )


def gbp_expense(name="Train ticket", unit_price="40", quantity="1", on=date(2025, 1, 20)) -> Item:
    return Item(name, Decimal(unit_price), Currency.GBP, Decimal(quantity), on)


def prepared_invoice(output_path: Path) -> PreparedInvoice:
    """A prepared services invoice for January 2025, saved at ``output_path``."""
    invoice_input = InvoiceInput(period=JAN_2025, output_path=output_path)
    partial = to_partial(monthly_data(), invoice_input, output_path.parent)
    return partial.to_typst(ExchangeRates(Currency.EUR))


class FakeRenderer(InvoiceRenderer):
    """Records what it was asked to render and returns fixed bytes."""

    def __init__(self):
        self.calls = []

    def render(self, l10n, invoice, layout) -> bytes:
        self.calls.append((l10n, invoice, layout))
        return FAKE_PDF

"""Sample dataset used by ``data init`` and the sample invoice."""

from decimal import Decimal

from klirr.common.models import (
    Cadence,
    CompanyInformation,
    Currency,
    Data,
    ExchangeRates,
    ExpensedPeriods,
    HexColor,
    Item,
    Month,
    MonthHalf,
    PaymentInformation,
    PaymentTerms,
    PostalAddress,
    ProtoInvoiceInfo,
    Rate,
    RecordOfPeriodsOff,
    ServiceFees,
    TimestampedInvoiceNumber,
    YearAndMonth,
    YearMonthAndFortnight,
)
from klirr.common.models.invoice_info import DEFAULT_FOOTER_TEXT

SAMPLE_PERIOD = YearMonthAndFortnight(2025, Month.JULY, MonthHalf.FIRST)
SAMPLE_COLOR = HexColor("#8b008b")


def sample_vendor() -> CompanyInformation:
    return CompanyInformation(
        company_name="Lupin et Associés",
        contact_person="Arsène Lupin",
        organisation_number="7418529-3012",
        vat_number="FR74185293012",
        postal_address=PostalAddress(
            street_line_1="5 Avenue Henri-Martin",
            street_line_2="Appartement 24",
            zip="75116",
            city="Paris",
            country="France",
        ),
    )


def sample_client() -> CompanyInformation:
    return CompanyInformation(
        company_name="Holmes Ltd",
        contact_person="Sherlock Holmes",
        organisation_number="9876543-2101",
        vat_number="GB987654321",
        postal_address=PostalAddress(
            street_line_1="221B Baker Street",
            zip="NW1 6XE",
            city="London",
            country="England",
        ),
    )


def sample_payment_info() -> PaymentInformation:
    return PaymentInformation(
        iban="FR76 3000 6000 0112 3456 7890 189",
        bank_name="Banque de Paris",
        bic="BNPAFRPP",
        currency=Currency.EUR,
        terms=PaymentTerms.net(30),
    )


def sample_expenses(period) -> ExpensedPeriods:
    ledger = ExpensedPeriods()
    end = period.to_date_end_of_period()
    ledger.insert_expenses(
        period,
        [
            Item("Coffee", Decimal("4"), Currency.GBP, Decimal("2"), end),
            Item("Sandwich", Decimal("7"), Currency.GBP, Decimal("1"), end),
            Item("Lunch", Decimal("25"), Currency.EUR, Decimal("1"), end),
        ],
    )
    return ledger


def sample_data_monthly() -> Data:
    """Monthly cadence, daily rate, months as periods."""
    offset_period = YearAndMonth(2024, Month.DECEMBER)
    return Data(
        information=ProtoInvoiceInfo(
            offset=TimestampedInvoiceNumber(237, offset_period),
            record_of_periods_off=RecordOfPeriodsOff(),
            purchase_order="PO-12345",
            footer_text=DEFAULT_FOOTER_TEXT,
            emphasize_color_hex=SAMPLE_COLOR,
        ),
        vendor=sample_vendor(),
        client=sample_client(),
        payment_info=sample_payment_info(),
        service_fees=ServiceFees("Agreed Consulting Fees", Rate.daily(Decimal("777")), Cadence.MONTHLY),
        expensed_periods=sample_expenses(YearAndMonth(2025, Month.JULY)),
    )


def sample_data() -> Data:
    """Bi-weekly cadence, daily rate, fortnights as periods."""
    offset_period = YearMonthAndFortnight(2025, Month.JANUARY, MonthHalf.FIRST)
    return Data(
        information=ProtoInvoiceInfo(
            offset=TimestampedInvoiceNumber(17, offset_period),
            record_of_periods_off=RecordOfPeriodsOff(),
            purchase_order="PO-12345",
            footer_text=DEFAULT_FOOTER_TEXT,
            emphasize_color_hex=SAMPLE_COLOR,
        ),
        vendor=sample_vendor(),
        client=sample_client(),
        payment_info=sample_payment_info(),
        service_fees=ServiceFees("Agreed Consulting Fees", Rate.daily(Decimal("777")), Cadence.BI_WEEKLY),
        expensed_periods=sample_expenses(SAMPLE_PERIOD),
    )


def sample_exchange_rates() -> ExchangeRates:
    """Fixed rates so the sample renders without network access."""
    return ExchangeRates(Currency.EUR, {Currency.GBP: Decimal("1.17")})

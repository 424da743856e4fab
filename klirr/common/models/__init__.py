"""Shared data models across modules."""

from .calendar import (
    Granularity,
    Month,
    MonthHalf,
    Period,
    YearAndMonth,
    YearMonthAndFortnight,
    downcast_period,
    parse_period,
    resolve_period_alias,
    working_days,
)
from .company import CompanyInformation, PaymentInformation, PaymentTerms, PostalAddress
from .data import Data, DataWithSourceItems, NamedPdf, PreparedInvoice
from .expenses import ExpensedPeriods
from .invoice_info import (
    HexColor,
    InvoiceInfoFull,
    ProtoInvoiceInfo,
    RecordOfPeriodsOff,
    TimestampedInvoiceNumber,
)
from .items import (
    ExpenseItems,
    Item,
    ItemConvertedIntoTargetCurrency,
    LineItemsFlat,
    ServiceItems,
    parse_expense_item,
)
from .money import Currency, ExchangeRates
from .service_fees import Cadence, Rate, ServiceFees, TimeOff

__all__ = [
    'Granularity', 'Month', 'MonthHalf', 'Period', 'YearAndMonth',
    'YearMonthAndFortnight', 'downcast_period', 'parse_period',
    'resolve_period_alias', 'working_days',
    'CompanyInformation', 'PaymentInformation', 'PaymentTerms', 'PostalAddress',
    'Data', 'DataWithSourceItems', 'NamedPdf', 'PreparedInvoice',
    'ExpensedPeriods',
    'HexColor', 'InvoiceInfoFull', 'ProtoInvoiceInfo', 'RecordOfPeriodsOff',
    'TimestampedInvoiceNumber',
    'ExpenseItems', 'Item', 'ItemConvertedIntoTargetCurrency', 'LineItemsFlat',
    'ServiceItems', 'parse_expense_item',
    'Currency', 'ExchangeRates',
    'Cadence', 'Rate', 'ServiceFees', 'TimeOff',
]

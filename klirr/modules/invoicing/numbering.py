"""Invoice numbering.

Numbers are derived, never stored: the offset (number, period) anchors the
sequence, every elapsed period adds one, every recorded period off after
the anchor takes one back, and an expenses invoice sits one above the
services invoice of the same period.
"""

from typing import Iterable

from klirr.common.errors import RecordsOffMustNotContainOffsetPeriod
from klirr.common.models import Period, TimestampedInvoiceNumber
from klirr.common.models.invoice_info import validate_invoice_number


def calculate_invoice_number(
    offset: TimestampedInvoiceNumber,
    target: Period,
    is_expenses: bool,
    periods_off: Iterable[Period],
) -> int:
    periods_off = list(periods_off)
    if offset.period in periods_off:
        raise RecordsOffMustNotContainOffsetPeriod(offset.period)

    elapsed = target.elapsed_periods_since(offset.period)
    skipped = sum(1 for p in periods_off if offset.period < p <= target)

    number = offset.offset + elapsed - skipped
    if is_expenses:
        number += 1
    return validate_invoice_number(number)

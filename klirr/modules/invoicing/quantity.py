"""Billable quantity per period."""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from klirr.common.errors import (
    CannotInvoiceMonthWhenBiWeekly,
    GranularityTooCoarse,
    InvalidGranularityForTimeOff,
    InvalidQuantity,
    TargetPeriodInPeriodsOff,
)
from klirr.common.models import Cadence, Granularity, Period, ServiceFees, TimeOff, working_days
from klirr.common.models.service_fees import time_off_quantity

logger = logging.getLogger(__name__)

# TODO: make configurable per service fee once part-time rates are supported
HOURS_PER_DAY = 8


def quantity_in_period(
    period: Period,
    granularity: Granularity,
    cadence: Cadence,
    periods_off: Iterable[Period],
) -> Decimal:
    """Units of ``granularity`` in ``period`` for a full-time engagement."""
    if period in list(periods_off):
        raise TargetPeriodInPeriodsOff(period)
    if granularity > period.max_granularity:
        raise GranularityTooCoarse(granularity, period.max_granularity, period)

    if granularity == Granularity.MONTH:
        if cadence is Cadence.BI_WEEKLY:
            raise CannotInvoiceMonthWhenBiWeekly()
        return Decimal(1)
    if granularity == Granularity.FORTNIGHT:
        return Decimal(2) if cadence is Cadence.MONTHLY else Decimal(1)
    if granularity == Granularity.DAY:
        return Decimal(working_days(period))
    return Decimal(HOURS_PER_DAY * working_days(period))


def billable_quantity(
    period: Period,
    service_fees: ServiceFees,
    periods_off: Iterable[Period],
    time_off: Optional[TimeOff] = None,
) -> Decimal:
    """Full-time quantity minus time off, in the service's granularity."""
    if time_off is not None and time_off.granularity != service_fees.granularity:
        raise InvalidGranularityForTimeOff(time_off.granularity, service_fees.granularity)

    full = quantity_in_period(period, service_fees.granularity, service_fees.cadence, periods_off)
    billable = full - time_off_quantity(time_off)
    if billable < 0:
        raise InvalidQuantity(billable, f"time off exceeds the {full} billable units in {period}")
    logger.debug(f"Billable in {period}: {full} - {time_off_quantity(time_off)} = {billable}")
    return billable

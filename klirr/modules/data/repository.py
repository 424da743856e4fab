"""Load and save the invoicing dataset through a StorageBackend."""

import logging

from klirr.common.errors import FileNotFound
from klirr.common.models import (
    CompanyInformation,
    Data,
    ExpensedPeriods,
    PaymentInformation,
    ProtoInvoiceInfo,
    ServiceFees,
)
from klirr.common.storage import StorageBackend
from klirr.common.storage.backend import (
    CLIENT,
    EXPENSES,
    INVOICE_INFO,
    PAYMENT,
    SERVICE_FEES,
    VENDOR,
)

logger = logging.getLogger(__name__)


def load_data(store: StorageBackend) -> Data:
    """Load every record and validate the aggregate."""
    try:
        expenses = ExpensedPeriods.from_dict(store.load(EXPENSES))
    except FileNotFound:
        logger.debug("No expenses recorded yet")
        expenses = ExpensedPeriods()
    data = Data(
        information=ProtoInvoiceInfo.from_dict(store.load(INVOICE_INFO)),
        vendor=CompanyInformation.from_dict(store.load(VENDOR)),
        client=CompanyInformation.from_dict(store.load(CLIENT)),
        payment_info=PaymentInformation.from_dict(store.load(PAYMENT)),
        service_fees=ServiceFees.from_dict(store.load(SERVICE_FEES)),
        expensed_periods=expenses,
    )
    return data.validate()


def save_data(store: StorageBackend, data: Data):
    data.validate()
    store.save(INVOICE_INFO, data.information.to_dict())
    store.save(VENDOR, data.vendor.to_dict())
    store.save(CLIENT, data.client.to_dict())
    store.save(PAYMENT, data.payment_info.to_dict())
    store.save(SERVICE_FEES, data.service_fees.to_dict())
    store.save(EXPENSES, data.expensed_periods.to_dict())

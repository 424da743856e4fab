"""Administration of the stored invoicing dataset."""

import logging
from enum import Enum
from typing import Iterable, List

from klirr.common.editor import open_in_editor
from klirr.common.errors import FileNotFound
from klirr.common.models import Data, Item, Period, downcast_period
from klirr.common.models.expenses import validate_cadence_for_expenses
from klirr.common.storage import YamlFileStore
from klirr.common.storage.backend import (
    CLIENT,
    DATA_KEYS,
    INVOICE_INFO,
    PAYMENT,
    SERVICE_FEES,
    VENDOR,
)

from .repository import load_data, save_data
from .sample import sample_data

logger = logging.getLogger(__name__)


class DataEditSelector(str, Enum):
    ALL = "all"
    VENDOR = "vendor"
    CLIENT = "client"
    INFORMATION = "information"
    PAYMENT_INFO = "payment_info"
    SERVICE_FEES = "service_fees"

    def __str__(self) -> str:
        return self.value

    @property
    def keys(self) -> List[str]:
        if self is DataEditSelector.ALL:
            return [VENDOR, CLIENT, INVOICE_INFO, PAYMENT, SERVICE_FEES]
        return [_SELECTOR_KEYS[self]]


_SELECTOR_KEYS = {
    DataEditSelector.VENDOR: VENDOR,
    DataEditSelector.CLIENT: CLIENT,
    DataEditSelector.INFORMATION: INVOICE_INFO,
    DataEditSelector.PAYMENT_INFO: PAYMENT,
    DataEditSelector.SERVICE_FEES: SERVICE_FEES,
}


class DataService:
    """Init, inspect and update the records an invoice is built from."""

    def __init__(self, store: YamlFileStore):
        self.store = store

    def init(self) -> Data:
        """Write the sample dataset, to be edited afterwards."""
        data = sample_data()
        save_data(self.store, data)
        logger.info(f"✅ Sample data written to {self.store.base_path}")
        return data

    def load(self) -> Data:
        return load_data(self.store)

    def validate(self) -> Data:
        data = self.load()
        logger.info(
            f"✅ Data valid: {data.vendor.company_name} invoicing {data.client.company_name}, "
            f"offset #{data.information.offset.offset} at {data.offset_period}"
        )
        return data

    def dump(self) -> str:
        sections = []
        for key in DATA_KEYS:
            try:
                text = self.store.read_text(key)
            except FileNotFound:
                continue
            sections.append(f"# {key}\n{text}")
        return "\n".join(sections)

    def edit(self, selector: DataEditSelector) -> Data:
        for key in DataEditSelector(selector).keys:
            path = self.store.path_for(key)
            if not path.exists():
                raise FileNotFound(path)
            open_in_editor(path)
        return self.validate()

    def record_period_off(self, period: Period) -> Data:
        data = self.load()
        period = downcast_period(period, data.offset_period)
        data.information.insert_period_off(period)
        save_data(self.store, data)
        logger.info(f"✅ Recorded {period} as a period off")
        return data

    def record_expenses(self, period: Period, items: Iterable[Item]) -> Data:
        items = list(items)
        data = self.load()
        validate_cadence_for_expenses(data.service_fees.cadence, period)
        data.expensed_periods.insert_expenses(period, items)
        save_data(self.store, data)
        logger.info(f"✅ Recorded {len(items)} expense item(s) for {period}")
        return data

"""Abstract storage backend."""
from abc import ABC, abstractmethod
from typing import Any, List

# Stable logical names of stored records
VENDOR = 'vendor'
CLIENT = 'client'
PAYMENT = 'payment'
SERVICE_FEES = 'service_fees'
INVOICE_INFO = 'invoice_info'
EXPENSES = 'expenses'
EMAIL_SETTINGS = 'email_settings'
CACHED_RATES = 'cached_rates'

DATA_KEYS = [VENDOR, CLIENT, PAYMENT, SERVICE_FEES, INVOICE_INFO, EXPENSES]


class StorageBackend(ABC):
    """Abstract base class for key/value record storage."""

    @abstractmethod
    def load(self, key: str) -> Any:
        """Load the record stored under key."""
        pass

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous record."""
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Whether a record is stored under key."""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        """List stored keys."""
        pass

"""
Data Module
===========
Persisted vendor, client, payment, service fee, invoice info and expense
records.

Usage:
    from klirr.modules.data import DataService

    svc = DataService(YamlFileStore(config.data_path))
    svc.init()
    svc.record_period_off(parse_period("2025-07-first-half"))
"""

from .repository import load_data, save_data
from .sample import sample_data, sample_data_monthly
from .service import DataEditSelector, DataService

__all__ = ['load_data', 'save_data', 'sample_data', 'sample_data_monthly', 'DataEditSelector', 'DataService']

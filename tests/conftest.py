"""
klirr Test Configuration

Shared fixtures for all tests.
"""
import os
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from klirr.common import config as config_module
from klirr.common.storage import YamlFileStore
from klirr.modules.data import save_data
from klirr.modules.fx import RateOracle

from tests.fixtures.klirr import FakeRenderer, monthly_data


# =============================================================================
# FIXTURES: Environment
# =============================================================================

@pytest.fixture(autouse=True)
def clean_env(tmp_path):
    """Isolate tests from the user's klirr env vars, config file and cached config."""
    with patch.dict(os.environ, {"KLIRR_CONFIG_PATH": str(tmp_path / "no-config.yaml")}):
        for key in list(os.environ):
            if key.startswith("KLIRR__") or key in ("APP_EMAIL_ENCRYPTION_PASSWORD", "TMP_FILE_FOR_PATH_TO_PDF"):
                del os.environ[key]
        config_module._config = None
        yield
        config_module._config = None


@pytest.fixture
def passphrase_env():
    """Encryption passphrase supplied via the environment."""
    with patch.dict(os.environ, {"APP_EMAIL_ENCRYPTION_PASSWORD": "correct horse battery"}):
        yield "correct horse battery"


# =============================================================================
# FIXTURES: Storage
# =============================================================================

@pytest.fixture
def store(tmp_path) -> YamlFileStore:
    """Empty YAML store under tmp_path."""
    return YamlFileStore(tmp_path / "data")


@pytest.fixture
def data_store(store) -> YamlFileStore:
    """Store holding the monthly January 2025 dataset."""
    save_data(store, monthly_data())
    return store


# =============================================================================
# FIXTURES: Collaborators
# =============================================================================

@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def oracle():
    """Rate oracle quoting 1.15 for every pair."""
    mock = MagicMock(spec=RateOracle)
    mock.get_rate.return_value = Decimal("1.15")
    return mock

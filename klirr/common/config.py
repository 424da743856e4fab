"""Configuration and logging setup.

Loads from YAML config file with environment variable overrides.
Pattern: KLIRR__{SECTION}__{KEY} overrides nested YAML keys.
Example: KLIRR__FX__TIMEOUT_S=20
"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, Field

APP_NAME = "klirr"
ENV_PREFIX = "KLIRR"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


class FxConfig(BaseModel):
    base_url: str = "https://api.frankfurter.app"
    timeout_s: float = Field(default=10, gt=0)


class EmailConfig(BaseModel):
    smtp_port: int = 465
    timeout_s: float = Field(default=30, gt=0)


class RenderingConfig(BaseModel):
    typst_binary: str = "typst"
    font_dirs: list[str] = []


class KlirrConfig(BaseModel):
    data_dir: Optional[str] = None
    fx: FxConfig = FxConfig()
    email: EmailConfig = EmailConfig()
    rendering: RenderingConfig = RenderingConfig()

    @property
    def data_path(self) -> Path:
        """Directory holding one YAML file per stored record."""
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return Path(user_data_dir(APP_NAME)) / "data"

    @property
    def invoices_path(self) -> Path:
        """Default destination of rendered invoices."""
        return self.data_path / "invoices"


def _apply_env_overrides(config_dict: dict, prefix: str = ENV_PREFIX) -> dict:
    """Apply environment variable overrides to config dict.

    Pattern: KLIRR__SECTION__KEY=value maps to config[section][key] = value
    """
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}__"):
            continue
        parts = key[len(prefix) + 2 :].lower().split("__")
        target = config_dict
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        if value.lower() in ("true", "false"):
            value = value.lower() == "true"
        elif value.isdigit():
            value = int(value)
        target[parts[-1]] = value
    return config_dict


def default_config_path() -> Path:
    return Path(user_config_dir(APP_NAME)) / "config.yaml"


def load_config(config_path: Optional[str] = None) -> KlirrConfig:
    """Load configuration from YAML file with env overrides.

    Priority: env vars > YAML file > defaults
    """
    config_dict = {}

    if config_path is None:
        config_path = os.getenv("KLIRR_CONFIG_PATH", str(default_config_path()))
    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            config_dict = yaml.safe_load(f) or {}

    config_dict = _apply_env_overrides(config_dict)
    return KlirrConfig(**config_dict)


_config: Optional[KlirrConfig] = None


def get_config() -> KlirrConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(config_path: Optional[str] = None) -> KlirrConfig:
    global _config
    _config = load_config(config_path)
    return _config


def setup_logging(verbose: bool = False):
    """Configure root logging, LOG_LEVEL decides unless verbose is set."""
    requested = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(requested)
    unknown = not verbose and not isinstance(level, int)
    if verbose:
        level = logging.DEBUG
    elif unknown:
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if unknown:
        logger.warning(f"Unknown LOG_LEVEL '{requested}', using INFO")

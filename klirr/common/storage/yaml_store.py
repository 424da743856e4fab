"""YAML file storage, one human-editable file per key."""

import logging
from pathlib import Path
from typing import Any, List

import yaml

from klirr.common.errors import FileNotFound, StorageReadError, StorageWriteError

from .backend import StorageBackend

logger = logging.getLogger(__name__)


class YamlFileStore(StorageBackend):
    """Stores each record as ``<base_path>/<key>.yaml``."""

    suffix = '.yaml'

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)

    def path_for(self, key: str) -> Path:
        return self.base_path / f"{key}{self.suffix}"

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

    def keys(self) -> List[str]:
        if not self.base_path.exists():
            return []
        return sorted(p.stem for p in self.base_path.glob(f"*{self.suffix}"))

    def read_text(self, key: str) -> str:
        path = self.path_for(key)
        if not path.exists():
            raise FileNotFound(path)
        try:
            return path.read_text(encoding='utf-8')
        except OSError as e:
            raise StorageReadError(path, str(e)) from e

    def load(self, key: str) -> Any:
        path = self.path_for(key)
        text = self.read_text(key)
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise StorageReadError(path, str(e)) from e

    def save(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(value, f, sort_keys=False, allow_unicode=True)
        except (OSError, yaml.YAMLError) as e:
            raise StorageWriteError(path, str(e)) from e
        logger.debug(f"Saved {key} to {path}")

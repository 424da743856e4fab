"""Hand records to the user's $EDITOR."""

import logging
import os
import subprocess
import tempfile
from pathlib import Path
from typing import Any

import yaml

from klirr.common.errors import StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = "vi"


def editor_command() -> str:
    return os.environ.get("VISUAL") or os.environ.get("EDITOR") or DEFAULT_EDITOR


def open_in_editor(path: Path):
    """Block until the editor exits."""
    cmd = [*editor_command().split(), str(path)]
    logger.debug(f"Opening {path} with {cmd[0]}")
    try:
        subprocess.run(cmd, check=True)
    except FileNotFoundError as e:
        raise StorageWriteError(path, f"editor '{cmd[0]}' not found") from e
    except subprocess.CalledProcessError as e:
        raise StorageWriteError(path, f"editor exited with status {e.returncode}") from e


def edit_yaml_value(value: Any, name: str = "value") -> Any:
    """Round-trip ``value`` through a temporary YAML file opened in the editor."""
    with tempfile.TemporaryDirectory(prefix="klirr-edit-") as tmp:
        path = Path(tmp) / f"{name}.yaml"
        path.write_text(yaml.safe_dump(value, sort_keys=False, allow_unicode=True), encoding="utf-8")
        open_in_editor(path)
        try:
            return yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise StorageReadError(path, str(e)) from e

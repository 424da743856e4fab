"""PDF rendering of prepared invoices with Typst."""

import json
import logging
import shutil
import subprocess
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from klirr.common.errors import RenderError
from klirr.common.models import PreparedInvoice

from .layout import Layout
from .localization import L10n

logger = logging.getLogger(__name__)

MAIN_FILE = "main.typ"
DATA_FILE = "invoice.json"
L10N_FILE = "l10n.json"
PDF_FILE = "invoice.pdf"


class InvoiceRenderer(ABC):
    """Turns a prepared invoice into PDF bytes."""

    @abstractmethod
    def render(self, l10n: L10n, invoice: PreparedInvoice, layout: Layout) -> bytes:
        pass


class TypstRenderer(InvoiceRenderer):
    """Compiles a layout with the ``typst`` CLI in a scratch directory."""

    def __init__(self, typst_binary: str = "typst", font_dirs: Optional[List[str]] = None):
        self.typst_binary = typst_binary
        self.font_dirs = [Path(d) for d in font_dirs or []]

    @classmethod
    def from_config(cls, config) -> "TypstRenderer":
        """Build from a ``RenderingConfig``."""
        return cls(config.typst_binary, config.font_dirs)

    def _check_typst(self) -> bool:
        """Check if Typst is installed."""
        try:
            subprocess.run([self.typst_binary, "--version"], capture_output=True, check=True)
            return True
        except (subprocess.CalledProcessError, FileNotFoundError):
            return False

    def _font_args(self) -> List[str]:
        args = []
        for font_dir in self.font_dirs:
            if font_dir.is_dir():
                args += ["--font-path", str(font_dir)]
        return args

    def render(self, l10n: L10n, invoice: PreparedInvoice, layout: Layout) -> bytes:
        if not self._check_typst():
            raise RenderError(
                f"'{self.typst_binary}' not found, install Typst: https://github.com/typst/typst"
            )

        invoice_json = json.dumps(invoice.to_typst_dict(), ensure_ascii=False, indent=2)
        l10n_json = json.dumps(l10n.to_typst_dict(), ensure_ascii=False, indent=2)

        with tempfile.TemporaryDirectory(prefix="klirr-") as tmp:
            workdir = Path(tmp)
            shutil.copyfile(layout.source, workdir / MAIN_FILE)
            (workdir / DATA_FILE).write_text(invoice_json, encoding="utf-8")
            (workdir / L10N_FILE).write_text(l10n_json, encoding="utf-8")

            cmd = [self.typst_binary, "compile", *self._font_args(), MAIN_FILE, PDF_FILE]
            logger.debug(f"Running {' '.join(cmd)} in {workdir}")
            result = subprocess.run(cmd, capture_output=True, text=True, cwd=workdir)
            if result.returncode != 0:
                message = f"Typst compilation failed: {result.stderr.strip()}"
                if layout.required_fonts:
                    message += f" (layout {layout} needs fonts: {', '.join(layout.required_fonts)})"
                raise RenderError(message)

            pdf = (workdir / PDF_FILE).read_bytes()

        logger.info(f"📄 Rendered {len(pdf)} bytes with layout {layout}")
        return pdf

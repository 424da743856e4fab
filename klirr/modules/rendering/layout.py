"""Typst invoice layouts shipped with klirr."""

from enum import Enum
from pathlib import Path
from typing import List

from klirr.common.errors import InvalidLayout
from klirr.common.templates import TEMPLATES_DIR


class Layout(str, Enum):
    AIOO = "aioo"
    TEST = "test"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "Layout":
        try:
            return cls(str(text).strip().lower())
        except ValueError:
            raise InvalidLayout(text, "supported layouts are aioo and test") from None

    @property
    def source(self) -> Path:
        return TEMPLATES_DIR / f"{self.value}.typ"

    @property
    def required_fonts(self) -> List[str]:
        return _REQUIRED_FONTS[self]


_REQUIRED_FONTS = {
    Layout.AIOO: ["New Computer Modern"],
    Layout.TEST: [],
}

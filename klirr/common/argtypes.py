"""argparse ``type=`` adapters for klirr parsers."""

import argparse
from typing import Callable, TypeVar

from klirr.common.errors import KlirrError

T = TypeVar("T")


def argtype(parse: Callable[[str], T]) -> Callable[[str], T]:
    """Report parse failures as usage errors (exit 2) instead of klirr errors."""

    def convert(text: str) -> T:
        try:
            return parse(text)
        except KlirrError as e:
            raise argparse.ArgumentTypeError(str(e)) from e

    convert.__name__ = getattr(parse, "__name__", "value")
    return convert

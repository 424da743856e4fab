#!/usr/bin/env python3
"""Unified CLI for klirr.

Usage:
    klirr sample --help
    klirr invoice --help
    klirr data --help
    klirr email --help
"""
import argparse
import logging
import sys
from typing import List, Optional

from klirr.common.config import setup_logging
from klirr.common.errors import KlirrError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='klirr',
        description='🧾 klirr - invoices for freelancers',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modules:
  sample    Render a sample invoice to your home directory
  invoice   Create an invoice for a period
  data      Manage vendor, client and invoice data
  email     Configure and test invoice emails

Examples:
  klirr sample
  klirr data init
  klirr invoice --period last
  klirr invoice services-off --quantity 16 --unit hours
  klirr invoice expenses --email
  klirr data period-off --period 2025-07-second-half
  klirr email init
"""
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument(
        'module',
        choices=['sample', 'invoice', 'data', 'email'],
        help='Module to run'
    )
    parser.add_argument('args', nargs=argparse.REMAINDER, help=argparse.SUPPRESS)
    return parser


def dispatch(module: str, argv: List[str]) -> int:
    if module == 'sample':
        from klirr.modules.invoicing.cli import sample_main
        return sample_main(argv)

    elif module == 'invoice':
        from klirr.modules.invoicing.cli import main as invoice_main
        return invoice_main(argv)

    elif module == 'data':
        from klirr.modules.data.cli import main as data_main
        return data_main(argv)

    elif module == 'email':
        from klirr.modules.email.cli import main as email_main
        return email_main(argv)

    raise ValueError(f"unknown module {module}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        return dispatch(args.module, args.args)
    except KlirrError as e:
        logger.error(f"{e.code}: {e}")
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())

"""Data CLI."""
import argparse
from typing import List, Optional

from klirr.common.argtypes import argtype
from klirr.common.config import get_config
from klirr.common.models import parse_expense_item, resolve_period_alias
from klirr.common.storage import YamlFileStore

from .service import DataEditSelector, DataService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='klirr data',
        description='🗂️  Manage vendor, client and invoice data',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  klirr data init
  klirr data edit vendor
  klirr data period-off --period 2025-07-first-half
  klirr data expenses --period 2025-05 -e "Coffee,2.5,EUR,3,2025-05-20"
"""
    )
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('init', help='Write sample data to edit')
    sub.add_parser('validate', help='Load and check all data')
    sub.add_parser('dump', help='Print all data files')

    edit = sub.add_parser('edit', help='Open data files in $EDITOR')
    edit.add_argument('selector', type=DataEditSelector, choices=list(DataEditSelector))

    period_off = sub.add_parser('period-off', help='Record a period without invoice')
    period_off.add_argument('--period', type=argtype(resolve_period_alias), required=True)

    expenses = sub.add_parser('expenses', help='Record expenses for a period')
    expenses.add_argument('--period', type=argtype(resolve_period_alias), required=True)
    expenses.add_argument('-e', '--expense', dest='expenses', type=argtype(parse_expense_item),
                          action='append', required=True,
                          help='name,unit_price,CURRENCY,quantity,YYYY-MM-DD (repeatable)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    svc = DataService(YamlFileStore(get_config().data_path))

    if args.command == 'init':
        svc.init()
        print(f'✅ Sample data written to {svc.store.base_path}, edit it with: klirr data edit all')
    elif args.command == 'validate':
        svc.validate()
        print('✅ Data is valid')
    elif args.command == 'dump':
        print(svc.dump())
    elif args.command == 'edit':
        svc.edit(args.selector)
        print(f'✅ Updated {args.selector}')
    elif args.command == 'period-off':
        svc.record_period_off(args.period)
        print(f'✅ Recorded {args.period} as period off')
    elif args.command == 'expenses':
        svc.record_expenses(args.period, args.expenses)
        print(f'✅ Recorded {len(args.expenses)} expense(s) for {args.period}')
    return 0


if __name__ == '__main__':
    raise SystemExit(main())

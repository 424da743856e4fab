"""Invoice CLI."""
import argparse
from pathlib import Path
from typing import List, Optional

from klirr.common.argtypes import argtype
from klirr.common.config import get_config
from klirr.common.errors import KlirrError
from klirr.common.models import TimeOff, resolve_period_alias
from klirr.common.storage import YamlFileStore
from klirr.modules.email import EmailService
from klirr.modules.fx import FrankfurterClient
from klirr.modules.rendering import Language, Layout, TypstRenderer

from .assembler import InvoiceInput, TargetItems
from .service import InvoiceService, render_sample


def build_service(config=None) -> InvoiceService:
    config = config or get_config()
    store = YamlFileStore(config.data_path)
    return InvoiceService(
        store=store,
        renderer=TypstRenderer.from_config(config.rendering),
        oracle=FrankfurterClient(config.fx.base_url, config.fx.timeout_s),
        invoices_dir=config.invoices_path,
        email_service=EmailService(store, config.email),
    )


def _add_presentation_args(parser: argparse.ArgumentParser):
    parser.add_argument('--language', type=argtype(Language.parse), default=Language.EN,
                        help='Invoice language: en or sv (default: en)')
    parser.add_argument('--layout', type=argtype(Layout.parse), default=Layout.AIOO,
                        help='Typst layout: aioo or test (default: aioo)')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='klirr invoice',
        description='🧾 Create an invoice PDF',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Items:
  services       Full period of services (default)
  services-off   Services minus time off, needs --quantity and --unit
  expenses       Expenses recorded for the period

Examples:
  klirr invoice
  klirr invoice --period 2025-05 --language sv
  klirr invoice services-off --quantity 2 --unit days
  klirr invoice expenses --period last --email
"""
    )
    parser.add_argument('items', nargs='?', default='services',
                        choices=['services', 'services-off', 'expenses'])
    parser.add_argument('--period', type=argtype(resolve_period_alias), default='last',
                        help="YYYY-MM, YYYY-MM-first-half|second-half, 'current' or 'last' (default: last)")
    parser.add_argument('--out', type=Path, help='Output PDF path (default: invoices dir)')
    parser.add_argument('--email', action='store_true', help='Email the invoice once rendered')
    parser.add_argument('--quantity', help='Time off quantity for services-off')
    parser.add_argument('--unit', choices=['days', 'hours'], help='Time off unit for services-off')
    _add_presentation_args(parser)
    return parser


def parse_input(argv: Optional[List[str]] = None) -> InvoiceInput:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.items == 'services-off':
        if args.quantity is None or args.unit is None:
            parser.error('services-off requires --quantity and --unit')
        try:
            time_off = TimeOff.from_unit(args.quantity, args.unit)
        except KlirrError as e:
            parser.error(str(e))
        items = TargetItems.services(time_off)
    elif args.items == 'expenses':
        items = TargetItems.expenses()
    else:
        items = TargetItems.services()

    return InvoiceInput(
        period=args.period,
        items=items,
        output_path=args.out,
        language=args.language,
        layout=args.layout,
        email=args.email,
    )


def main(argv: Optional[List[str]] = None) -> int:
    invoice_input = parse_input(argv)
    named_pdf = build_service().create_invoice(invoice_input)
    print(f'✅ Invoice #{named_pdf.prepared.information.number} saved to {named_pdf.saved_at}')
    return 0


def sample_main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog='klirr sample', description='📄 Render the sample invoice')
    parser.add_argument('--out-dir', type=Path, default=None, help='Output directory (default: home)')
    _add_presentation_args(parser)
    args = parser.parse_args(argv)

    renderer = TypstRenderer.from_config(get_config().rendering)
    named_pdf = render_sample(renderer, args.out_dir, args.language, args.layout)
    print(f'✅ Sample invoice saved to {named_pdf.saved_at}')
    return 0


if __name__ == '__main__':
    raise SystemExit(main())

"""Email CLI."""
import argparse
import tempfile
from pathlib import Path
from typing import List, Optional

from klirr.common.config import get_config
from klirr.common.storage import YamlFileStore
from klirr.modules.invoicing.service import render_sample
from klirr.modules.rendering import TypstRenderer

from .service import EmailEditSelector, EmailService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='klirr email',
        description='📧 Configure and test invoice emails',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
The SMTP app password is stored encrypted. Set APP_EMAIL_ENCRYPTION_PASSWORD
to skip the passphrase prompt.

Examples:
  klirr email init
  klirr email edit recipients
  klirr email edit app_password
  klirr email test
"""
    )
    sub = parser.add_subparsers(dest='command', required=True)
    sub.add_parser('init', help='Set up sender, recipients and passwords')
    sub.add_parser('validate', help='Decrypt and check the settings')
    sub.add_parser('test', help='Send the sample invoice to the recipients')
    edit = sub.add_parser('edit', help='Edit one part of the settings')
    edit.add_argument('selector', type=EmailEditSelector, choices=list(EmailEditSelector))
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()
    svc = EmailService(YamlFileStore(config.data_path), config.email)

    if args.command == 'init':
        settings = svc.init()
        print(f'✅ Email settings saved for {settings.sender.email}')
    elif args.command == 'validate':
        settings = svc.validate()
        print(f'✅ Email settings valid for {settings.sender.email}')
    elif args.command == 'edit':
        svc.edit(args.selector)
        print(f'✅ Updated {args.selector}')
    elif args.command == 'test':
        with tempfile.TemporaryDirectory(prefix='klirr-test-') as tmp:
            sample = render_sample(TypstRenderer.from_config(config.rendering), Path(tmp))
            svc.send_test(sample)
        print('✅ Test email sent')
    return 0


if __name__ == '__main__':
    raise SystemExit(main())

"""
Email Module
============
Encrypted SMTP settings and invoice delivery.

Usage:
    from klirr.modules.email import EmailService

    svc = EmailService(store)
    svc.validate()
    svc.send_invoice(named_pdf)
"""

from .compose import Credentials, Email, compose
from .service import EmailEditSelector, EmailService
from .settings import DecryptedEmailSettings, EmailAccount, EncryptedEmailSettings, Template
from .transport import EmailTransport, SmtpTransport

__all__ = [
    'Credentials', 'Email', 'compose',
    'EmailEditSelector', 'EmailService',
    'DecryptedEmailSettings', 'EmailAccount', 'EncryptedEmailSettings', 'Template',
    'EmailTransport', 'SmtpTransport',
]

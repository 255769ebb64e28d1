"""
Mail transport integration.
"""

from mailrelay.mail.factory import create_mail_transport
from mailrelay.mail.interface import (
    Envelope,
    MailError,
    MailErrorKind,
    MailMessage,
    MailTransport,
    MailTransportType,
    Receipt,
)
from mailrelay.mail.mock_transport import MockMailTransport
from mailrelay.mail.recipients import parse_recipients
from mailrelay.mail.smtp_transport import SMTPMailTransport

__all__ = [
    "Envelope",
    "MailError",
    "MailErrorKind",
    "MailMessage",
    "MailTransport",
    "MailTransportType",
    "MockMailTransport",
    "Receipt",
    "SMTPMailTransport",
    "create_mail_transport",
    "parse_recipients",
]

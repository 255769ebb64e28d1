"""
Factory for creating mail transport instances.
"""

from mailrelay.config import Settings
from mailrelay.mail.interface import MailTransport, MailTransportType
from mailrelay.mail.mock_transport import MockMailTransport
from mailrelay.mail.smtp_transport import SMTPMailTransport
from mailrelay.shared.logging import get_logger, mask_secret

logger = get_logger(__name__)


def create_mail_transport(settings: Settings) -> MailTransport:
    """
    Create the mail transport selected by configuration.

    Args:
        settings: Application settings.

    Returns:
        Configured mail transport.
    """
    transport_type = MailTransportType(settings.mail_transport)

    logger.info(
        "Mail transport config resolved",
        extra={
            "transport": transport_type.value,
            "smtp_host": settings.smtp_host,
            "smtp_port": settings.smtp_port,
            "smtp_use_tls": settings.smtp_use_tls,
            "sender": settings.gmail_user,
            "app_pass": mask_secret(settings.gmail_app_pass, keep=2),
            "timeout_seconds": settings.smtp_timeout_seconds,
        },
    )

    if transport_type == MailTransportType.SMTP:
        if not settings.gmail_user or not settings.gmail_app_pass:
            logger.warning("GMAIL_USER / GMAIL_APP_PASS missing; /api/send will fail until they are set")
        return SMTPMailTransport(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.gmail_user,
            password=settings.gmail_app_pass,
            use_tls=settings.smtp_use_tls,
            timeout_seconds=settings.smtp_timeout_seconds,
        )

    if transport_type == MailTransportType.MOCK:
        return MockMailTransport()

    raise ValueError(f"Unsupported mail transport: {transport_type}")

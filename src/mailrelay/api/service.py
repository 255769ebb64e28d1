"""
Relay operations: draft an email through the completion provider and
dispatch it through the mail transport.
"""

from mailrelay.completion.interface import CompletionProvider
from mailrelay.completion.models import CompletionErrorKind
from mailrelay.completion.prompts import build_email_request
from mailrelay.config import Settings
from mailrelay.mail.interface import MailMessage, MailTransport, Receipt
from mailrelay.mail.recipients import parse_recipients
from mailrelay.shared.correlation import get_correlation_id
from mailrelay.shared.exceptions import (
    DeliveryError,
    InvalidRequestError,
    UpstreamEmptyError,
    UpstreamError,
)
from mailrelay.shared.logging import get_logger
from mailrelay.shared.result import Err, Ok

logger = get_logger(__name__)


async def generate_email(provider: CompletionProvider, prompt: str | None) -> str:
    """Draft email text for ``prompt``.

    Raises:
        InvalidRequestError: ``prompt`` is missing or blank.
        UpstreamEmptyError: The provider answered without usable text.
        UpstreamError: The provider call failed.
    """
    if not prompt or not prompt.strip():
        raise InvalidRequestError("Prompt is required.")

    request = build_email_request(prompt, correlation_id=get_correlation_id())
    logger.info(
        "Generating email",
        extra={"prompt_length": len(prompt), "provider": provider.provider.value},
    )

    match await provider.complete(request):
        case Ok(value=response):
            return response.content
        case Err(error=error) if error.kind == CompletionErrorKind.EMPTY:
            raise UpstreamEmptyError(details=error.model_dump(mode="json"))
        case Err(error=error):
            raise UpstreamError(details=error.model_dump(mode="json"))


async def dispatch_email(
    transport: MailTransport,
    settings: Settings,
    recipients: str | None,
    subject: str | None,
    email_body: str | None,
) -> Receipt:
    """Send ``email_body`` to ``recipients`` from the configured sender.

    Raises:
        InvalidRequestError: Recipients or body missing, or recipients unparseable.
        DeliveryError: The transport did not accept the message.
    """
    if not recipients or not recipients.strip() or not email_body or not email_body.strip():
        raise InvalidRequestError("Recipients and email body are required.")

    addresses = parse_recipients(recipients, max_recipients=settings.max_recipients)
    message = MailMessage(
        sender=settings.gmail_user,
        recipients=tuple(addresses),
        subject=subject or settings.default_subject,
        text=email_body,
    )

    logger.info("Sending email", extra={"recipient_count": len(addresses)})

    match await transport.send(message):
        case Ok(value=receipt):
            logger.info("Email accepted by transport", extra={"message_id": receipt.message_id})
            return receipt
        case Err(error=error):
            raise DeliveryError(details=error.model_dump(mode="json"))

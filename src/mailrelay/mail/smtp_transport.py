"""
SMTP mail transport implementation.
"""

import asyncio
import re
import smtplib
import ssl
from email.message import EmailMessage
from email.policy import SMTP as SMTP_POLICY
from email.utils import formatdate, make_msgid
from typing import Callable

from mailrelay.mail.interface import (
    Envelope,
    MailError,
    MailErrorKind,
    MailMessage,
    Receipt,
)
from mailrelay.shared.logging import get_logger
from mailrelay.shared.result import Err, Ok, Result

logger = get_logger(__name__)

SMTPFactory = Callable[..., smtplib.SMTP]

_LINE_BREAKS = re.compile(r"[\r\n]+")


class SMTPDeliveryError(Exception):
    """Raised inside the worker thread; converted to a ``MailError``."""

    def __init__(self, kind: MailErrorKind, message: str, smtp_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.smtp_code = smtp_code


class SMTPMailTransport:
    """
    SMTP-based mail transport.

    Opens one authenticated connection per message (STARTTLS when enabled).
    The blocking smtplib conversation runs in the default executor.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        use_tls: bool = True,
        timeout_seconds: float = 30.0,
        smtp_factory: SMTPFactory = smtplib.SMTP,
    ) -> None:
        """
        Initialize SMTP transport.

        Args:
            host: SMTP server host.
            port: SMTP server port.
            username: Login identity (Gmail address).
            password: Login credential (Gmail app password).
            use_tls: Upgrade the connection with STARTTLS.
            timeout_seconds: Socket timeout for every SMTP operation.
            smtp_factory: Connection constructor, replaceable in tests.
        """
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout_seconds = timeout_seconds
        self._smtp_factory = smtp_factory

    async def send(self, message: MailMessage) -> Result[Receipt, MailError]:
        """
        Send a message via SMTP.

        Args:
            message: Message to deliver.

        Returns:
            Ok(Receipt) on acceptance, Err(MailError) otherwise.
        """
        if not self._username or not self._password:
            logger.error("SMTP credentials are not configured")
            return Err(
                MailError(
                    kind=MailErrorKind.CONFIGURATION,
                    message="GMAIL_USER / GMAIL_APP_PASS are not set",
                )
            )

        loop = asyncio.get_running_loop()
        try:
            receipt = await loop.run_in_executor(None, self._send_sync, message)
        except SMTPDeliveryError as e:
            logger.error(
                "SMTP delivery failed",
                extra={"kind": e.kind.value, "smtp_code": e.smtp_code, "error": str(e)},
            )
            return Err(MailError(kind=e.kind, message=str(e), smtp_code=e.smtp_code))

        logger.info(
            "Email sent",
            extra={
                "message_id": receipt.message_id,
                "accepted": len(receipt.accepted),
                "rejected": len(receipt.rejected),
            },
        )
        return Ok(receipt)

    def _build_message(self, message: MailMessage, message_id: str) -> EmailMessage:
        msg = EmailMessage(policy=SMTP_POLICY)
        msg["From"] = message.sender
        msg["To"] = ", ".join(message.recipients)
        # Header values must stay on one line
        msg["Subject"] = _LINE_BREAKS.sub(" ", message.subject)
        msg["Date"] = formatdate(localtime=False, usegmt=True)
        msg["Message-ID"] = message_id
        msg.set_content(message.text)
        return msg

    def _send_sync(self, message: MailMessage) -> Receipt:
        """Run the SMTP conversation and build the receipt."""
        domain = message.sender.rpartition("@")[2] or self._host
        message_id = make_msgid(domain=domain)
        try:
            payload = self._build_message(message, message_id).as_bytes()
        except (ValueError, TypeError) as e:
            raise SMTPDeliveryError(MailErrorKind.PROTOCOL, f"Message could not be built: {e}") from e

        try:
            with self._smtp_factory(self._host, self._port, timeout=self._timeout_seconds) as server:
                server.ehlo()
                if self._use_tls:
                    server.starttls(context=ssl.create_default_context())
                    server.ehlo()
                server.login(self._username, self._password)

                code, resp = server.mail(message.sender)
                if code != 250:
                    server.rset()
                    raise SMTPDeliveryError(
                        MailErrorKind.REFUSED,
                        f"Sender refused: {_decode(resp)}",
                        smtp_code=code,
                    )

                accepted: list[str] = []
                rejected: list[str] = []
                for recipient in message.recipients:
                    code, resp = server.rcpt(recipient)
                    if code in (250, 251):
                        accepted.append(recipient)
                    else:
                        logger.warning(
                            "Recipient refused",
                            extra={"recipient": recipient, "smtp_code": code, "reply": _decode(resp)},
                        )
                        rejected.append(recipient)

                if not accepted:
                    server.rset()
                    raise SMTPDeliveryError(MailErrorKind.REFUSED, "All recipients were refused")

                code, resp = server.data(payload)
                if code != 250:
                    server.rset()
                    raise SMTPDeliveryError(
                        MailErrorKind.PROTOCOL,
                        f"Message data refused: {_decode(resp)}",
                        smtp_code=code,
                    )
        except SMTPDeliveryError:
            raise
        except smtplib.SMTPAuthenticationError as e:
            raise SMTPDeliveryError(
                MailErrorKind.AUTHENTICATION,
                f"Authentication failed: {_decode(e.smtp_error)}",
                smtp_code=e.smtp_code,
            ) from e
        except (smtplib.SMTPServerDisconnected, smtplib.SMTPConnectError) as e:
            raise SMTPDeliveryError(MailErrorKind.CONNECTION, f"SMTP connection failed: {e}") from e
        except smtplib.SMTPResponseException as e:
            raise SMTPDeliveryError(
                MailErrorKind.PROTOCOL,
                f"SMTP error: {_decode(e.smtp_error)}",
                smtp_code=e.smtp_code,
            ) from e
        except smtplib.SMTPException as e:
            raise SMTPDeliveryError(MailErrorKind.PROTOCOL, f"SMTP error: {e}") from e
        except TimeoutError as e:
            raise SMTPDeliveryError(
                MailErrorKind.TIMEOUT,
                f"SMTP timed out after {self._timeout_seconds}s",
            ) from e
        except OSError as e:
            raise SMTPDeliveryError(MailErrorKind.CONNECTION, f"SMTP connection failed: {e}") from e

        return Receipt(
            message_id=message_id,
            envelope=Envelope(from_=message.sender, to=list(message.recipients)),
            accepted=accepted,
            rejected=rejected,
            response=f"{code} {_decode(resp)}",
        )


def _decode(value: bytes | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value

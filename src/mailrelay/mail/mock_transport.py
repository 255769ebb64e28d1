"""
Mock mail transport for testing and local runs.
"""

import asyncio
from uuid import uuid4

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


class MockMailTransport:
    """Mail transport that records messages instead of delivering them."""

    def __init__(self, delay_seconds: float = 0.0) -> None:
        self._sent: list[MailMessage] = []
        self._delay_seconds = delay_seconds
        self._next_message_id: str | None = None
        self._error: MailError | None = None

    @property
    def sent(self) -> list[MailMessage]:
        return self._sent.copy()

    def reset(self) -> None:
        self._sent.clear()
        self._next_message_id = None
        self._error = None

    def configure_failure(
        self,
        kind: MailErrorKind = MailErrorKind.CONNECTION,
        message: str = "Mock failure",
    ) -> None:
        self._error = MailError(kind=kind, message=message)

    def configure_message_id(self, message_id: str) -> None:
        self._next_message_id = message_id

    async def send(self, message: MailMessage) -> Result[Receipt, MailError]:
        self._sent.append(message)
        if self._delay_seconds:
            await asyncio.sleep(self._delay_seconds)

        if self._error is not None:
            return Err(self._error)

        message_id = self._next_message_id or f"<{uuid4()}@mock.local>"
        logger.info("Mock email recorded", extra={"message_id": message_id})
        return Ok(
            Receipt(
                message_id=message_id,
                envelope=Envelope(from_=message.sender, to=list(message.recipients)),
                accepted=list(message.recipients),
                rejected=[],
                response="250 OK (mock)",
            )
        )

"""
Mail transport interface and data types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from mailrelay.shared.result import Result


@dataclass(frozen=True)
class MailMessage:
    """Plain-text message to be delivered."""

    sender: str
    recipients: tuple[str, ...]
    subject: str
    text: str


class Envelope(BaseModel):
    """SMTP envelope actually used for delivery."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str = Field(alias="from")
    to: list[str]


class Receipt(BaseModel):
    """Delivery receipt returned to the caller unchanged.

    Serialized with camelCase keys (``messageId``) via ``model_dump(by_alias=True)``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message_id: str = Field(alias="messageId")
    envelope: Envelope
    accepted: list[str] = Field(default_factory=list)
    rejected: list[str] = Field(default_factory=list)
    response: str = ""


class MailErrorKind(str, Enum):
    """Why the transport did not accept a message."""

    CONFIGURATION = "configuration"
    CONNECTION = "connection"
    TIMEOUT = "timeout"
    AUTHENTICATION = "authentication"
    REFUSED = "refused"
    PROTOCOL = "protocol"


class MailError(BaseModel):
    """Failure detail returned by a transport. Logged, never returned to callers."""

    model_config = ConfigDict(frozen=True)

    kind: MailErrorKind
    message: str
    smtp_code: int | None = None


class MailTransportType(str, Enum):
    """Supported mail transports."""

    SMTP = "smtp"
    MOCK = "mock"


@runtime_checkable
class MailTransport(Protocol):
    """Narrow interface over a mail delivery service."""

    async def send(self, message: MailMessage) -> Result[Receipt, MailError]:
        """Deliver one message.

        Returns:
            ``Ok(Receipt)`` once the provider accepted the message, otherwise
            ``Err(MailError)``.
        """
        ...

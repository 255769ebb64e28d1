"""
Unit tests for the SMTP mail transport.
"""

from __future__ import annotations

import smtplib
from email import message_from_bytes
from email.policy import default as default_policy

import pytest

from mailrelay.mail.interface import MailErrorKind, MailMessage
from mailrelay.mail.smtp_transport import SMTPMailTransport
from mailrelay.shared.result import Err, Ok


class FakeSMTP:
    """In-memory stand-in for smtplib.SMTP."""

    instances: list["FakeSMTP"] = []

    rcpt_codes: dict[str, int] = {}
    login_error: Exception | None = None
    data_reply: tuple[int, bytes] = (250, b"2.0.0 OK queued as abc")

    def __init__(self, host: str, port: int, timeout: float) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self.calls: list[str] = []
        self.mail_from: str | None = None
        self.rcpts: list[str] = []
        self.payload: bytes | None = None
        FakeSMTP.instances.append(self)

    def __enter__(self) -> "FakeSMTP":
        return self

    def __exit__(self, *exc: object) -> None:
        self.calls.append("quit")

    def ehlo(self) -> tuple[int, bytes]:
        self.calls.append("ehlo")
        return 250, b"ok"

    def starttls(self, context=None) -> tuple[int, bytes]:
        self.calls.append("starttls")
        return 220, b"ready"

    def login(self, user: str, password: str) -> tuple[int, bytes]:
        self.calls.append("login")
        if self.login_error is not None:
            raise self.login_error
        self.user = user
        self.password = password
        return 235, b"accepted"

    def mail(self, sender: str) -> tuple[int, bytes]:
        self.calls.append("mail")
        self.mail_from = sender
        return 250, b"ok"

    def rcpt(self, recipient: str) -> tuple[int, bytes]:
        self.calls.append("rcpt")
        code = self.rcpt_codes.get(recipient, 250)
        if code == 250:
            self.rcpts.append(recipient)
        return code, b"reply"

    def data(self, payload: bytes) -> tuple[int, bytes]:
        self.calls.append("data")
        self.payload = payload
        return self.data_reply

    def rset(self) -> tuple[int, bytes]:
        self.calls.append("rset")
        return 250, b"reset"

    def noop(self) -> tuple[int, bytes]:
        self.calls.append("noop")
        return 250, b"ok"


@pytest.fixture(autouse=True)
def reset_fake_smtp():
    FakeSMTP.instances = []
    FakeSMTP.rcpt_codes = {}
    FakeSMTP.login_error = None
    FakeSMTP.data_reply = (250, b"2.0.0 OK queued as abc")
    yield


def make_transport(**overrides) -> SMTPMailTransport:
    params = dict(
        host="smtp.gmail.com",
        port=587,
        username="sender@example.com",
        password="app-pass",
        use_tls=True,
        timeout_seconds=12.0,
        smtp_factory=FakeSMTP,
    )
    params.update(overrides)
    return SMTPMailTransport(**params)


def make_message(*recipients: str) -> MailMessage:
    return MailMessage(
        sender="sender@example.com",
        recipients=recipients or ("a@b.com",),
        subject="Hello",
        text="Hi there,\n\nSee you soon.",
    )


@pytest.mark.asyncio
async def test_send_success_builds_receipt() -> None:
    result = await make_transport().send(make_message("a@b.com"))

    assert isinstance(result, Ok)
    receipt = result.value
    assert receipt.message_id.startswith("<")
    assert receipt.message_id.endswith("@example.com>")
    assert receipt.envelope.from_ == "sender@example.com"
    assert receipt.envelope.to == ["a@b.com"]
    assert receipt.accepted == ["a@b.com"]
    assert receipt.rejected == []
    assert receipt.response == "250 2.0.0 OK queued as abc"


@pytest.mark.asyncio
async def test_receipt_serializes_with_camel_case_keys() -> None:
    result = await make_transport().send(make_message("a@b.com"))

    dumped = result.value.model_dump(by_alias=True)
    assert set(dumped) == {"messageId", "envelope", "accepted", "rejected", "response"}
    assert dumped["envelope"] == {"from": "sender@example.com", "to": ["a@b.com"]}


@pytest.mark.asyncio
async def test_smtp_conversation_uses_tls_login_and_timeout() -> None:
    await make_transport().send(make_message("a@b.com"))

    server = FakeSMTP.instances[0]
    assert (server.host, server.port, server.timeout) == ("smtp.gmail.com", 587, 12.0)
    assert server.calls == ["ehlo", "starttls", "ehlo", "login", "mail", "rcpt", "data", "quit"]
    assert server.user == "sender@example.com"
    assert server.password == "app-pass"
    assert server.mail_from == "sender@example.com"


@pytest.mark.asyncio
async def test_without_tls_skips_starttls() -> None:
    await make_transport(use_tls=False).send(make_message("a@b.com"))

    assert "starttls" not in FakeSMTP.instances[0].calls


@pytest.mark.asyncio
async def test_message_headers_and_body() -> None:
    result = await make_transport().send(make_message("a@b.com", "c@d.org"))

    parsed = message_from_bytes(FakeSMTP.instances[0].payload, policy=default_policy)
    assert parsed["From"] == "sender@example.com"
    assert parsed["To"] == "a@b.com, c@d.org"
    assert parsed["Subject"] == "Hello"
    assert parsed["Message-ID"] == result.value.message_id
    assert parsed.get_content().replace("\r\n", "\n").rstrip("\n") == "Hi there,\n\nSee you soon."


@pytest.mark.asyncio
async def test_subject_line_breaks_are_collapsed() -> None:
    message = MailMessage(
        sender="sender@example.com",
        recipients=("a@b.com",),
        subject="Hi\r\nBcc: x@y",
        text="Body",
    )

    result = await make_transport().send(message)

    assert isinstance(result, Ok)
    assert FakeSMTP.instances[0].rcpts == ["a@b.com"]
    parsed = message_from_bytes(FakeSMTP.instances[0].payload, policy=default_policy)
    assert parsed["Subject"] == "Hi Bcc: x@y"
    assert parsed["Bcc"] is None


@pytest.mark.asyncio
async def test_unbuildable_message_is_protocol_error() -> None:
    message = MailMessage(
        sender="sender@example.com\r\nBcc: x@y",
        recipients=("a@b.com",),
        subject="Hello",
        text="Body",
    )

    result = await make_transport().send(message)

    assert isinstance(result, Err)
    assert result.error.kind == MailErrorKind.PROTOCOL
    assert FakeSMTP.instances == []


@pytest.mark.asyncio
async def test_partially_refused_recipients_are_reported() -> None:
    FakeSMTP.rcpt_codes = {"bad@b.com": 550}

    result = await make_transport().send(make_message("a@b.com", "bad@b.com"))

    assert isinstance(result, Ok)
    assert result.value.accepted == ["a@b.com"]
    assert result.value.rejected == ["bad@b.com"]
    assert FakeSMTP.instances[0].rcpts == ["a@b.com"]


@pytest.mark.asyncio
async def test_all_recipients_refused_is_error() -> None:
    FakeSMTP.rcpt_codes = {"a@b.com": 550}

    result = await make_transport().send(make_message("a@b.com"))

    assert isinstance(result, Err)
    assert result.error.kind == MailErrorKind.REFUSED
    assert "data" not in FakeSMTP.instances[0].calls


@pytest.mark.asyncio
async def test_authentication_failure() -> None:
    FakeSMTP.login_error = smtplib.SMTPAuthenticationError(535, b"5.7.8 Username and Password not accepted")

    result = await make_transport().send(make_message())

    assert isinstance(result, Err)
    assert result.error.kind == MailErrorKind.AUTHENTICATION
    assert result.error.smtp_code == 535


@pytest.mark.asyncio
async def test_data_refused_is_protocol_error() -> None:
    FakeSMTP.data_reply = (552, b"message too large")

    result = await make_transport().send(make_message())

    assert isinstance(result, Err)
    assert result.error.kind == MailErrorKind.PROTOCOL
    assert result.error.smtp_code == 552


@pytest.mark.asyncio
async def test_connection_refused() -> None:
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("refused")

    result = await make_transport(smtp_factory=refuse).send(make_message())

    assert isinstance(result, Err)
    assert result.error.kind == MailErrorKind.CONNECTION


@pytest.mark.asyncio
async def test_timeout() -> None:
    def hang(*args, **kwargs):
        raise TimeoutError("timed out")

    result = await make_transport(smtp_factory=hang).send(make_message())

    assert isinstance(result, Err)
    assert result.error.kind == MailErrorKind.TIMEOUT


@pytest.mark.asyncio
async def test_missing_credentials_makes_no_connection() -> None:
    result = await make_transport(password="").send(make_message())

    assert isinstance(result, Err)
    assert result.error.kind == MailErrorKind.CONFIGURATION
    assert FakeSMTP.instances == []



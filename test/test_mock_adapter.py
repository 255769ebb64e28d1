"""
Tests for the in-memory completion provider and mail transport.
"""

import pytest

from mailrelay.completion.interface import CompletionProvider
from mailrelay.completion.mock_adapter import MockCompletionProvider
from mailrelay.completion.models import CompletionErrorKind
from mailrelay.completion.prompts import build_email_request
from mailrelay.mail.interface import MailErrorKind, MailMessage, MailTransport
from mailrelay.mail.mock_transport import MockMailTransport
from mailrelay.shared.result import Err, Ok


def test_mocks_satisfy_interfaces() -> None:
    assert isinstance(MockCompletionProvider(), CompletionProvider)
    assert isinstance(MockMailTransport(), MailTransport)


class TestMockCompletionProvider:
    @pytest.mark.asyncio
    async def test_echoes_prompt_by_default(self) -> None:
        provider = MockCompletionProvider()

        result = await provider.complete(build_email_request("lunch on friday"))

        assert isinstance(result, Ok)
        assert "lunch on friday" in result.value.content
        assert len(provider.requests) == 1

    @pytest.mark.asyncio
    async def test_configured_failure(self) -> None:
        provider = MockCompletionProvider()
        provider.configure_failure(kind=CompletionErrorKind.TRANSPORT)

        result = await provider.complete(build_email_request("x", correlation_id="cid"))

        assert isinstance(result, Err)
        assert result.error.kind == CompletionErrorKind.TRANSPORT
        assert result.error.correlation_id == "cid"

    @pytest.mark.asyncio
    async def test_reset(self) -> None:
        provider = MockCompletionProvider()
        provider.configure_failure()
        await provider.complete(build_email_request("x"))

        provider.reset()

        assert provider.requests == []
        assert isinstance(await provider.complete(build_email_request("x")), Ok)


class TestMockMailTransport:
    @pytest.mark.asyncio
    async def test_records_message(self) -> None:
        transport = MockMailTransport()
        message = MailMessage(sender="s@x.com", recipients=("a@b.com",), subject="S", text="T")

        result = await transport.send(message)

        assert isinstance(result, Ok)
        assert result.value.accepted == ["a@b.com"]
        assert transport.sent == [message]

    @pytest.mark.asyncio
    async def test_configured_failure(self) -> None:
        transport = MockMailTransport()
        transport.configure_failure(kind=MailErrorKind.TIMEOUT)
        message = MailMessage(sender="s@x.com", recipients=("a@b.com",), subject="S", text="T")

        result = await transport.send(message)

        assert isinstance(result, Err)
        assert result.error.kind == MailErrorKind.TIMEOUT

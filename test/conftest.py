"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from mailrelay.completion.mock_adapter import MockCompletionProvider
from mailrelay.config import Settings
from mailrelay.mail.mock_transport import MockMailTransport
from mailrelay.main import create_app


@pytest.fixture
def settings() -> Settings:
    """Deterministic settings, independent of the developer's environment and .env."""
    return Settings(
        _env_file=None,
        app_env="dev",
        llm_provider="mock",
        openrouter_api_key="sk-or-test-key",
        llm_model="openai/gpt-3.5-turbo",
        mail_transport="mock",
        gmail_user="sender@example.com",
        gmail_app_pass="app-pass",
        default_subject="AI-Generated Email",
        max_recipients=5,
        cors_origins="*",
    )


@pytest.fixture
def completion_provider() -> MockCompletionProvider:
    return MockCompletionProvider()


@pytest.fixture
def mail_transport() -> MockMailTransport:
    return MockMailTransport()


@pytest.fixture
def app(
    settings: Settings,
    completion_provider: MockCompletionProvider,
    mail_transport: MockMailTransport,
) -> FastAPI:
    return create_app(
        settings=settings,
        completion_provider=completion_provider,
        mail_transport=mail_transport,
    )


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the in-process app (lifespan is not run)."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client

"""
FastAPI dependencies resolving the collaborators stored on ``app.state``.
"""

from fastapi import Request

from mailrelay.completion.factory import create_completion_provider
from mailrelay.completion.interface import CompletionProvider
from mailrelay.config import Settings
from mailrelay.mail.factory import create_mail_transport
from mailrelay.mail.interface import MailTransport


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_completion_provider(request: Request) -> CompletionProvider:
    """Return the app's completion provider, building it on first use."""
    state = request.app.state
    if state.completion_provider is None:
        state.completion_provider = create_completion_provider(state.settings)
    return state.completion_provider


def get_mail_transport(request: Request) -> MailTransport:
    """Return the app's mail transport, building it on first use."""
    state = request.app.state
    if state.mail_transport is None:
        state.mail_transport = create_mail_transport(state.settings)
    return state.mail_transport

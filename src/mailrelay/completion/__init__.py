"""
Completion provider integration.
"""

from mailrelay.completion.factory import create_completion_provider
from mailrelay.completion.interface import CompletionProvider
from mailrelay.completion.mock_adapter import MockCompletionProvider
from mailrelay.completion.models import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    CompletionError,
    CompletionErrorKind,
    CompletionProviderType,
    MessageRole,
)
from mailrelay.completion.openrouter_adapter import OpenRouterAdapter

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "CompletionError",
    "CompletionErrorKind",
    "CompletionProvider",
    "CompletionProviderType",
    "MessageRole",
    "MockCompletionProvider",
    "OpenRouterAdapter",
    "create_completion_provider",
]

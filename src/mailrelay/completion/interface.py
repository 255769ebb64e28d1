"""
Completion provider interface definition.
"""

from typing import Protocol, runtime_checkable

from mailrelay.completion.models import (
    ChatRequest,
    ChatResponse,
    CompletionError,
    CompletionProviderType,
)
from mailrelay.shared.result import Result


@runtime_checkable
class CompletionProvider(Protocol):
    """Protocol for chat completion providers.

    Implementations report every expected failure through the returned
    ``Result`` instead of raising.
    """

    @property
    def provider(self) -> CompletionProviderType:
        ...

    @property
    def default_model(self) -> str:
        ...

    async def complete(self, request: ChatRequest) -> Result[ChatResponse, CompletionError]:
        """Execute a single chat completion request.

        Returns:
            ``Ok(ChatResponse)`` carrying the first choice's text, or
            ``Err(CompletionError)`` when the call failed or produced no text.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...

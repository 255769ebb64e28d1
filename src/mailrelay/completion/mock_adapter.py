"""
Mock completion provider for testing and local runs.
"""

from __future__ import annotations

import asyncio
from typing import Callable

from mailrelay.completion.models import (
    ChatRequest,
    ChatResponse,
    CompletionError,
    CompletionErrorKind,
    CompletionProviderType,
)
from mailrelay.shared.logging import get_logger
from mailrelay.shared.result import Err, Ok, Result

logger = get_logger(__name__)


def _echo_reply(request: ChatRequest) -> str:
    last = request.messages[-1].content if request.messages else ""
    return f"[mock draft] {last}"


class MockCompletionProvider:
    """In-memory completion provider.

    Records every request and answers with ``reply_func(request)``, or with a
    configured error.
    """

    def __init__(
        self,
        reply_func: Callable[[ChatRequest], str] = _echo_reply,
        default_model: str = "mock-model",
        delay_seconds: float = 0.0,
    ) -> None:
        self._reply_func = reply_func
        self._default_model = default_model
        self._delay_seconds = delay_seconds
        self._requests: list[ChatRequest] = []
        self._error: CompletionError | None = None

    @property
    def provider(self) -> CompletionProviderType:
        return CompletionProviderType.MOCK

    @property
    def default_model(self) -> str:
        return self._default_model

    @property
    def requests(self) -> list[ChatRequest]:
        return self._requests.copy()

    def configure_failure(
        self,
        kind: CompletionErrorKind = CompletionErrorKind.HTTP_STATUS,
        message: str = "Mock failure",
        status_code: int | None = 502,
    ) -> None:
        self._error = CompletionError(kind=kind, message=message, status_code=status_code)

    def reset(self) -> None:
        self._requests.clear()
        self._error = None

    async def complete(self, request: ChatRequest) -> Result[ChatResponse, CompletionError]:
        self._requests.append(request)
        if self._delay_seconds:
            await asyncio.sleep(self._delay_seconds)

        if self._error is not None:
            return Err(self._error.model_copy(update={"correlation_id": request.correlation_id}))

        content = self._reply_func(request)
        if not content:
            return Err(
                CompletionError(
                    kind=CompletionErrorKind.EMPTY,
                    message="Mock returned no text",
                    correlation_id=request.correlation_id,
                )
            )

        logger.info("Mock completion served", extra={"correlation_id": request.correlation_id})
        return Ok(
            ChatResponse(
                content=content,
                model=request.model or self._default_model,
                provider=self.provider,
                correlation_id=request.correlation_id,
                latency_ms=self._delay_seconds * 1000,
            )
        )

    async def aclose(self) -> None:
        return None

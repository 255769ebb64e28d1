"""
OpenRouter adapter for the completion provider.
"""

from __future__ import annotations

import time
from typing import Any

import httpx

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

OPENROUTER_API_BASE = "https://openrouter.ai/api/v1"


class OpenRouterAdapter:
    """OpenAI-compatible chat completion client for OpenRouter.

    One HTTP call per request; failures are returned as ``Err`` values and
    never retried.
    """

    def __init__(
        self,
        api_key: str,
        default_model: str = "openai/gpt-3.5-turbo",
        timeout_seconds: float = 30.0,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize OpenRouter adapter.

        Args:
            api_key: OpenRouter API key.
            default_model: Model used when the request does not name one.
            timeout_seconds: Total timeout for one completion call.
            base_url: Optional custom base URL for the API.
            transport: Optional injected httpx transport (tests use ``httpx.MockTransport``).
        """
        self._api_key = api_key
        self._default_model = default_model
        self._timeout_seconds = timeout_seconds
        self._base_url = (base_url or OPENROUTER_API_BASE).rstrip("/")
        self._chat_endpoint = f"{self._base_url}/chat/completions"
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    @property
    def provider(self) -> CompletionProviderType:
        return CompletionProviderType.OPENROUTER

    @property
    def default_model(self) -> str:
        return self._default_model

    async def aclose(self) -> None:
        await self._client.aclose()

    async def complete(self, request: ChatRequest) -> Result[ChatResponse, CompletionError]:
        """Execute a chat completion request against OpenRouter."""
        correlation_id = request.correlation_id
        model = request.model or self._default_model

        if not self._api_key:
            logger.error(
                "OpenRouter API key is not configured",
                extra={"correlation_id": correlation_id},
            )
            return Err(
                CompletionError(
                    kind=CompletionErrorKind.CONFIGURATION,
                    message="OPENROUTER_API_KEY is not set",
                    correlation_id=correlation_id,
                )
            )

        payload: dict[str, Any] = {
            "model": model,
            "messages": [{"role": m.role.value, "content": m.content} for m in request.messages],
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        logger.info(
            "OpenRouter chat completion request",
            extra={
                "correlation_id": correlation_id,
                "model": model,
                "message_count": len(request.messages),
            },
        )

        start_time = time.monotonic()
        try:
            response = await self._client.post(self._chat_endpoint, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            latency_ms = (time.monotonic() - start_time) * 1000
            logger.error(
                "OpenRouter request timeout",
                extra={"correlation_id": correlation_id, "latency_ms": latency_ms},
            )
            return Err(
                CompletionError(
                    kind=CompletionErrorKind.TIMEOUT,
                    message=f"Request timed out after {self._timeout_seconds}s: {e!r}",
                    correlation_id=correlation_id,
                )
            )
        except httpx.HTTPError as e:
            logger.error(
                "OpenRouter transport error",
                extra={"correlation_id": correlation_id, "error": str(e)},
            )
            return Err(
                CompletionError(
                    kind=CompletionErrorKind.TRANSPORT,
                    message=str(e) or type(e).__name__,
                    correlation_id=correlation_id,
                )
            )

        latency_ms = (time.monotonic() - start_time) * 1000

        if not response.is_success:
            body = _safe_body(response)
            logger.error(
                "OpenRouter provider error",
                extra={
                    "correlation_id": correlation_id,
                    "status_code": response.status_code,
                    "body": body,
                    "latency_ms": latency_ms,
                },
            )
            return Err(
                CompletionError(
                    kind=CompletionErrorKind.HTTP_STATUS,
                    message=f"OpenRouter API error {response.status_code}",
                    correlation_id=correlation_id,
                    status_code=response.status_code,
                    body=body,
                )
            )

        try:
            data = response.json()
        except ValueError:
            logger.error(
                "OpenRouter returned a non-JSON body",
                extra={"correlation_id": correlation_id, "body": response.text[:2000]},
            )
            return Err(
                CompletionError(
                    kind=CompletionErrorKind.INVALID_RESPONSE,
                    message="Response body is not JSON",
                    correlation_id=correlation_id,
                    status_code=response.status_code,
                    body=response.text[:2000],
                )
            )

        logger.debug(
            "OpenRouter responded",
            extra={"correlation_id": correlation_id, "body": data},
        )

        content = extract_first_choice_text(data)
        if not content:
            logger.error(
                "OpenRouter returned no completion text",
                extra={"correlation_id": correlation_id, "body": data},
            )
            return Err(
                CompletionError(
                    kind=CompletionErrorKind.EMPTY,
                    message="No completion text in first choice",
                    correlation_id=correlation_id,
                    status_code=response.status_code,
                    body=data,
                )
            )

        usage = data.get("usage") if isinstance(data.get("usage"), dict) else {}
        logger.info(
            "OpenRouter chat completion success",
            extra={
                "correlation_id": correlation_id,
                "model": data.get("model", model),
                "latency_ms": latency_ms,
            },
        )

        return Ok(
            ChatResponse(
                content=content,
                model=data.get("model") or model,
                provider=self.provider,
                usage={
                    "prompt_tokens": int(usage.get("prompt_tokens") or 0),
                    "completion_tokens": int(usage.get("completion_tokens") or 0),
                    "total_tokens": int(usage.get("total_tokens") or 0),
                },
                correlation_id=correlation_id,
                latency_ms=latency_ms,
            )
        )


def extract_first_choice_text(data: Any) -> str | None:
    """Return ``choices[0].message.content`` if it is a non-empty string."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if not isinstance(content, str) or not content.strip():
        return None
    return content


def _safe_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:2000]

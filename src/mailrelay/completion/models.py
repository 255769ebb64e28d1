"""
Data models for the completion provider.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


class CompletionProviderType(str, Enum):
    """Supported completion providers."""

    OPENROUTER = "openrouter"
    MOCK = "mock"


class MessageRole(str, Enum):
    """Message roles in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A single message in a chat conversation."""

    role: MessageRole
    content: str

    model_config = {"frozen": True}


class ChatRequest(BaseModel):
    """Request for chat completion."""

    messages: list[ChatMessage]
    model: str | None = None
    correlation_id: str = Field(default_factory=lambda: str(uuid4()))


class ChatResponse(BaseModel):
    """Response from chat completion."""

    content: str
    model: str
    provider: CompletionProviderType
    usage: dict[str, int] = Field(default_factory=dict)
    correlation_id: str
    latency_ms: float
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CompletionErrorKind(str, Enum):
    """Why a completion call did not produce text."""

    EMPTY = "empty"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    INVALID_RESPONSE = "invalid_response"
    CONFIGURATION = "configuration"


class CompletionError(BaseModel):
    """Failure detail returned by a completion provider.

    Kept for server-side logging only; never serialized into a response.
    """

    kind: CompletionErrorKind
    message: str
    correlation_id: str | None = None
    status_code: int | None = None
    body: Any = None

    model_config = {"frozen": True}

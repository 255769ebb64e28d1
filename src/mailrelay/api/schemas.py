"""
Pydantic schemas for the relay API.

Wire names are camelCase (``emailContent``, ``emailBody``); Python code uses
snake_case through aliases.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PingResponse(BaseModel):
    status: str = "OK"


class GenerateRequest(BaseModel):
    """Request body for POST /api/generate."""

    prompt: str | None = Field(default=None, description="Free-text context for the email")


class GenerateResponse(BaseModel):
    """Response body for POST /api/generate."""

    model_config = ConfigDict(populate_by_name=True)

    email_content: str = Field(alias="emailContent")


class SendRequest(BaseModel):
    """Request body for POST /api/send."""

    model_config = ConfigDict(populate_by_name=True)

    recipients: str | None = Field(
        default=None,
        description="One or more addresses separated by ',' or ';'",
    )
    subject: str | None = None
    email_body: str | None = Field(default=None, alias="emailBody")


class SendResponse(BaseModel):
    """Response body for POST /api/send."""

    success: bool = True
    info: dict[str, Any]


class ErrorResponse(BaseModel):
    error: str

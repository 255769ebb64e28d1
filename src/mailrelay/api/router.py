"""
API router for the email relay.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, status

from mailrelay.api.dependencies import (
    get_app_settings,
    get_completion_provider,
    get_mail_transport,
)
from mailrelay.api.schemas import (
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    PingResponse,
    SendRequest,
    SendResponse,
)
from mailrelay.api.service import dispatch_email, generate_email
from mailrelay.completion.interface import CompletionProvider
from mailrelay.config import Settings
from mailrelay.mail.interface import MailTransport
from mailrelay.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["relay"])

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@router.get("/ping", response_model=PingResponse, summary="Liveness check")
async def ping() -> PingResponse:
    logger.info("Ping received")
    return PingResponse(status="OK")


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses=_ERROR_RESPONSES,
    summary="Draft an email from a prompt",
)
async def generate(
    provider: Annotated[CompletionProvider, Depends(get_completion_provider)],
    payload: Annotated[GenerateRequest | None, Body()] = None,
) -> GenerateResponse:
    prompt = payload.prompt if payload is not None else None
    logger.info("Generate request received", extra={"has_prompt": bool(prompt)})

    content = await generate_email(provider, prompt)
    return GenerateResponse(email_content=content)


@router.post(
    "/send",
    response_model=SendResponse,
    responses=_ERROR_RESPONSES,
    summary="Send an email",
)
async def send(
    settings: Annotated[Settings, Depends(get_app_settings)],
    transport: Annotated[MailTransport, Depends(get_mail_transport)],
    payload: Annotated[SendRequest | None, Body()] = None,
) -> SendResponse:
    payload = payload or SendRequest()

    receipt = await dispatch_email(
        transport,
        settings,
        recipients=payload.recipients,
        subject=payload.subject,
        email_body=payload.email_body,
    )
    return SendResponse(success=True, info=receipt.model_dump(by_alias=True))

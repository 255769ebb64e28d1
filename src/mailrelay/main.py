"""
FastAPI application entry point.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mailrelay.api.router import router as relay_router
from mailrelay.completion.factory import create_completion_provider
from mailrelay.completion.interface import CompletionProvider
from mailrelay.config import Settings, get_settings
from mailrelay.mail.factory import create_mail_transport
from mailrelay.mail.interface import MailTransport
from mailrelay.shared.correlation import RequestContextMiddleware
from mailrelay.shared.exceptions import AppError
from mailrelay.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)

    logger.info(
        "Application starting",
        extra={"env": settings.app_env, "host": settings.host, "port": settings.port},
    )

    if app.state.completion_provider is None:
        app.state.completion_provider = create_completion_provider(settings)
    if app.state.mail_transport is None:
        app.state.mail_transport = create_mail_transport(settings)

    yield

    logger.info("Shutting down application")
    await app.state.completion_provider.aclose()
    logger.info("Application shutdown complete")


def create_app(
    settings: Settings | None = None,
    completion_provider: CompletionProvider | None = None,
    mail_transport: MailTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; loaded from the environment when omitted.
        completion_provider: Pre-built provider (tests inject fakes here).
        mail_transport: Pre-built transport (tests inject fakes here).
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Mail Relay API",
        description="Draft emails with a language model and send them over SMTP",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.completion_provider = completion_provider
    app.state.mail_transport = mail_transport

    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError) -> JSONResponse:
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            "Request failed",
            extra={
                "path": request.url.path,
                "error_type": type(exc).__name__,
                "status_code": exc.status_code,
                "details": exc.details,
            },
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    # Malformed JSON / wrong field types -> 400 with the same {"error"} shape
    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = []
        for error in exc.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            errors.append({"field": field, "message": error["msg"], "type": error["type"]})
        logger.warning(
            "Request validation failed",
            extra={"path": request.url.path, "errors": errors},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body.", "errors": errors},
        )

    # Also turns unexpected exceptions into the generic 500 body; must sit
    # inside CORS so those responses keep the CORS headers
    app.add_middleware(RequestContextMiddleware)

    # CORS middleware
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(relay_router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "mailrelay.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()

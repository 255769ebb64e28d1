"""
Correlation ID management for request tracing.
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

# shared.logging imports this module, so use the stdlib accessor here
logger = logging.getLogger(__name__)

_correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"

INTERNAL_ERROR_MESSAGE = "Internal server error."


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context."""
    return _correlation_id_var.get()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Bind a correlation ID to every relay request.

    The ID comes from ``X-Correlation-ID`` (or ``X-Request-ID``) when the
    caller sends one, otherwise a UUID4 is generated. It is available to
    loggers through ``get_correlation_id()`` and echoed on every response.

    Exceptions the route handlers did not map to an ``AppError`` are logged
    here and answered with the generic ``{"error"}`` 500 body, so that error
    responses still pass back through the CORS layer and carry the
    correlation header.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        correlation_id = (
            request.headers.get(CORRELATION_ID_HEADER)
            or request.headers.get(REQUEST_ID_HEADER)
            or str(uuid.uuid4())
        )

        token = _correlation_id_var.set(correlation_id)
        try:
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(
                    "Unhandled error",
                    extra={"path": request.url.path, "method": request.method},
                )
                response = JSONResponse(
                    status_code=500,
                    content={"error": INTERNAL_ERROR_MESSAGE},
                )
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
        finally:
            _correlation_id_var.reset(token)

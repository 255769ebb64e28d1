"""
Shared exceptions.

Each error carries the HTTP status it maps to and the message that is safe
to return to the caller. Internal detail stays in ``details`` and is only
ever logged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar


@dataclass(eq=False)
class AppError(Exception):
    message: str = "Internal server error."
    details: dict[str, Any] = field(default_factory=dict)

    status_code: ClassVar[int] = 500

    def __str__(self) -> str:
        return self.message


class InvalidRequestError(AppError):
    """The client omitted or malformed a required field."""

    status_code: ClassVar[int] = 400

    def __init__(self, message: str = "Invalid request.", details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, details=details or {})


class UpstreamEmptyError(AppError):
    """The completion provider answered but returned no usable text."""

    def __init__(
        self,
        message: str = "No email content generated.",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, details=details or {})


class UpstreamError(AppError):
    """The completion provider call failed."""

    def __init__(
        self,
        message: str = "Failed to generate email content.",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, details=details or {})


class DeliveryError(AppError):
    """The mail transport failed to accept the message."""

    def __init__(self, message: str = "Failed to send email.", details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, details=details or {})

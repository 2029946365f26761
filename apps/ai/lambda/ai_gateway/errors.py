"""Domain-level exceptions for the AI gateway and their HTTP mapping."""

import logging
from typing import Any

from .constants import INVALID_REQUEST_MESSAGE, RATE_LIMIT_MESSAGE, UNEXPECTED_ERROR_MESSAGE

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base class for failures that are reported to the caller as ``{"error": ...}``."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(GatewayError):
    """Raised when the inbound payload is malformed or incomplete."""

    status_code = 400

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(INVALID_REQUEST_MESSAGE)
        self.detail = detail


class RateLimitError(GatewayError):
    status_code = 429

    def __init__(self) -> None:
        super().__init__(RATE_LIMIT_MESSAGE)


class UnknownProviderError(GatewayError):
    status_code = 400

    def __init__(self, provider: str) -> None:
        super().__init__(f"Unsupported provider: {provider}")
        self.provider = provider


class UpstreamError(GatewayError):
    """Raised by provider adapters for any vendor-side failure.

    ``upstream_status`` is the vendor's HTTP status when one was received; the
    gateway itself always answers these with 502.
    """

    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


def to_error_response(exc: Exception) -> tuple[int, dict[str, Any]]:
    """Map any exception raised while handling a request to a status and body."""
    if isinstance(exc, GatewayError):
        logger.info(
            "Gateway request failed",
            extra={"status_code": exc.status_code, "error_type": type(exc).__name__},
        )
        return exc.status_code, {"error": exc.message}

    logger.error(
        "Unexpected gateway failure",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"error_type": type(exc).__name__},
    )
    return 502, {"error": UNEXPECTED_ERROR_MESSAGE}

"""Provider interface and shared error helpers."""

import logging
from collections.abc import Mapping
from typing import Any, Protocol

import httpx

from ai_gateway.errors import UpstreamError
from ai_gateway.schemas import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)


class ChatProvider(Protocol):
    def send(self, request: ChatRequest) -> ChatResponse:
        """Call the vendor and return a normalized response, or raise UpstreamError."""
        ...


def _lookup(data: Any, path: tuple[str, ...]) -> Any:
    for key in path:
        if not isinstance(data, Mapping):
            return None
        data = data.get(key)
    return data


def extract_error_message(
    body: Any, paths: tuple[tuple[str, ...], ...] = (("error", "message"),)
) -> str | None:
    """Return the first non-empty string found at one of ``paths`` in ``body``."""
    for path in paths:
        message = _lookup(body, path)
        if isinstance(message, str) and message.strip():
            return message
    return None


def generic_error_message(vendor_name: str, status_code: int) -> str:
    return f"{vendor_name} API error: {status_code}"


def upstream_error_from_response(
    vendor_name: str,
    response: httpx.Response,
    paths: tuple[tuple[str, ...], ...] = (("error", "message"),),
) -> UpstreamError:
    """Build an UpstreamError for a non-2xx vendor response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    message = extract_error_message(body, paths) or generic_error_message(
        vendor_name, response.status_code
    )
    logger.warning(
        "Upstream API returned an error",
        extra={
            "vendor": vendor_name,
            "upstream_status": response.status_code,
            "error_message": message,
        },
    )
    return UpstreamError(message, upstream_status=response.status_code)


def transport_error(vendor_name: str, exc: Exception, timed_out: bool = False) -> UpstreamError:
    """Wrap a network-level failure without echoing its text (it may contain the URL)."""
    kind = "timeout" if timed_out else type(exc).__name__
    logger.warning(
        "Upstream API request failed",
        extra={"vendor": vendor_name, "error_type": type(exc).__name__},
    )
    return UpstreamError(f"{vendor_name} API request failed: {kind}")


def empty_content_error(
    vendor_name: str, reason: str, upstream_status: int | None = None
) -> UpstreamError:
    message = f"{vendor_name} API returned no content: {reason}"
    logger.warning(
        "Upstream API returned no usable content",
        extra={"vendor": vendor_name, "upstream_status": upstream_status, "reason": reason},
    )
    return UpstreamError(message, upstream_status=upstream_status)

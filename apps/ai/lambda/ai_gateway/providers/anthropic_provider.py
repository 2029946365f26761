"""Anthropic Messages API provider."""

import logging
import time
from collections.abc import Callable
from typing import Any

import httpx

from ai_gateway.constants import (
    ANTHROPIC_MAX_TOKENS,
    ANTHROPIC_MESSAGES_URL,
    ANTHROPIC_VERSION,
    UPSTREAM_TIMEOUT_SECONDS,
)
from ai_gateway.message_mappers import build_anthropic_messages, split_system_message
from ai_gateway.schemas import ChatRequest, ChatResponse, Usage

from .base import empty_content_error, transport_error, upstream_error_from_response

logger = logging.getLogger(__name__)


class AnthropicChatProvider:
    vendor_name = "Anthropic"

    def __init__(
        self,
        get_http_client: Callable[[], httpx.Client],
        url: str = ANTHROPIC_MESSAGES_URL,
        timeout: float = UPSTREAM_TIMEOUT_SECONDS,
    ) -> None:
        self._get_http_client = get_http_client
        self._url = url
        self._timeout = timeout

    def build_payload(self, request: ChatRequest) -> dict[str, Any]:
        """The API takes the system prompt as a top-level field, not as a message."""
        system_prompt, conversation = split_system_message(request.messages)
        payload: dict[str, Any] = {
            "model": request.model,
            "max_tokens": ANTHROPIC_MAX_TOKENS,
            "messages": build_anthropic_messages(conversation),
        }
        if system_prompt is not None:
            payload["system"] = system_prompt
        return payload

    def send(self, request: ChatRequest) -> ChatResponse:
        start = time.time()
        try:
            response = self._get_http_client().post(
                self._url,
                json=self.build_payload(request),
                headers={
                    "x-api-key": request.credential,
                    "anthropic-version": ANTHROPIC_VERSION,
                    "content-type": "application/json",
                },
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            raise transport_error(
                self.vendor_name, e, timed_out=isinstance(e, httpx.TimeoutException)
            ) from None
        duration_ms = int((time.time() - start) * 1000)

        if not response.is_success:
            raise upstream_error_from_response(self.vendor_name, response)

        try:
            data = response.json()
        except ValueError:
            raise empty_content_error(
                self.vendor_name, "response body is not JSON", response.status_code
            ) from None
        if not isinstance(data, dict):
            raise empty_content_error(
                self.vendor_name, "response body is not an object", response.status_code
            )

        blocks = data.get("content")
        first_block = blocks[0] if isinstance(blocks, list) and blocks else None
        content = first_block.get("text") if isinstance(first_block, dict) else None
        if not isinstance(content, str) or not content:
            raise empty_content_error(
                self.vendor_name, "message has no text content", response.status_code
            )

        usage = _usage_from_body(data.get("usage"))
        logger.info(
            "Chat response generated",
            extra={
                "vendor": self.vendor_name,
                "upstream_duration_ms": duration_ms,
                "model": request.model,
                "usage_prompt_tokens": usage.prompt_tokens if usage else None,
                "usage_completion_tokens": usage.completion_tokens if usage else None,
                "response_length": len(content),
                "stop_reason": data.get("stop_reason"),
            },
        )
        return ChatResponse(
            content=content,
            provider=request.provider,
            model=request.model,
            usage=usage,
        )


def _usage_from_body(usage: Any) -> Usage | None:
    if not isinstance(usage, dict):
        return None
    input_tokens = usage.get("input_tokens")
    output_tokens = usage.get("output_tokens")
    total_tokens = None
    if isinstance(input_tokens, int) and isinstance(output_tokens, int):
        total_tokens = input_tokens + output_tokens
    return Usage(
        prompt_tokens=input_tokens,
        completion_tokens=output_tokens,
        total_tokens=total_tokens,
    )

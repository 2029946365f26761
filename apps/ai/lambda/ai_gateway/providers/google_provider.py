"""Google Generative Language (Gemini) provider."""

import logging
import time
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import httpx

from ai_gateway.constants import (
    DEFAULT_TEMPERATURE,
    GOOGLE_GENERATE_CONTENT_URL,
    GOOGLE_MAX_OUTPUT_TOKENS,
    UPSTREAM_TIMEOUT_SECONDS,
)
from ai_gateway.message_mappers import build_google_contents, split_system_message
from ai_gateway.schemas import ChatRequest, ChatResponse, Usage

from .base import empty_content_error, transport_error, upstream_error_from_response

logger = logging.getLogger(__name__)


class GoogleChatProvider:
    vendor_name = "Google"

    def __init__(
        self,
        get_http_client: Callable[[], httpx.Client],
        url_template: str = GOOGLE_GENERATE_CONTENT_URL,
        timeout: float = UPSTREAM_TIMEOUT_SECONDS,
    ) -> None:
        self._get_http_client = get_http_client
        self._url_template = url_template
        self._timeout = timeout

    def build_payload(self, request: ChatRequest) -> dict[str, Any]:
        system_prompt, conversation = split_system_message(request.messages)
        payload: dict[str, Any] = {
            "contents": build_google_contents(conversation),
            "generationConfig": {
                "temperature": DEFAULT_TEMPERATURE,
                "maxOutputTokens": GOOGLE_MAX_OUTPUT_TOKENS,
            },
        }
        if system_prompt is not None:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}
        return payload

    def send(self, request: ChatRequest) -> ChatResponse:
        url = self._url_template.format(model=model_path_segment(request.model))

        start = time.time()
        try:
            # The key travels in the query string; never log the request URL.
            response = self._get_http_client().post(
                url,
                params={"key": request.credential},
                json=self.build_payload(request),
                headers={"content-type": "application/json"},
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

        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            reason = "no candidates returned"
            feedback = data.get("promptFeedback")
            block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            if block_reason:
                reason = f"{reason} (blocked: {block_reason})"
            raise empty_content_error(self.vendor_name, reason, response.status_code)

        content = _first_candidate_text(candidates[0])
        if not content:
            finish_reason = (
                candidates[0].get("finishReason") if isinstance(candidates[0], dict) else None
            )
            reason = "candidate has no text"
            if finish_reason:
                reason = f"{reason} (finish reason: {finish_reason})"
            raise empty_content_error(self.vendor_name, reason, response.status_code)

        usage = _usage_from_metadata(data.get("usageMetadata"))
        logger.info(
            "Chat response generated",
            extra={
                "vendor": self.vendor_name,
                "upstream_duration_ms": duration_ms,
                "model": request.model,
                "usage_prompt_tokens": usage.prompt_tokens if usage else None,
                "usage_completion_tokens": usage.completion_tokens if usage else None,
                "response_length": len(content),
            },
        )
        return ChatResponse(
            content=content,
            provider=request.provider,
            model=request.model,
            usage=usage,
        )


def model_path_segment(model: str) -> str:
    """Escape the caller's model name as a single URL path segment.

    A leading ``models/`` (the resource name Google returns from its model list)
    is dropped, since the URL template already carries it.
    """
    return quote(model.removeprefix("models/"), safe="")


def _first_candidate_text(candidate: Any) -> str | None:
    if not isinstance(candidate, dict):
        return None
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None


def _usage_from_metadata(metadata: Any) -> Usage | None:
    if not isinstance(metadata, dict):
        return None
    return Usage(
        prompt_tokens=metadata.get("promptTokenCount"),
        completion_tokens=metadata.get("candidatesTokenCount"),
        total_tokens=metadata.get("totalTokenCount"),
    )

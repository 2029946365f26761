"""OpenAI-compatible chat completions provider (OpenAI, Mistral, OpenRouter, DeepSeek)."""

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

import httpx
from openai import APIConnectionError, APIError, APIStatusError, APITimeoutError, OpenAI

from ai_gateway.constants import (
    DEEPSEEK_BASE_URL,
    DEFAULT_TEMPERATURE,
    MISTRAL_BASE_URL,
    OPENAI_BASE_URL,
    OPENROUTER_BASE_URL,
    OPENROUTER_REFERER,
    OPENROUTER_TITLE,
    UPSTREAM_TIMEOUT_SECONDS,
)
from ai_gateway.errors import UpstreamError
from ai_gateway.message_mappers import build_openai_messages
from ai_gateway.schemas import ChatRequest, ChatResponse, Usage

from .base import (
    empty_content_error,
    extract_error_message,
    generic_error_message,
    transport_error,
)

logger = logging.getLogger(__name__)

# The SDK unwraps {"error": {...}} before exposing the body, Mistral sends a flat body.
_SDK_ERROR_PATHS = (("message",), ("error", "message"), ("detail",))


class OpenAICompatibleChatProvider:
    def __init__(
        self,
        vendor_name: str,
        base_url: str,
        get_http_client: Callable[[], httpx.Client],
        extra_headers: Mapping[str, str] | None = None,
        timeout: float = UPSTREAM_TIMEOUT_SECONDS,
    ) -> None:
        self.vendor_name = vendor_name
        self._base_url = base_url
        self._get_http_client = get_http_client
        self._extra_headers = dict(extra_headers or {})
        self._timeout = timeout

    def _client(self, credential: str) -> OpenAI:
        return OpenAI(
            api_key=credential,
            base_url=self._base_url,
            http_client=self._get_http_client(),
            default_headers=self._extra_headers or None,
            max_retries=0,
            timeout=self._timeout,
        )

    def send(self, request: ChatRequest) -> ChatResponse:
        client = self._client(request.credential)

        start = time.time()
        try:
            completion = client.chat.completions.create(
                model=request.model,
                messages=build_openai_messages(request.messages),
                temperature=DEFAULT_TEMPERATURE,
            )
        except APIStatusError as e:
            message = extract_error_message(e.body, _SDK_ERROR_PATHS) or generic_error_message(
                self.vendor_name, e.status_code
            )
            logger.warning(
                "Upstream API returned an error",
                extra={
                    "vendor": self.vendor_name,
                    "upstream_status": e.status_code,
                    "error_message": message,
                },
            )
            raise UpstreamError(message, upstream_status=e.status_code) from None
        except APIConnectionError as e:
            raise transport_error(
                self.vendor_name, e, timed_out=isinstance(e, APITimeoutError)
            ) from None
        except APIError as e:
            raise empty_content_error(self.vendor_name, "malformed response body") from e
        except ValueError:
            # A JSON-labelled 2xx body that does not parse escapes the SDK as JSONDecodeError.
            raise empty_content_error(self.vendor_name, "response body is not JSON") from None
        duration_ms = int((time.time() - start) * 1000)

        content = _first_choice_content(completion)
        if not content:
            raise empty_content_error(self.vendor_name, "completion has no message content")

        usage = _usage_from_completion(completion)
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


def _first_choice_content(completion: Any) -> str | None:
    # 2xx bodies without a JSON content type come back from the SDK as plain text.
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return content if isinstance(content, str) else None


def _usage_from_completion(completion: Any) -> Usage | None:
    usage = getattr(completion, "usage", None)
    if usage is None:
        return None
    return Usage(
        prompt_tokens=getattr(usage, "prompt_tokens", None),
        completion_tokens=getattr(usage, "completion_tokens", None),
        total_tokens=getattr(usage, "total_tokens", None),
    )


def build_openai_provider(
    get_http_client: Callable[[], httpx.Client],
) -> OpenAICompatibleChatProvider:
    return OpenAICompatibleChatProvider("OpenAI", OPENAI_BASE_URL, get_http_client)


def build_mistral_provider(
    get_http_client: Callable[[], httpx.Client],
) -> OpenAICompatibleChatProvider:
    return OpenAICompatibleChatProvider("Mistral", MISTRAL_BASE_URL, get_http_client)


def build_openrouter_provider(
    get_http_client: Callable[[], httpx.Client],
) -> OpenAICompatibleChatProvider:
    return OpenAICompatibleChatProvider(
        "OpenRouter",
        OPENROUTER_BASE_URL,
        get_http_client,
        extra_headers={"HTTP-Referer": OPENROUTER_REFERER, "X-Title": OPENROUTER_TITLE},
    )


def build_deepseek_provider(
    get_http_client: Callable[[], httpx.Client],
) -> OpenAICompatibleChatProvider:
    return OpenAICompatibleChatProvider("DeepSeek", DEEPSEEK_BASE_URL, get_http_client)

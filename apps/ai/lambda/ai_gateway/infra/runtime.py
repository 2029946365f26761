"""Runtime infrastructure helpers for logging, HTTP transport, and provider wiring."""

import logging
import os
from functools import lru_cache

import httpx

from ai_gateway.constants import UPSTREAM_TIMEOUT_SECONDS
from ai_gateway.orchestration.base import GatewayOrchestrator
from ai_gateway.orchestration.direct import DirectGatewayOrchestrator
from ai_gateway.orchestration.langgraph_flow import LangGraphGatewayOrchestrator
from ai_gateway.providers.anthropic_provider import AnthropicChatProvider
from ai_gateway.providers.base import ChatProvider
from ai_gateway.providers.google_provider import GoogleChatProvider
from ai_gateway.providers.openai_provider import (
    build_deepseek_provider,
    build_mistral_provider,
    build_openai_provider,
    build_openrouter_provider,
)
from ai_gateway.rate_limiter import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

ORCHESTRATOR_ENV_VAR = "AI_GATEWAY_ORCHESTRATOR"
LOG_LEVEL_ENV_VAR = "AI_GATEWAY_LOG_LEVEL"

# httpx logs full request URLs at INFO, and the Google key is part of the URL.
_QUIET_LOGGERS = ("httpx", "httpcore", "openai")


@lru_cache(maxsize=1)
def configure_logging() -> None:
    """Set package log level and quiet transport loggers (called once via lru_cache)."""
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        logger.warning(
            "Unknown log level; falling back to INFO", extra={"log_level": level_name}
        )
        level = logging.INFO

    logging.getLogger("ai_gateway").setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@lru_cache(maxsize=1)
def get_http_client() -> httpx.Client:
    """Shared outbound client; connection pooling is reused across warm invocations."""
    return httpx.Client(timeout=UPSTREAM_TIMEOUT_SECONDS)


def build_providers() -> dict[str, ChatProvider]:
    return {
        "openai": build_openai_provider(get_http_client),
        "mistral": build_mistral_provider(get_http_client),
        "openrouter": build_openrouter_provider(get_http_client),
        "deepseek": build_deepseek_provider(get_http_client),
        "anthropic": AnthropicChatProvider(get_http_client),
        "google": GoogleChatProvider(get_http_client),
    }


def build_orchestrator(providers: dict[str, ChatProvider]) -> GatewayOrchestrator:
    strategy = os.environ.get(ORCHESTRATOR_ENV_VAR, "direct").strip().lower()
    if strategy == "langgraph":
        return LangGraphGatewayOrchestrator(providers=providers)
    if strategy != "direct":
        logger.warning(
            "Unknown orchestrator strategy; using direct dispatch",
            extra={"strategy": strategy},
        )
    return DirectGatewayOrchestrator(providers=providers)


@lru_cache(maxsize=1)
def get_rate_limiter() -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter()

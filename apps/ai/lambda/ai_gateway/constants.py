"""Shared constants and literal types for the AI gateway Lambda."""

from typing import Literal, get_args

Provider = Literal["openai", "anthropic", "mistral", "openrouter", "google", "deepseek"]
ApiStyle = Literal["openai-chat", "anthropic-messages", "google-generative-language"]
MessageRole = Literal["system", "user", "assistant"]

SUPPORTED_PROVIDERS: tuple[Provider, ...] = get_args(Provider)

OPENAI_BASE_URL = "https://api.openai.com/v1"
MISTRAL_BASE_URL = "https://api.mistral.ai/v1"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEEPSEEK_BASE_URL = "https://api.deepseek.com"
ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
GOOGLE_GENERATE_CONTENT_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
)

ANTHROPIC_VERSION = "2023-06-01"
OPENROUTER_REFERER = "https://multitasks.fr"
OPENROUTER_TITLE = "MultiTask Pro"

DEFAULT_TEMPERATURE = 0.7
ANTHROPIC_MAX_TOKENS = 2048
GOOGLE_MAX_OUTPUT_TOKENS = 2048
UPSTREAM_TIMEOUT_SECONDS = 30.0

RATE_LIMIT_MAX_REQUESTS = 30
RATE_LIMIT_WINDOW_SECONDS = 60.0
RATE_LIMIT_MAX_TRACKED_KEYS = 10_000

INVALID_REQUEST_MESSAGE = "Invalid request. Required: provider, credential, model, messages."
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
UNEXPECTED_ERROR_MESSAGE = "AI service error. Please try again later."

UNKNOWN_CLIENT_KEY = "unknown"

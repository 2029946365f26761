"""Provider metadata registry."""

from dataclasses import dataclass

from .constants import ApiStyle, Provider


@dataclass(frozen=True)
class ProviderInfo:
    name: str
    default_model: str
    api_style: ApiStyle


PROVIDER_INFO: dict[Provider, ProviderInfo] = {
    # --- OpenAI-compatible chat completions ---
    "openai": ProviderInfo(name="OpenAI", default_model="gpt-4o-mini", api_style="openai-chat"),
    "mistral": ProviderInfo(
        name="Mistral", default_model="mistral-small-latest", api_style="openai-chat"
    ),
    "openrouter": ProviderInfo(
        name="OpenRouter", default_model="openai/gpt-4o-mini", api_style="openai-chat"
    ),
    "deepseek": ProviderInfo(
        name="DeepSeek", default_model="deepseek-chat", api_style="openai-chat"
    ),
    # --- Vendor-specific message formats ---
    "anthropic": ProviderInfo(
        name="Anthropic",
        default_model="claude-3-haiku-20240307",
        api_style="anthropic-messages",
    ),
    "google": ProviderInfo(
        name="Google",
        default_model="gemini-1.5-flash",
        api_style="google-generative-language",
    ),
}

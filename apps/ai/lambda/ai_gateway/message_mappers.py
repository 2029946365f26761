"""Conversion helpers between gateway messages and provider-specific formats."""

from typing import Any

from .schemas import ChatMessage


def split_system_message(messages: list[ChatMessage]) -> tuple[str | None, list[ChatMessage]]:
    """Return the first system message's content and the remaining turns in order."""
    system_prompt = next((m.content for m in messages if m.role == "system"), None)
    conversation = [m for m in messages if m.role != "system"]
    return system_prompt, conversation


def build_openai_messages(messages: list[ChatMessage]) -> list[dict[str, Any]]:
    """OpenAI-style chat completions take role/content pairs as-is."""
    return [{"role": m.role, "content": m.content} for m in messages]


def build_anthropic_messages(messages: list[ChatMessage]) -> list[dict[str, Any]]:
    return [
        {"role": "assistant" if m.role == "assistant" else "user", "content": m.content}
        for m in messages
    ]


def build_google_contents(messages: list[ChatMessage]) -> list[dict[str, Any]]:
    return [
        {
            "role": "model" if m.role == "assistant" else "user",
            "parts": [{"text": m.content}],
        }
        for m in messages
    ]

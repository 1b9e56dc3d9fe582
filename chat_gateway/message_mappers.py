"""Conversion helpers between internal messages and provider-specific formats."""

from collections.abc import Sequence
from typing import Any

from .schemas import Message

GEMINI_ROLES = {"user": "user", "assistant": "model"}


def build_openai_messages(history: Sequence[Message]) -> list[dict[str, str]]:
    """Chat-completions messages; also used for Groq's OpenAI-compatible API."""
    return [{"role": message.role, "content": message.content} for message in history]


def build_anthropic_messages(history: Sequence[Message]) -> list[dict[str, str]]:
    return [{"role": message.role, "content": message.content} for message in history]


def build_gemini_contents(history: Sequence[Message]) -> list[dict[str, Any]]:
    """Gemini names the assistant role "model" and wraps text in a parts array."""
    return [
        {"role": GEMINI_ROLES[message.role], "parts": [{"text": message.content}]}
        for message in history
    ]

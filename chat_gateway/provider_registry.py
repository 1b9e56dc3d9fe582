"""Static provider registry."""

from dataclasses import dataclass

from .constants import (
    CHATGPT_MODEL,
    CLAUDE_MODEL,
    GEMINI_GENERATE_CONTENT_URL,
    GEMINI_MODEL,
    GROQ_BASE_URL,
    LLAMA_MODEL,
    OPENAI_BASE_URL,
    ProviderId,
)
from .errors import InvalidProviderError


@dataclass(frozen=True)
class ProviderDescriptor:
    id: ProviderId
    display_name: str
    accent_color: str
    model: str
    endpoint: str
    temperature: float | None = None
    max_output_tokens: int | None = None
    reports_usage: bool = True


PROVIDERS: dict[str, ProviderDescriptor] = {
    # --- Groq-hosted Llama (OpenAI-compatible) ---
    "LLAMA": ProviderDescriptor(
        id="LLAMA",
        display_name="Llama 3 Groq 70B Tool Use",
        accent_color="#007AFF",
        model=LLAMA_MODEL,
        endpoint=GROQ_BASE_URL,
        temperature=0.5,
        max_output_tokens=4096,
    ),
    # --- OpenAI ---
    "CHATGPT": ProviderDescriptor(
        id="CHATGPT",
        display_name="ChatGPT 4.0",
        accent_color="#34C759",
        model=CHATGPT_MODEL,
        endpoint=OPENAI_BASE_URL,
    ),
    # --- Anthropic ---
    "CLAUDE": ProviderDescriptor(
        id="CLAUDE",
        display_name="Claude 3.5 Sonnet",
        accent_color="#5856D6",
        model=CLAUDE_MODEL,
        endpoint="https://api.anthropic.com",
        temperature=0.3,
        max_output_tokens=1000,
    ),
    # --- Google Gemini (no usage metadata, token count is estimated) ---
    "GEMINI": ProviderDescriptor(
        id="GEMINI",
        display_name="Gemini 1.5 PRO",
        accent_color="#FF9500",
        model=GEMINI_MODEL,
        endpoint=GEMINI_GENERATE_CONTENT_URL,
        reports_usage=False,
    ),
}


def get_provider(provider_id: str) -> ProviderDescriptor:
    descriptor = PROVIDERS.get(provider_id)
    if descriptor is None:
        raise InvalidProviderError(provider_id)
    return descriptor

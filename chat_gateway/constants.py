"""Shared constants and literal types for the chat gateway."""

from typing import Literal

ProviderId = Literal["LLAMA", "CHATGPT", "CLAUDE", "GEMINI"]
PROVIDER_IDS: tuple[ProviderId, ...] = ("LLAMA", "CHATGPT", "CLAUDE", "GEMINI")
DEFAULT_PROVIDER: ProviderId = "LLAMA"

OrchestratorKind = Literal["direct", "langgraph"]

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
OPENAI_BASE_URL = "https://api.openai.com/v1"
GEMINI_GENERATE_CONTENT_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-pro:generateContent"
)

LLAMA_MODEL = "llama3-groq-70b-8192-tool-use-preview"
CHATGPT_MODEL = "gpt-4"
CLAUDE_MODEL = "claude-3-sonnet-20240229"
GEMINI_MODEL = "gemini-pro"

# Gemini responses carry no usage metadata; tokens are estimated from characters.
GEMINI_TOKENS_PER_CHARACTER = 1.3
TOKENS_PER_PRICE_UNIT = 1_000_000

DEFAULT_REQUEST_TIMEOUT_SECONDS = 60.0
LANGSMITH_PROJECT = "multi-llm-chat"
SSM_API_KEY_PARAMETER_TEMPLATE = "{prefix}/{provider}-api-key"

"""Google Gemini generateContent provider."""

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from langchain_core.runnables import Runnable

from chat_gateway.message_mappers import build_gemini_contents
from chat_gateway.pricing import estimate_tokens
from chat_gateway.provider_registry import ProviderDescriptor
from chat_gateway.schemas import Message

from .base import ProviderReply, provider_call_errors

logger = logging.getLogger(__name__)


class GeminiChatProvider:
    """Gemini returns no usage accounting, so the token count is always estimated."""

    def __init__(
        self,
        descriptor: ProviderDescriptor,
        get_generate_content_runnable: Callable[[], Runnable[dict[str, Any], dict[str, Any]]],
    ) -> None:
        self._descriptor = descriptor
        self._get_generate_content_runnable = get_generate_content_runnable

    def send_chat(self, history: Sequence[Message]) -> ProviderReply:
        provider_id = self._descriptor.id
        body = {"contents": build_gemini_contents(history)}

        with provider_call_errors(provider_id):
            start = time.time()
            response = self._get_generate_content_runnable().invoke(
                body,
                config={
                    "run_name": "chat_gateway_request",
                    "tags": ["chat-gateway", provider_id, self._descriptor.model],
                    "metadata": {"message_count": len(history)},
                },
            )
            duration_ms = int((time.time() - start) * 1000)
            content = response["candidates"][0]["content"]["parts"][0]["text"]
            if not isinstance(content, str):
                raise ValueError(f"candidate text is not a string: {content!r}")
            response_id = response.get("responseId", "")

        token_count = estimate_tokens(history)
        logger.info(
            "Chat response generated",
            extra={
                "provider": provider_id,
                "provider_duration_ms": duration_ms,
                "model": self._descriptor.model,
                "estimated_tokens": token_count,
                "response_length": len(content),
            },
        )
        return ProviderReply(
            text=content,
            token_count=token_count,
            token_count_estimated=True,
            response_id=response_id,
            duration_seconds=round(duration_ms / 1000, 2),
        )

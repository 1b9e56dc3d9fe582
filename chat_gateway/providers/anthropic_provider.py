"""Anthropic messages-API provider for Claude."""

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from langchain_core.runnables import Runnable

from chat_gateway.message_mappers import build_anthropic_messages
from chat_gateway.provider_registry import ProviderDescriptor
from chat_gateway.schemas import Message

from .base import ProviderReply, provider_call_errors

logger = logging.getLogger(__name__)


class AnthropicChatProvider:
    def __init__(
        self,
        descriptor: ProviderDescriptor,
        get_messages_runnable: Callable[[], Runnable[dict[str, Any], Any]],
    ) -> None:
        self._descriptor = descriptor
        self._get_messages_runnable = get_messages_runnable

    def send_chat(self, history: Sequence[Message]) -> ProviderReply:
        provider_id = self._descriptor.id
        params: dict[str, Any] = {
            "model": self._descriptor.model,
            "max_tokens": self._descriptor.max_output_tokens,
            "temperature": self._descriptor.temperature,
            "messages": build_anthropic_messages(history),
        }

        with provider_call_errors(provider_id):
            start = time.time()
            response = self._get_messages_runnable().invoke(
                params,
                config={
                    "run_name": "chat_gateway_request",
                    "tags": ["chat-gateway", provider_id, self._descriptor.model],
                    "metadata": {"message_count": len(history)},
                },
            )
            duration_ms = int((time.time() - start) * 1000)

            content = response.content[0].text
            if not isinstance(content, str):
                raise ValueError(f"content text is not a string: {content!r}")
            input_tokens = response.usage.input_tokens
            output_tokens = response.usage.output_tokens
            token_count = input_tokens + output_tokens

        logger.info(
            "Chat response generated",
            extra={
                "provider": provider_id,
                "provider_duration_ms": duration_ms,
                "model": self._descriptor.model,
                "usage_prompt_tokens": input_tokens,
                "usage_completion_tokens": output_tokens,
                "response_length": len(content),
                "response_id": getattr(response, "id", ""),
            },
        )
        return ProviderReply(
            text=content,
            token_count=token_count,
            token_count_estimated=False,
            response_id=getattr(response, "id", "") or "",
            duration_seconds=round(duration_ms / 1000, 2),
        )

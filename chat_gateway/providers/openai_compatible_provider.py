"""OpenAI chat-completions provider, shared by ChatGPT and Groq-hosted Llama."""

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from langchain_core.runnables import Runnable

from chat_gateway.message_mappers import build_openai_messages
from chat_gateway.provider_registry import ProviderDescriptor
from chat_gateway.schemas import Message

from .base import ProviderReply, provider_call_errors

logger = logging.getLogger(__name__)


class OpenAICompatibleChatProvider:
    def __init__(
        self,
        descriptor: ProviderDescriptor,
        get_chat_completions_runnable: Callable[[], Runnable[dict[str, Any], Any]],
    ) -> None:
        self._descriptor = descriptor
        self._get_chat_completions_runnable = get_chat_completions_runnable

    def build_request_params(self, history: Sequence[Message]) -> dict[str, Any]:
        request_params: dict[str, Any] = {
            "model": self._descriptor.model,
            "messages": build_openai_messages(history),
        }
        if self._descriptor.temperature is not None:
            request_params["temperature"] = self._descriptor.temperature
        if self._descriptor.max_output_tokens is not None:
            request_params["max_tokens"] = self._descriptor.max_output_tokens
        return request_params

    def send_chat(self, history: Sequence[Message]) -> ProviderReply:
        provider_id = self._descriptor.id
        request_params = self.build_request_params(history)

        with provider_call_errors(provider_id):
            start = time.time()
            response = self._get_chat_completions_runnable().invoke(
                request_params,
                config={
                    "run_name": "chat_gateway_request",
                    "tags": ["chat-gateway", provider_id, self._descriptor.model],
                    "metadata": {"message_count": len(history)},
                },
            )
            duration_ms = int((time.time() - start) * 1000)

            content = response.choices[0].message.content or ""
            if not isinstance(content, str):
                raise ValueError(f"message content is not a string: {content!r}")
            total_tokens = response.usage.total_tokens
            if total_tokens is None:
                raise ValueError("usage.total_tokens is missing")

        logger.info(
            "Chat response generated",
            extra={
                "provider": provider_id,
                "provider_duration_ms": duration_ms,
                "model": getattr(response, "model", self._descriptor.model),
                "usage_total_tokens": total_tokens,
                "response_length": len(content),
                "response_id": getattr(response, "id", ""),
            },
        )
        return ProviderReply(
            text=content,
            token_count=total_tokens,
            token_count_estimated=False,
            response_id=getattr(response, "id", "") or "",
            duration_seconds=round(duration_ms / 1000, 2),
        )

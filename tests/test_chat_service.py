import json
import unittest
from types import SimpleNamespace
from typing import Any
from unittest.mock import Mock

import anthropic
import httpx
import openai

from chat_gateway.errors import BadRequestError, InvalidProviderError, ProviderCallError
from chat_gateway.orchestration.direct import DirectChatOrchestrator
from chat_gateway.provider_registry import PROVIDERS
from chat_gateway.providers.anthropic_provider import AnthropicChatProvider
from chat_gateway.providers.gemini_provider import GeminiChatProvider
from chat_gateway.providers.openai_compatible_provider import OpenAICompatibleChatProvider
from chat_gateway.schemas import ChatRequest, Message
from chat_gateway.services.chat_service import ChatService

PRICES = {"LLAMA": 0.89, "CHATGPT": 30.0, "CLAUDE": 3.0, "GEMINI": 3.5}


class StubRunnable:
    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[Any] = []

    def invoke(self, params: Any, config: Any = None) -> Any:
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.response


def http_response(status_code: int, url: str, body: Any) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("POST", url), json=body)


def openai_response(content: str, total_tokens: int) -> SimpleNamespace:
    return SimpleNamespace(
        id="chatcmpl-1",
        model="stub",
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(total_tokens=total_tokens),
    )


class ChatServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runnables = {
            "LLAMA": StubRunnable(openai_response("llama says hi", total_tokens=120)),
            "CHATGPT": StubRunnable(openai_response("gpt says hi", total_tokens=80)),
            "CLAUDE": StubRunnable(
                SimpleNamespace(
                    id="msg_1",
                    content=[SimpleNamespace(text="4")],
                    usage=SimpleNamespace(input_tokens=10, output_tokens=5),
                )
            ),
            "GEMINI": StubRunnable(
                {"candidates": [{"content": {"parts": [{"text": "gemini says hi"}]}}]}
            ),
        }
        providers = {
            "LLAMA": OpenAICompatibleChatProvider(PROVIDERS["LLAMA"], lambda: self.runnables["LLAMA"]),
            "CHATGPT": OpenAICompatibleChatProvider(
                PROVIDERS["CHATGPT"], lambda: self.runnables["CHATGPT"]
            ),
            "CLAUDE": AnthropicChatProvider(PROVIDERS["CLAUDE"], lambda: self.runnables["CLAUDE"]),
            "GEMINI": GeminiChatProvider(PROVIDERS["GEMINI"], lambda: self.runnables["GEMINI"]),
        }
        self.service = ChatService(
            prices=PRICES, orchestrator=DirectChatOrchestrator(providers=providers)
        )

    def test_dispatch_returns_reply_and_cost_for_every_provider(self) -> None:
        history = [Message(role="user", content="hello there")]
        expected = {
            "LLAMA": ("llama says hi", 120),
            "CHATGPT": ("gpt says hi", 80),
            "CLAUDE": ("4", 15),
            # "hello there" is 11 characters.
            "GEMINI": ("gemini says hi", 11 * 1.3),
        }

        for provider_id, (text, tokens) in expected.items():
            with self.subTest(provider=provider_id):
                result = self.service.dispatch(provider_id, history)

                self.assertEqual(result.provider, provider_id)
                self.assertEqual(result.reply_text, text)
                self.assertAlmostEqual(result.token_count, tokens)
                self.assertAlmostEqual(
                    result.cost, (tokens / 1_000_000) * PRICES[provider_id], places=15
                )
                self.assertEqual(result.token_count_estimated, provider_id == "GEMINI")

    def test_claude_example_costs_forty_five_millionths(self) -> None:
        result = self.service.dispatch("CLAUDE", [Message(role="user", content="2+2?")])

        self.assertEqual(result.reply_text, "4")
        self.assertAlmostEqual(result.cost, 0.000045, places=12)

    def test_unknown_provider_fails_before_any_network_call(self) -> None:
        with self.assertRaises(InvalidProviderError):
            self.service.dispatch("MISTRAL", [Message(role="user", content="hi")])

        for runnable in self.runnables.values():
            self.assertEqual(runnable.calls, [])

    def test_empty_history_is_rejected(self) -> None:
        with self.assertRaises(BadRequestError):
            self.service.dispatch("LLAMA", [])

        self.assertEqual(self.runnables["LLAMA"].calls, [])

    def test_zero_token_reply_costs_nothing(self) -> None:
        self.runnables["CHATGPT"].response = openai_response("", total_tokens=0)

        result = self.service.dispatch("CHATGPT", [Message(role="user", content="hi")])

        self.assertEqual(result.cost, 0.0)

    def test_handle_chat_adds_cost_to_the_selected_provider_only(self) -> None:
        request = ChatRequest(
            provider="CLAUDE",
            messages=[{"role": "user", "content": "2+2?"}],
            costs={"CLAUDE": 0.001, "LLAMA": 0.5},
        )

        response = self.service.handle_chat(request)

        self.assertEqual(response.message, "4")
        self.assertEqual(response.provider, "CLAUDE")
        self.assertAlmostEqual(response.cost, 0.000045, places=12)
        self.assertAlmostEqual(response.costs["CLAUDE"], 0.001045, places=12)
        self.assertEqual(response.costs["LLAMA"], 0.5)
        self.assertEqual(response.costs["CHATGPT"], 0.0)
        self.assertEqual(response.costs["GEMINI"], 0.0)

    def test_rejection_leaves_running_costs_unchanged_for_every_provider(self) -> None:
        body = {"error": {"message": "rate limited"}}
        errors = {
            "LLAMA": openai.RateLimitError(
                "Error code: 429",
                response=http_response(429, "https://api.groq.com/openai/v1/chat/completions", body),
                body=body,
            ),
            "CHATGPT": openai.RateLimitError(
                "Error code: 429",
                response=http_response(429, "https://api.openai.com/v1/chat/completions", body),
                body=body,
            ),
            "CLAUDE": anthropic.RateLimitError(
                "Error code: 429",
                response=http_response(429, "https://api.anthropic.com/v1/messages", body),
                body=body,
            ),
        }
        gemini_response = http_response(429, "https://generativelanguage.googleapis.com/x", body)
        errors["GEMINI"] = httpx.HTTPStatusError(
            "429", request=gemini_response.request, response=gemini_response
        )
        running = {"LLAMA": 0.5, "CHATGPT": 0.25, "CLAUDE": 0.125, "GEMINI": 0.0625}

        for provider_id, error in errors.items():
            with self.subTest(provider=provider_id):
                self.runnables[provider_id].error = error
                request = ChatRequest(
                    provider=provider_id,
                    messages=[{"role": "user", "content": "hi"}],
                    costs=running,
                )

                with self.assertRaises(ProviderCallError) as ctx:
                    self.service.handle_chat(request)

                self.assertEqual(ctx.exception.provider_id, provider_id)
                self.assertEqual(json.loads(ctx.exception.detail), body)
                self.assertEqual(request.costs, running)

    def test_dispatch_delegates_history_to_orchestrator(self) -> None:
        orchestrator = Mock()
        orchestrator.run.return_value = SimpleNamespace(
            text="assistant reply",
            token_count=2_000_000,
            token_count_estimated=False,
            response_id="resp_123",
            duration_seconds=0.42,
        )
        service = ChatService(prices=PRICES, orchestrator=orchestrator)
        history = [
            Message(role="user", content="hi"),
            Message(role="assistant", content="hello"),
            Message(role="user", content="again"),
        ]

        result = service.dispatch("LLAMA", history)

        orchestrator.run.assert_called_once_with("LLAMA", history)
        self.assertAlmostEqual(result.cost, 1.78)
        self.assertEqual(result.duration_seconds, 0.42)


if __name__ == "__main__":
    unittest.main()

"""LangGraph-based orchestration strategy for provider dispatch."""

from collections.abc import Mapping, Sequence
from typing import NotRequired, TypedDict, cast

from langgraph.graph import END, START, StateGraph

from chat_gateway.errors import InvalidProviderError
from chat_gateway.providers.base import ChatProvider, ProviderReply
from chat_gateway.schemas import Message

from .base import ChatOrchestrator


class ChatGraphState(TypedDict):
    provider_id: str
    history: Sequence[Message]
    reply: NotRequired[ProviderReply]


class LangGraphChatOrchestrator(ChatOrchestrator):
    def __init__(self, providers: Mapping[str, ChatProvider]) -> None:
        self._providers = providers
        graph = StateGraph(ChatGraphState)
        graph.add_node("send_chat", self._send_chat)
        graph.add_edge(START, "send_chat")
        graph.add_edge("send_chat", END)
        self._graph = graph.compile()

    def _send_chat(self, state: ChatGraphState) -> dict[str, ProviderReply]:
        provider_id = state["provider_id"]
        provider = self._providers.get(provider_id)
        if provider is None:
            raise InvalidProviderError(provider_id)
        return {"reply": provider.send_chat(state["history"])}

    def run(self, provider_id: str, history: Sequence[Message]) -> ProviderReply:
        initial_state: ChatGraphState = {"provider_id": provider_id, "history": history}
        result = cast("ChatGraphState", self._graph.invoke(initial_state))
        reply = result.get("reply")
        if reply is None:
            raise RuntimeError("LangGraph execution did not return a provider reply")
        return reply

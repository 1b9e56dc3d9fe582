"""Direct provider dispatch orchestration."""

from collections.abc import Mapping, Sequence

from chat_gateway.errors import InvalidProviderError
from chat_gateway.orchestration.base import ChatOrchestrator
from chat_gateway.providers.base import ChatProvider, ProviderReply
from chat_gateway.schemas import Message


class DirectChatOrchestrator(ChatOrchestrator):
    def __init__(self, providers: Mapping[str, ChatProvider]) -> None:
        self._providers = providers

    def run(self, provider_id: str, history: Sequence[Message]) -> ProviderReply:
        provider = self._providers.get(provider_id)
        if provider is None:
            raise InvalidProviderError(provider_id)
        return provider.send_chat(history)

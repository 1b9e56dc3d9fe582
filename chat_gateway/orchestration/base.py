"""Orchestration interfaces for provider dispatch."""

from collections.abc import Sequence
from typing import Protocol

from chat_gateway.providers.base import ProviderReply
from chat_gateway.schemas import Message


class ChatOrchestrator(Protocol):
    def run(self, provider_id: str, history: Sequence[Message]) -> ProviderReply:
        """Send the history to the selected provider using this dispatch strategy."""

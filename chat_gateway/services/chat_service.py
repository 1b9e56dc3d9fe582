"""Application service for chat requests."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from chat_gateway.errors import BadRequestError
from chat_gateway.ledger import CostLedger
from chat_gateway.orchestration.base import ChatOrchestrator
from chat_gateway.pricing import compute_cost
from chat_gateway.provider_registry import get_provider
from chat_gateway.schemas import ChatRequest, ChatResponse, Message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallResult:
    provider: str
    reply_text: str
    token_count: float
    token_count_estimated: bool
    cost: float
    duration_seconds: float


class ChatService:
    def __init__(
        self,
        prices: Mapping[str, float],
        orchestrator: ChatOrchestrator,
    ) -> None:
        self._prices = prices
        self._orchestrator = orchestrator

    def dispatch(self, provider_id: str, history: Sequence[Message]) -> CallResult:
        """Send ``history`` to one provider and price the reply.

        Raises InvalidProviderError before any network call for an unknown id,
        and ProviderCallError for every failure of the call itself.
        """
        descriptor = get_provider(provider_id)
        if not history:
            raise BadRequestError("Conversation history must contain at least one message")

        message_count = len(history)
        logger.info(
            "Chat request received",
            extra={"provider": provider_id, "message_count": message_count},
        )

        reply = self._orchestrator.run(provider_id, history)
        cost = compute_cost(reply.token_count, self._prices[provider_id])

        logger.info(
            "Chat call priced",
            extra={
                "provider": provider_id,
                "model": descriptor.model,
                "token_count": reply.token_count,
                "token_count_estimated": reply.token_count_estimated,
                "cost": cost,
                "response_id": reply.response_id,
            },
        )
        return CallResult(
            provider=provider_id,
            reply_text=reply.text,
            token_count=reply.token_count,
            token_count_estimated=reply.token_count_estimated,
            cost=cost,
            duration_seconds=reply.duration_seconds,
        )

    def handle_chat(self, request: ChatRequest) -> ChatResponse:
        ledger = CostLedger.from_mapping(request.costs)
        result = self.dispatch(request.provider, request.messages)
        ledger.record(result.provider, result.cost)
        return ChatResponse(
            message=result.reply_text,
            provider=result.provider,
            cost=result.cost,
            token_count=result.token_count,
            token_count_estimated=result.token_count_estimated,
            costs=ledger.snapshot(),
            duration_seconds=result.duration_seconds,
        )

"""In-process conversation state: transcript, selected provider and running costs."""

import logging
import threading

from chat_gateway.constants import DEFAULT_PROVIDER
from chat_gateway.errors import ConversationBusyError, ProviderCallError
from chat_gateway.ledger import CostLedger
from chat_gateway.provider_registry import get_provider
from chat_gateway.schemas import Message

from .chat_service import CallResult, ChatService

logger = logging.getLogger(__name__)


class ChatSession:
    """One user's conversation.

    Only one call may be in flight at a time; a second ``send`` while the first
    is still waiting on its provider raises ConversationBusyError rather than
    interleaving history updates.
    """

    def __init__(self, service: ChatService, provider_id: str = DEFAULT_PROVIDER) -> None:
        self._service = service
        self._provider_id = get_provider(provider_id).id
        self._history: list[Message] = []
        self._ledger = CostLedger()
        self._in_flight = threading.Lock()

    @property
    def provider_id(self) -> str:
        return self._provider_id

    @property
    def history(self) -> tuple[Message, ...]:
        return tuple(self._history)

    @property
    def ledger(self) -> CostLedger:
        return self._ledger

    def select_provider(self, provider_id: str) -> None:
        self._provider_id = get_provider(provider_id).id

    def send(self, text: str) -> CallResult | None:
        """Append a user turn, dispatch, and append the reply or the error.

        Blank input is ignored. A failed call leaves the ledger untouched and
        puts the error message in the transcript in place of a reply.
        """
        if not text.strip():
            return None

        if not self._in_flight.acquire(blocking=False):
            raise ConversationBusyError("A message is already being sent for this conversation")
        try:
            provider_id = self._provider_id
            self._history.append(Message(role="user", content=text))
            try:
                result = self._service.dispatch(provider_id, list(self._history))
            except ProviderCallError as e:
                logger.warning(
                    "Error sending message",
                    extra={"provider": provider_id, "detail": e.detail},
                )
                self._history.append(Message(role="assistant", content=f"Error: {e}"))
                return None
            except Exception as e:
                # The transcript must never end on an unanswered user turn.
                logger.exception(
                    "Unexpected error sending message",
                    extra={"provider": provider_id, "error_type": type(e).__name__},
                )
                self._history.append(Message(role="assistant", content=f"Error: {e}"))
                return None

            self._history.append(Message(role="assistant", content=result.reply_text))
            self._ledger.record(result.provider, result.cost)
            return result
        finally:
            self._in_flight.release()

    def format_cost(self, provider_id: str) -> str:
        return f"${self._ledger[get_provider(provider_id).id]:.6f}"

"""Multi-provider chat API backend using FastAPI + Mangum for AWS Lambda."""

import logging
from functools import lru_cache

from fastapi import APIRouter, FastAPI, HTTPException
from mangum import Mangum

from chat_gateway.errors import BadRequestError
from chat_gateway.infra.runtime import (
    ensure_langsmith_configured,
    flush_langsmith_traces,
    get_anthropic_runnable,
    get_gemini_runnable,
    get_groq_runnable,
    get_openai_runnable,
)
from chat_gateway.orchestration.base import ChatOrchestrator
from chat_gateway.orchestration.direct import DirectChatOrchestrator
from chat_gateway.orchestration.langgraph_flow import LangGraphChatOrchestrator
from chat_gateway.provider_registry import PROVIDERS
from chat_gateway.providers.anthropic_provider import AnthropicChatProvider
from chat_gateway.providers.base import ChatProvider
from chat_gateway.providers.gemini_provider import GeminiChatProvider
from chat_gateway.providers.openai_compatible_provider import OpenAICompatibleChatProvider
from chat_gateway.schemas import ChatRequest, ChatResponse, ProviderMetadata
from chat_gateway.services.chat_service import ChatService
from chat_gateway.settings import get_settings

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

app = FastAPI()
router = APIRouter(prefix="/api")


def build_providers() -> dict[str, ChatProvider]:
    return {
        "LLAMA": OpenAICompatibleChatProvider(PROVIDERS["LLAMA"], get_groq_runnable),
        "CHATGPT": OpenAICompatibleChatProvider(PROVIDERS["CHATGPT"], get_openai_runnable),
        "CLAUDE": AnthropicChatProvider(PROVIDERS["CLAUDE"], get_anthropic_runnable),
        "GEMINI": GeminiChatProvider(PROVIDERS["GEMINI"], get_gemini_runnable),
    }


@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    # Loading settings validates every key and price before the first provider call.
    settings = get_settings()
    providers = build_providers()
    orchestrator: ChatOrchestrator
    if settings.orchestrator == "langgraph":
        orchestrator = LangGraphChatOrchestrator(providers=providers)
    else:
        orchestrator = DirectChatOrchestrator(providers=providers)
    logger.info(
        "Chat service configured",
        extra={"orchestrator": settings.orchestrator, "providers": sorted(providers)},
    )
    return ChatService(prices=settings.prices(), orchestrator=orchestrator)


@router.get("/providers", response_model=list[ProviderMetadata], response_model_by_alias=True)
def list_providers() -> list[ProviderMetadata]:
    """Return the selectable providers with their display metadata."""
    return [
        ProviderMetadata(
            id=descriptor.id,
            display_name=descriptor.display_name,
            accent_color=descriptor.accent_color,
            model=descriptor.model,
            reports_usage=descriptor.reports_usage,
        )
        for descriptor in PROVIDERS.values()
    ]


@router.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest) -> ChatResponse:
    """Send the conversation to the selected provider and return the reply with its cost."""
    try:
        ensure_langsmith_configured()
        return get_chat_service().handle_chat(request)
    except BadRequestError as e:
        logger.warning("Chat request rejected", extra={"provider": request.provider})
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.exception("Chat request failed", extra={"provider": request.provider})
        raise HTTPException(status_code=502, detail=str(e)) from e
    finally:
        flush_langsmith_traces()


@router.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


app.include_router(router)


handler = Mangum(app)

"""Runtime infrastructure helpers for credentials, tracing, and provider runnables."""

import logging
import os
from functools import lru_cache
from typing import Any

import anthropic
import boto3
import httpx
from langchain_core.runnables import Runnable, RunnableLambda
from langsmith import traceable
from langsmith.run_trees import get_cached_client
from openai import OpenAI

from chat_gateway.constants import LANGSMITH_PROJECT, SSM_API_KEY_PARAMETER_TEMPLATE
from chat_gateway.errors import ConfigurationError
from chat_gateway.provider_registry import PROVIDERS
from chat_gateway.settings import get_settings

logger = logging.getLogger(__name__)


def _get_secure_parameter(ssm_client: Any, parameter_name: str) -> str:
    result = ssm_client.get_parameter(Name=parameter_name, WithDecryption=True)
    value = result["Parameter"].get("Value")
    if not value:
        raise ConfigurationError(f"SSM parameter {parameter_name} has no value")
    return value


@lru_cache(maxsize=None)
def get_api_key(provider_id: str) -> str:
    """Resolve a provider API key from the environment, falling back to SSM."""
    settings = get_settings()
    api_key = settings.api_key_for(provider_id)
    if api_key:
        return api_key

    if not settings.ssm_parameter_prefix:
        raise ConfigurationError(f"Missing API key: {provider_id}_API_KEY")

    parameter_name = SSM_API_KEY_PARAMETER_TEMPLATE.format(
        prefix=settings.ssm_parameter_prefix.rstrip("/"),
        provider=provider_id.lower(),
    )
    logger.info(
        "Reading provider API key from SSM",
        extra={"provider": provider_id, "parameter_name": parameter_name},
    )
    ssm_client = boto3.client("ssm", region_name=settings.aws_region)
    return _get_secure_parameter(ssm_client, parameter_name)


def _configure_langsmith(langsmith_api_key: str | None) -> None:
    if not langsmith_api_key:
        os.environ.pop("LANGSMITH_TRACING", None)
        logger.info("LangSmith tracing disabled because API key is unavailable")
        return

    os.environ["LANGSMITH_TRACING"] = "true"
    os.environ["LANGSMITH_API_KEY"] = langsmith_api_key
    os.environ.setdefault("LANGSMITH_PROJECT", LANGSMITH_PROJECT)


@lru_cache(maxsize=1)
def ensure_langsmith_configured() -> None:
    """Configure LangSmith environment variables (called once via lru_cache)."""
    _configure_langsmith(get_settings().langsmith_api_key)


def flush_langsmith_traces() -> None:
    if os.environ.get("LANGSMITH_TRACING", "").lower() != "true":
        return
    if not os.environ.get("LANGSMITH_API_KEY"):
        return
    try:
        get_cached_client().flush()
    except Exception:
        logger.warning("Failed to flush LangSmith traces", exc_info=True)


# ----------------------------------------------------------------------
# Clients
# ----------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_groq_client() -> OpenAI:
    """Groq serves Llama behind an OpenAI-compatible API."""
    return OpenAI(
        api_key=get_api_key("LLAMA"),
        base_url=PROVIDERS["LLAMA"].endpoint,
        timeout=get_settings().request_timeout_seconds,
        max_retries=0,
    )


@lru_cache(maxsize=1)
def get_openai_client() -> OpenAI:
    return OpenAI(
        api_key=get_api_key("CHATGPT"),
        base_url=PROVIDERS["CHATGPT"].endpoint,
        timeout=get_settings().request_timeout_seconds,
        max_retries=0,
    )


@lru_cache(maxsize=1)
def get_anthropic_client() -> anthropic.Anthropic:
    return anthropic.Anthropic(
        api_key=get_api_key("CLAUDE"),
        base_url=PROVIDERS["CLAUDE"].endpoint,
        timeout=get_settings().request_timeout_seconds,
        max_retries=0,
    )


@lru_cache(maxsize=1)
def get_http_client() -> httpx.Client:
    return httpx.Client(
        timeout=get_settings().request_timeout_seconds,
        headers={"Content-Type": "application/json"},
    )


# ----------------------------------------------------------------------
# Traced raw calls
# ----------------------------------------------------------------------


@traceable(run_type="llm", name="groq.chat.completions.create")
def _invoke_groq_chat_completions(request_params: dict[str, Any]) -> Any:
    return get_groq_client().chat.completions.create(**request_params)


@traceable(run_type="llm", name="openai.chat.completions.create")
def _invoke_openai_chat_completions(request_params: dict[str, Any]) -> Any:
    return get_openai_client().chat.completions.create(**request_params)


@traceable(run_type="llm", name="anthropic.messages.create")
def _invoke_anthropic_messages(params: dict[str, Any]) -> Any:
    return get_anthropic_client().messages.create(**params)


@traceable(run_type="llm", name="gemini.generate_content")
def _invoke_gemini_generate_content(body: dict[str, Any]) -> dict[str, Any]:
    # Gemini takes the API key as a query parameter rather than a header.
    response = get_http_client().post(
        PROVIDERS["GEMINI"].endpoint,
        params={"key": get_api_key("GEMINI")},
        json=body,
    )
    response.raise_for_status()
    return response.json()


@lru_cache(maxsize=1)
def get_groq_runnable() -> Runnable[dict[str, Any], Any]:
    return RunnableLambda(_invoke_groq_chat_completions).with_config(
        {"run_name": "chat_gateway_groq_chat_completions"}
    )


@lru_cache(maxsize=1)
def get_openai_runnable() -> Runnable[dict[str, Any], Any]:
    return RunnableLambda(_invoke_openai_chat_completions).with_config(
        {"run_name": "chat_gateway_openai_chat_completions"}
    )


@lru_cache(maxsize=1)
def get_anthropic_runnable() -> Runnable[dict[str, Any], Any]:
    return RunnableLambda(_invoke_anthropic_messages).with_config(
        {"run_name": "chat_gateway_anthropic_messages"}
    )


@lru_cache(maxsize=1)
def get_gemini_runnable() -> Runnable[dict[str, Any], dict[str, Any]]:
    return RunnableLambda(_invoke_gemini_generate_content).with_config(
        {"run_name": "chat_gateway_gemini_generate_content"}
    )

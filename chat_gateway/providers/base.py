"""Provider interfaces, shared reply model and failure normalization."""

import json
import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from chat_gateway.errors import ConfigurationError, ProviderCallError
from chat_gateway.schemas import Message

logger = logging.getLogger(__name__)

# Raised while digging the reply text or usage out of a success body.
MALFORMED_RESPONSE_ERRORS = (KeyError, IndexError, TypeError, AttributeError, ValueError)


@dataclass(frozen=True)
class ProviderReply:
    text: str
    token_count: float
    token_count_estimated: bool
    response_id: str
    duration_seconds: float


class ChatProvider(Protocol):
    def send_chat(self, history: Sequence[Message]) -> ProviderReply:
        """Send the full conversation history and return the normalized reply."""
        ...


def _serialize_error_body(body: Any) -> str:
    if isinstance(body, str):
        return body
    try:
        return json.dumps(body)
    except (TypeError, ValueError):
        return str(body)


def describe_provider_failure(exc: BaseException) -> str:
    """Prefer the provider's structured error payload over the exception text."""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            return _serialize_error_body(exc.response.json())
        except ValueError:
            return exc.response.text or str(exc)

    # openai.APIStatusError and anthropic.APIStatusError both expose the parsed body.
    body = getattr(exc, "body", None)
    if getattr(exc, "status_code", None) is not None and body is not None:
        return _serialize_error_body(body)
    return str(exc) or type(exc).__name__


@contextmanager
def provider_call_errors(provider_id: str) -> Iterator[None]:
    """Re-raise provider failures inside the block as ProviderCallError."""
    try:
        yield
    except (ProviderCallError, ConfigurationError):
        raise
    except MALFORMED_RESPONSE_ERRORS as e:
        detail = f"Malformed response body: {type(e).__name__}: {e}"
        logger.warning(
            "Provider returned an unexpected response shape",
            extra={"provider": provider_id, "detail": detail},
        )
        raise ProviderCallError(provider_id, detail) from e
    except Exception as e:
        detail = describe_provider_failure(e)
        logger.warning(
            "Provider call failed",
            extra={"provider": provider_id, "error_type": type(e).__name__, "detail": detail},
        )
        raise ProviderCallError(provider_id, detail) from e

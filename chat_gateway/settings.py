"""Provider credentials, prices and runtime options, read from the environment.

Every provider needs two entries: ``<PROVIDER>_API_KEY`` and
``<PROVIDER>_PRICE_PER_MILLION``. All eight entries are validated together
when settings are first loaded, so a missing key or an unparsable price fails
before any provider is called.
"""

from functools import lru_cache
from typing import Any

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_REQUEST_TIMEOUT_SECONDS, PROVIDER_IDS, OrchestratorKind
from .errors import ConfigurationError, InvalidProviderError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # API keys (may come from SSM instead when a parameter prefix is set)
    # ------------------------------------------------------------------
    llama_api_key: str | None = None
    chatgpt_api_key: str | None = None
    claude_api_key: str | None = None
    gemini_api_key: str | None = None

    # ------------------------------------------------------------------
    # Prices, dollars per million tokens
    # ------------------------------------------------------------------
    llama_price_per_million: float = Field(ge=0, allow_inf_nan=False)
    chatgpt_price_per_million: float = Field(ge=0, allow_inf_nan=False)
    claude_price_per_million: float = Field(ge=0, allow_inf_nan=False)
    gemini_price_per_million: float = Field(ge=0, allow_inf_nan=False)

    # ------------------------------------------------------------------
    # Runtime
    # ------------------------------------------------------------------
    ssm_parameter_prefix: str | None = Field(
        default=None, validation_alias="CHAT_SSM_PARAMETER_PREFIX"
    )
    request_timeout_seconds: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT_SECONDS,
        gt=0,
        validation_alias="CHAT_REQUEST_TIMEOUT_SECONDS",
    )
    orchestrator: OrchestratorKind = Field(default="direct", validation_alias="CHAT_ORCHESTRATOR")
    aws_region: str | None = None
    langsmith_api_key: str | None = None

    @model_validator(mode="after")
    def validate_api_keys(self) -> "Settings":
        if self.ssm_parameter_prefix:
            return self
        missing = [
            f"{provider_id}_API_KEY"
            for provider_id in PROVIDER_IDS
            if not self.api_key_for(provider_id)
        ]
        if missing:
            raise ValueError(
                f"Missing API keys: {', '.join(missing)}. "
                "Set them or configure CHAT_SSM_PARAMETER_PREFIX."
            )
        return self

    def api_key_for(self, provider_id: str) -> str | None:
        if provider_id not in PROVIDER_IDS:
            raise InvalidProviderError(provider_id)
        return getattr(self, f"{provider_id.lower()}_api_key")

    def price_for(self, provider_id: str) -> float:
        if provider_id not in PROVIDER_IDS:
            raise InvalidProviderError(provider_id)
        return getattr(self, f"{provider_id.lower()}_price_per_million")

    def prices(self) -> dict[str, float]:
        return {provider_id: self.price_for(provider_id) for provider_id in PROVIDER_IDS}


def _describe_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "settings"
        problems.append(f"{location.upper()}: {item['msg']}")
    return "; ".join(problems)


def load_settings(**overrides: Any) -> Settings:
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid chat gateway configuration: {_describe_validation_error(e)}"
        ) from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()

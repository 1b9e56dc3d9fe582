"""Pydantic schemas for the chat gateway API."""

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import PROVIDER_IDS


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class ProviderMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: str = Field(alias="displayName")
    accent_color: str = Field(alias="accentColor")
    model: str
    reports_usage: bool = Field(alias="reportsUsage")


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Unknown ids are rejected by dispatch, not here, so they surface as InvalidProviderError.
    provider: str
    messages: list[Message] = Field(min_length=1)
    costs: dict[str, float] = Field(default_factory=dict)

    @field_validator("costs")
    @classmethod
    def validate_costs(cls, costs: dict[str, float]) -> dict[str, float]:
        unknown = sorted(set(costs) - set(PROVIDER_IDS))
        if unknown:
            raise ValueError(
                f"Unknown provider in costs: {', '.join(unknown)}. "
                f"Allowed providers: {', '.join(PROVIDER_IDS)}"
            )
        for provider_id, total in costs.items():
            if not (math.isfinite(total) and total >= 0):
                raise ValueError(
                    f"Running cost for {provider_id} must be a finite non-negative number"
                )
        return costs


class ChatResponse(BaseModel):
    message: str
    provider: str
    cost: float
    token_count: float = Field(serialization_alias="tokenCount")
    token_count_estimated: bool = Field(serialization_alias="tokenCountEstimated")
    costs: dict[str, float]
    duration_seconds: float = Field(serialization_alias="durationSeconds")

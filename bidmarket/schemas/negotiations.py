"""Negotiation payloads, one typed variant per negotiation type."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _NegotiationBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str | None = Field(default=None, max_length=2000)


class CostNegotiation(_NegotiationBase):
    type: Literal["cost"] = "cost"
    original_value: float = Field(ge=0)
    proposed_value: float = Field(ge=0)


class TimelineNegotiation(_NegotiationBase):
    """Durations in months."""

    type: Literal["timeline"] = "timeline"
    original_value: int = Field(ge=1)
    proposed_value: int = Field(ge=1)


class ScopeNegotiation(_NegotiationBase):
    type: Literal["scope"] = "scope"
    original_value: str = Field(min_length=1, max_length=5000)
    proposed_value: str = Field(min_length=1, max_length=5000)


class OtherNegotiation(_NegotiationBase):
    type: Literal["other"] = "other"
    original_value: str | None = Field(default=None, max_length=5000)
    proposed_value: str | None = Field(default=None, max_length=5000)


NegotiationRequest = Annotated[
    Union[CostNegotiation, TimelineNegotiation, ScopeNegotiation, OtherNegotiation],
    Field(discriminator="type"),
]

negotiation_adapter: TypeAdapter = TypeAdapter(NegotiationRequest)


class NegotiationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    initiator: str
    negotiation_type: str
    original_value: Any = None
    proposed_value: Any = None
    message: str | None = None
    status: str
    timestamp: datetime

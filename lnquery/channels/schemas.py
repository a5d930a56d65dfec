"""Pydantic schemas for channel records and query results.

These are the wire shapes: what the gateway hands in and what a query hands
back in ``QueryResponse.data``. Field names of the summary serialise in
camelCase (``totalCapacity`` ...) and a channel's enrichment error under
``_error``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ChannelErrorRecord(BaseModel):
    """Error marker attached to a channel whose enrichment failed."""

    type: str = Field(..., description="Error category, e.g. alias_retrieval_failed")
    message: str = Field(..., description="Sanitized error message")


class ChannelRecord(BaseModel):
    """Raw channel data as returned by a Lightning node gateway."""

    capacity: int = Field(..., description="Total channel size in satoshis")
    local_balance: int = Field(..., description="Satoshis on our side")
    remote_balance: int = Field(..., description="Satoshis on the peer's side")
    active: bool = Field(..., description="Whether the channel can route payments")
    remote_pubkey: str = Field(..., description="Peer node public key (hex)")
    channel_point: str = Field(..., description="Funding outpoint, unique per channel")
    remote_alias: str | None = Field(default=None, description="Peer node alias")
    error: ChannelErrorRecord | None = Field(default=None, alias="_error")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "capacity": 1_000_000,
                "local_balance": 500_000,
                "remote_balance": 500_000,
                "active": True,
                "remote_pubkey": "02" + "ab" * 32,
                "channel_point": "txid:0",
                "remote_alias": "Node-1",
            }
        },
    )


class ChannelSummary(BaseModel):
    """Portfolio-wide channel statistics."""

    total_capacity: int = Field(default=0, ge=0)
    total_local_balance: int = Field(default=0, ge=0)
    total_remote_balance: int = Field(default=0, ge=0)
    active_channels: int = Field(default=0, ge=0)
    inactive_channels: int = Field(default=0, ge=0)
    average_capacity: float = Field(default=0.0, ge=0)
    healthy_channels: int = Field(default=0, ge=0)
    unhealthy_channels: int = Field(default=0, ge=0)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="after")
    def validate_counts(self) -> "ChannelSummary":
        """Healthy and unhealthy channels must partition the channel count."""
        total = self.active_channels + self.inactive_channels
        if self.healthy_channels + self.unhealthy_channels != total:
            raise ValueError(
                "healthy_channels + unhealthy_channels must equal the channel count, got "
                f"{self.healthy_channels} + {self.unhealthy_channels} != {total}"
            )
        return self

    @classmethod
    def empty(cls) -> "ChannelSummary":
        return cls()

    @property
    def channel_count(self) -> int:
        return self.active_channels + self.inactive_channels


class ChannelQueryResult(BaseModel):
    """Channels plus their summary, as returned by a channel query."""

    channels: list[ChannelRecord] = Field(default_factory=list)
    summary: ChannelSummary = Field(default_factory=ChannelSummary.empty)

    def to_payload(self) -> dict[str, Any]:
        """Serialise with wire aliases, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)

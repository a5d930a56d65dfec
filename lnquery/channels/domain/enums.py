"""Domain enums for channel data."""

from enum import Enum


class ChannelState(str, Enum):
    """Whether a channel can currently route payments."""

    ACTIVE = "active"
    INACTIVE = "inactive"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_flag(cls, active: bool) -> "ChannelState":
        return cls.ACTIVE if active else cls.INACTIVE


class HealthStatus(str, Enum):
    """Channel health classification.

    A channel is unhealthy when it is inactive, or when its local ratio lies
    outside the configured band (too little outbound or too little inbound
    liquidity).
    """

    HEALTHY = "healthy"
    INACTIVE = "inactive"  # Channel cannot route at all
    LOW_LOCAL = "low_local"  # Local ratio below the band; needs inbound rebalance
    HIGH_LOCAL = "high_local"  # Local ratio above the band; needs outbound rebalance

    def __str__(self) -> str:
        return self.value

    @property
    def is_healthy(self) -> bool:
        return self is HealthStatus.HEALTHY


class ErrorType(str, Enum):
    """Error markers attached to channels during alias enrichment."""

    ALIAS_RETRIEVAL_FAILED = "alias_retrieval_failed"
    ALIAS_RETRIEVAL_TIMEOUT = "alias_retrieval_timeout"

    def __str__(self) -> str:
        return self.value

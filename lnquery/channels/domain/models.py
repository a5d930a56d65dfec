"""Domain entities for channel queries.

Entities in DDD:
- Have identity (here: the channel point)
- Mutable lifecycle (alias and error are attached after construction)
- Encapsulate business logic (ratios, health, rebalance arithmetic)

A ``Channel`` lives for the duration of one query: it is built from a
gateway ``ChannelRecord``, enriched, summarised and serialised back.
"""

import re
from dataclasses import dataclass

from lnquery.exceptions import ValidationError
from lnquery.utils.formatting import percent

from ..schemas import ChannelErrorRecord, ChannelRecord
from .enums import ChannelState, ErrorType, HealthStatus
from .value_objects import Balance, Capacity, HealthCriteria

UNKNOWN_ALIAS = "Unknown"
ALIAS_ERROR_PLACEHOLDER = "Unknown (Error retrieving)"

_STRICT_PUBKEY_PATTERN = re.compile(r"^[0-9a-fA-F]{66}$")
RELAXED_PUBKEY_MIN_LENGTH = 16


def validate_pubkey(pubkey: str, *, strict: bool = True) -> str:
    """Validate a remote node public key.

    Args:
        pubkey: Hex-encoded public key
        strict: Require a 66-hex-char compressed key; otherwise any string of
            at least 16 characters is accepted (test and mock nodes)

    Raises:
        ValidationError: If the key does not match the selected mode
    """
    if strict:
        if not _STRICT_PUBKEY_PATTERN.match(pubkey):
            raise ValidationError(
                "Invalid remote_pubkey format: expected 66 hex characters",
                field="remote_pubkey",
                value=pubkey,
                constraint="66 hex chars",
            )
    elif len(pubkey) < RELAXED_PUBKEY_MIN_LENGTH:
        raise ValidationError(
            f"Invalid remote_pubkey: expected at least {RELAXED_PUBKEY_MIN_LENGTH} characters",
            field="remote_pubkey",
            value=pubkey,
            constraint=f">= {RELAXED_PUBKEY_MIN_LENGTH} chars",
        )
    return pubkey


@dataclass(frozen=True)
class ChannelErrorInfo:
    """Error marker recorded on a channel during enrichment."""

    type: str
    message: str

    @classmethod
    def alias_failed(cls, message: str) -> "ChannelErrorInfo":
        return cls(type=ErrorType.ALIAS_RETRIEVAL_FAILED.value, message=message)

    @classmethod
    def alias_timeout(cls, message: str) -> "ChannelErrorInfo":
        return cls(type=ErrorType.ALIAS_RETRIEVAL_TIMEOUT.value, message=message)


@dataclass
class Channel:
    """A payment channel between the local node and one remote peer."""

    channel_point: str
    remote_pubkey: str
    capacity: Capacity
    local_balance: Balance
    remote_balance: Balance
    active: bool
    remote_alias: str = UNKNOWN_ALIAS
    error: ChannelErrorInfo | None = None

    @classmethod
    def from_record(cls, record: ChannelRecord, *, strict_pubkey: bool = True) -> "Channel":
        """Build a channel entity from a raw gateway record.

        Raises:
            InvalidCapacityError: If capacity is not positive
            InvalidBalanceError: If either balance is negative
            ValidationError: If the remote pubkey is malformed
        """
        error = None
        if record.error is not None:
            error = ChannelErrorInfo(type=record.error.type, message=record.error.message)

        return cls(
            channel_point=record.channel_point,
            remote_pubkey=validate_pubkey(record.remote_pubkey, strict=strict_pubkey),
            capacity=Capacity(record.capacity),
            local_balance=Balance(record.local_balance),
            remote_balance=Balance(record.remote_balance),
            active=record.active,
            remote_alias=record.remote_alias or UNKNOWN_ALIAS,
            error=error,
        )

    def __repr__(self) -> str:
        return (
            f"<Channel(point='{self.channel_point}', peer={self.remote_pubkey[:8]}..., "
            f"capacity={self.capacity.value}, state='{self.state}')>"
        )

    @property
    def state(self) -> ChannelState:
        return ChannelState.from_flag(self.active)

    @property
    def local_ratio(self) -> float:
        return self.local_balance.ratio_of(self.capacity)

    @property
    def remote_ratio(self) -> float:
        return self.remote_balance.ratio_of(self.capacity)

    @property
    def local_percent(self) -> int:
        """Local share of capacity, rounded half away from zero."""
        return percent(self.local_balance.value, self.capacity.value)

    @property
    def remote_percent(self) -> int:
        """Complement of ``local_percent`` so the pair always sums to 100."""
        return 100 - self.local_percent

    @property
    def imbalance(self) -> float:
        """Distance of the local ratio from a perfect 50/50 split."""
        return abs(0.5 - self.local_ratio)

    @property
    def display_name(self) -> str:
        if self.remote_alias:
            return self.remote_alias
        return f"{self.remote_pubkey[:8]}..."

    def attach_alias(self, alias: str, error: ChannelErrorInfo | None = None) -> None:
        """Record the resolved alias (and enrichment error, if any)."""
        self.remote_alias = alias
        self.error = error

    def is_balanced(self, criteria: HealthCriteria) -> bool:
        """Whether the local ratio lies inside the band (ignores the active flag)."""
        return criteria.is_channel_healthy(self.local_balance, self.capacity)

    def is_healthy(self, criteria: HealthCriteria) -> bool:
        return self.active and self.is_balanced(criteria)

    def health_status(self, criteria: HealthCriteria) -> HealthStatus:
        if not self.active:
            return HealthStatus.INACTIVE
        if self.local_ratio < criteria.min_local_ratio:
            return HealthStatus.LOW_LOCAL
        if self.local_ratio > criteria.max_local_ratio:
            return HealthStatus.HIGH_LOCAL
        return HealthStatus.HEALTHY

    def calculate_rebalance_amount(self, criteria: HealthCriteria) -> int:
        """Suggested transfer toward the band midpoint (positive: receive, negative: send)."""
        return criteria.calculate_rebalance_amount(self.local_balance, self.capacity)

    def to_record(self) -> ChannelRecord:
        """Convert back to the wire record (alias and error included)."""
        error = None
        if self.error is not None:
            error = ChannelErrorRecord(type=self.error.type, message=self.error.message)
        return ChannelRecord(
            capacity=self.capacity.value,
            local_balance=self.local_balance.value,
            remote_balance=self.remote_balance.value,
            active=self.active,
            remote_pubkey=self.remote_pubkey,
            channel_point=self.channel_point,
            remote_alias=self.remote_alias,
            error=error,
        )

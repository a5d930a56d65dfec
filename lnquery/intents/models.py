"""Intent model: what a natural-language query asks for."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from lnquery.utils.sanitize import SanitizedError


class Domain(str, Enum):
    """Data domain a query targets. Only channels are implemented."""

    CHANNELS = "channels"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class Operation(str, Enum):
    """What to do within the domain."""

    LIST = "list"
    LIQUIDITY = "liquidity"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class Focus(str, Enum):
    """Health angle of a channel query."""

    HEALTH = "health"  # Overall health breakdown
    UNHEALTHY = "unhealthy"  # Only channels needing attention

    def __str__(self) -> str:
        return self.value


class IntentKind(str, Enum):
    """Response variant a query resolves to."""

    CHANNEL_LIST = "channel_list"
    CHANNEL_HEALTH = "channel_health"
    CHANNEL_LIQUIDITY = "channel_liquidity"
    CHANNEL_UNHEALTHY = "channel_unhealthy"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntentAttributes:
    """Optional query modifiers. Unset fields are None."""

    active: bool | None = None  # Filter channels by active flag
    check_balance: bool | None = None  # Call out channels outside the healthy band
    focus: Focus | None = None

    @property
    def is_empty(self) -> bool:
        return self.active is None and self.check_balance is None and self.focus is None

    def to_dict(self) -> dict[str, Any]:
        """Only the attributes that are set, with wire names."""
        result: dict[str, Any] = {}
        if self.active is not None:
            result["active"] = self.active
        if self.check_balance is not None:
            result["checkBalance"] = self.check_balance
        if self.focus is not None:
            result["focus"] = self.focus.value
        return result


@dataclass(frozen=True)
class Intent:
    """Classified query: domain, operation and attributes."""

    domain: Domain
    operation: Operation
    query: str
    attributes: IntentAttributes = field(default_factory=IntentAttributes)
    error: SanitizedError | None = None

    @classmethod
    def unknown(cls, query: str, error: SanitizedError | None = None) -> "Intent":
        return cls(
            domain=Domain.UNKNOWN,
            operation=Operation.UNKNOWN,
            query=query,
            attributes=IntentAttributes(),
            error=error,
        )

    @property
    def kind(self) -> IntentKind:
        """Collapse domain, operation and focus into one response variant.

        Focus wins over operation, so "show unhealthy channels" is never a
        plain list.
        """
        if self.domain is Domain.UNKNOWN:
            return IntentKind.UNKNOWN
        if self.attributes.focus is Focus.UNHEALTHY:
            return IntentKind.CHANNEL_UNHEALTHY
        if self.attributes.focus is Focus.HEALTH:
            return IntentKind.CHANNEL_HEALTH
        if self.operation is Operation.LIQUIDITY:
            return IntentKind.CHANNEL_LIQUIDITY
        return IntentKind.CHANNEL_LIST

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "domain": self.domain.value,
            "operation": self.operation.value,
            "kind": self.kind.value,
            "attributes": self.attributes.to_dict(),
            "query": self.query,
        }
        if self.error is not None:
            result["error"] = self.error.message
        return result

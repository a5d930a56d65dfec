"""Domain value objects for channel liquidity.

Value Objects in DDD:
- Immutable (frozen dataclasses)
- No identity (equality based on attributes)
- Validated on construction; an invalid value never exists
"""

import math
from dataclasses import dataclass
from typing import Any

from lnquery.exceptions import (
    InvalidBalanceError,
    InvalidCapacityError,
    InvalidHealthCriteriaError,
)
from lnquery.utils.formatting import format_btc, format_sats, format_satoshis


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Capacity:
    """Total channel size in satoshis (strictly positive)."""

    value: int

    def __post_init__(self) -> None:
        """Validate capacity constraints."""
        if not _is_integer(self.value) or self.value <= 0:
            raise InvalidCapacityError(
                f"Invalid capacity value: {self.value}. Capacity must be a positive number.",
                field="capacity",
                value=self.value,
                constraint="> 0",
            )

    def format(self) -> str:
        return format_satoshis(self.value)

    def format_sats(self) -> str:
        return format_sats(self.value)

    def format_btc(self) -> str:
        return format_btc(self.value)

    def is_greater_than(self, other: "Capacity") -> bool:
        return self.value > other.value

    def is_less_than(self, other: "Capacity") -> bool:
        return self.value < other.value

    def percentage_of(self, total: "Capacity") -> float:
        """Share of ``total`` as a percentage (unrounded)."""
        return self.value / total.value * 100


@dataclass(frozen=True)
class Balance:
    """Amount of a channel's capacity held on one side, in satoshis (non-negative)."""

    value: int

    def __post_init__(self) -> None:
        """Validate balance constraints."""
        if not _is_integer(self.value) or self.value < 0:
            raise InvalidBalanceError(
                f"Invalid balance value: {self.value}. Balance must be a non-negative number.",
                field="balance",
                value=self.value,
                constraint=">= 0",
            )

    def format(self) -> str:
        return format_satoshis(self.value)

    def format_sats(self) -> str:
        return format_sats(self.value)

    def ratio_of(self, capacity: Capacity) -> float:
        """Fraction of ``capacity`` this balance represents."""
        return self.value / capacity.value

    def percentage_of(self, capacity: Capacity) -> float:
        return self.ratio_of(capacity) * 100

    def is_healthy(self, capacity: Capacity, min_ratio: float, max_ratio: float) -> bool:
        """Check whether the ratio lies inside the closed band ``[min_ratio, max_ratio]``."""
        ratio = self.ratio_of(capacity)
        return min_ratio <= ratio <= max_ratio

    def add(self, other: "Balance") -> "Balance":
        return Balance(self.value + other.value)


@dataclass(frozen=True)
class HealthCriteria:
    """Healthy band for a channel's local ratio.

    Both bounds lie in ``[0, 1]`` and ``min_local_ratio < max_local_ratio``.
    Rebalance recommendations aim for the midpoint of the band, not the
    nearest edge.
    """

    min_local_ratio: float
    max_local_ratio: float

    def __post_init__(self) -> None:
        """Validate band constraints."""
        for name in ("min_local_ratio", "max_local_ratio"):
            ratio = getattr(self, name)
            if not isinstance(ratio, (int, float)) or isinstance(ratio, bool):
                raise InvalidHealthCriteriaError(
                    f"Invalid health criteria: {name} must be a number",
                    field=name,
                    value=ratio,
                )
            if not 0 <= ratio <= 1:
                raise InvalidHealthCriteriaError(
                    f"Invalid health criteria: {name} must be between 0 and 1, got {ratio}",
                    field=name,
                    value=ratio,
                    constraint="0 <= ratio <= 1",
                )

        if self.min_local_ratio >= self.max_local_ratio:
            raise InvalidHealthCriteriaError(
                "Invalid health criteria: min_local_ratio must be less than max_local_ratio",
                field="min_local_ratio",
                value=self.min_local_ratio,
                constraint=f"< {self.max_local_ratio}",
            )

    @classmethod
    def default(cls) -> "HealthCriteria":
        return cls(min_local_ratio=0.2, max_local_ratio=0.8)

    @property
    def midpoint_ratio(self) -> float:
        return (self.min_local_ratio + self.max_local_ratio) / 2

    def is_channel_healthy(self, local_balance: Balance, capacity: Capacity) -> bool:
        return local_balance.is_healthy(capacity, self.min_local_ratio, self.max_local_ratio)

    def calculate_rebalance_amount(self, local_balance: Balance, capacity: Capacity) -> int:
        """Satoshis to move to reach the midpoint of the band.

        Returns:
            Positive amount: the channel should receive (gain local balance).
            Negative amount: the channel should send (shed local balance).
            Zero: already at the midpoint.

        Halves round up (toward positive infinity), so -1.5 becomes -1.
        """
        optimal_amount = self.midpoint_ratio * capacity.value
        return math.floor(optimal_amount - local_balance.value + 0.5)

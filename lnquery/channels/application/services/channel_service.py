"""Channel health service.

Fetches channels through the node gateway, resolves peer aliases, and
computes portfolio health statistics. This is the only place channels are
enriched and summarised; every response variant is built from its output.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from lnquery.exceptions import GatewayError, ValidationError, wrap_exception
from lnquery.utils.config import get_settings
from lnquery.utils.logging import LogPerformance, get_logger
from lnquery.utils.sanitize import error_message, sanitize_error_message

from ...domain.models import ALIAS_ERROR_PLACEHOLDER, UNKNOWN_ALIAS, Channel, ChannelErrorInfo
from ...domain.value_objects import HealthCriteria
from ...gateway import LightningNetworkGateway
from ...schemas import ChannelQueryResult, ChannelRecord, ChannelSummary

logger = get_logger(__name__)


@dataclass
class ChannelSnapshot:
    """Enriched channels plus the portfolio summary computed over all of them."""

    channels: list[Channel]
    summary: ChannelSummary

    def filter(self, predicate: Callable[[Channel], bool]) -> "ChannelSnapshot":
        """Narrow the channel list; the summary still describes the whole portfolio."""
        return ChannelSnapshot(
            channels=[channel for channel in self.channels if predicate(channel)],
            summary=self.summary,
        )

    def to_result(self) -> ChannelQueryResult:
        return ChannelQueryResult(
            channels=[channel.to_record() for channel in self.channels],
            summary=self.summary,
        )


@dataclass
class RebalanceRecommendation:
    """Suggested (never executed) transfer for a channel outside the healthy band."""

    channel_point: str
    alias: str
    local_percent: int
    amount_sat: int

    @property
    def direction(self) -> str:
        """``receive`` to gain local balance, ``send`` to shed it."""
        return "receive" if self.amount_sat > 0 else "send"

    @property
    def abs_amount_sat(self) -> int:
        return abs(self.amount_sat)

    def to_dict(self) -> dict[str, Any]:
        return {
            "channel_point": self.channel_point,
            "alias": self.alias,
            "local_percent": self.local_percent,
            "amount_sat": self.amount_sat,
            "direction": self.direction,
        }


@dataclass
class _AliasLookup:
    alias: str
    error: ChannelErrorInfo | None = field(default=None)


class ChannelHealthService:
    """Service for channel health and liquidity analysis.

    Health rule: a channel is unhealthy when it is inactive, or when its
    local ratio falls outside ``[criteria.min_local_ratio, criteria.max_local_ratio]``.
    """

    def __init__(
        self,
        gateway: LightningNetworkGateway,
        criteria: HealthCriteria | None = None,
        *,
        alias_timeout_seconds: float | None = None,
        max_concurrent_alias_lookups: int | None = None,
        strict_pubkeys: bool | None = None,
    ):
        """Initialize the channel health service.

        Args:
            gateway: Lightning node gateway
            criteria: Healthy band (defaults to the configured band, 0.1-0.9)
            alias_timeout_seconds: Per-lookup alias timeout (defaults to settings)
            max_concurrent_alias_lookups: Alias fan-out bound (defaults to settings)
            strict_pubkeys: Require 66-hex-char pubkeys (defaults to settings)
        """
        settings = get_settings()

        self.gateway = gateway
        self.criteria = criteria or HealthCriteria(
            min_local_ratio=settings.health_min_local_ratio,
            max_local_ratio=settings.health_max_local_ratio,
        )
        self.alias_timeout_seconds = (
            alias_timeout_seconds
            if alias_timeout_seconds is not None
            else settings.alias_timeout_seconds
        )
        self.max_concurrent_alias_lookups = (
            max_concurrent_alias_lookups
            if max_concurrent_alias_lookups is not None
            else settings.max_concurrent_alias_lookups
        )
        self.strict_pubkeys = (
            strict_pubkeys if strict_pubkeys is not None else settings.strict_pubkey_validation
        )

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_channels_with_health(self) -> ChannelQueryResult:
        """Get all channels, alias-enriched, with the portfolio summary."""
        snapshot = await self.load_snapshot()
        return snapshot.to_result()

    async def get_unhealthy_channels(self) -> ChannelQueryResult:
        """Get only unhealthy channels; the summary still covers every channel."""
        snapshot = await self.load_unhealthy_snapshot()
        return snapshot.to_result()

    async def get_rebalance_recommendations(self) -> list[RebalanceRecommendation]:
        """Recommend transfers for active channels outside the healthy band.

        Returns:
            Recommendations sorted by largest transfer first
        """
        snapshot = await self.load_snapshot()
        return self.recommendations_for(snapshot.channels)

    async def load_snapshot(self) -> ChannelSnapshot:
        """Fetch, enrich and summarise every channel of the node."""
        channels = await self._fetch_channels()

        with LogPerformance("alias_enrichment", logger):
            await self._enrich_with_aliases(channels)

        summary = self.build_summary(channels)
        logger.info(
            "channel_health_computed",
            channel_count=len(channels),
            active_channels=summary.active_channels,
            unhealthy_channels=summary.unhealthy_channels,
        )
        return ChannelSnapshot(channels=channels, summary=summary)

    async def load_unhealthy_snapshot(self) -> ChannelSnapshot:
        snapshot = await self.load_snapshot()
        return snapshot.filter(self.is_unhealthy)

    # =========================================================================
    # Health rules
    # =========================================================================

    def is_unhealthy(self, channel: Channel) -> bool:
        return not channel.is_healthy(self.criteria)

    def build_summary(self, channels: list[Channel]) -> ChannelSummary:
        """Compute portfolio statistics over a channel list."""
        if not channels:
            return ChannelSummary.empty()

        total_capacity = sum(channel.capacity.value for channel in channels)
        active_count = sum(1 for channel in channels if channel.active)
        unhealthy_count = sum(1 for channel in channels if self.is_unhealthy(channel))

        return ChannelSummary(
            total_capacity=total_capacity,
            total_local_balance=sum(channel.local_balance.value for channel in channels),
            total_remote_balance=sum(channel.remote_balance.value for channel in channels),
            active_channels=active_count,
            inactive_channels=len(channels) - active_count,
            average_capacity=total_capacity / len(channels),
            healthy_channels=len(channels) - unhealthy_count,
            unhealthy_channels=unhealthy_count,
        )

    def recommendations_for(self, channels: list[Channel]) -> list[RebalanceRecommendation]:
        recommendations = [
            RebalanceRecommendation(
                channel_point=channel.channel_point,
                alias=channel.display_name,
                local_percent=channel.local_percent,
                amount_sat=channel.calculate_rebalance_amount(self.criteria),
            )
            for channel in channels
            if channel.active and not channel.is_balanced(self.criteria)
        ]
        recommendations.sort(key=lambda r: r.abs_amount_sat, reverse=True)
        return recommendations

    # =========================================================================
    # Gateway access
    # =========================================================================

    async def _fetch_channels(self) -> list[Channel]:
        try:
            raw_channels = await self.gateway.get_channels()
        except Exception as e:
            message = sanitize_error_message(error_message(e))
            logger.error("channel_fetch_failed", error=message, error_type=type(e).__name__)
            raise wrap_exception(e, message, exception_class=GatewayError, operation="get_channels") from e

        try:
            records = [
                raw if isinstance(raw, ChannelRecord) else ChannelRecord.model_validate(raw)
                for raw in raw_channels
            ]
        except PydanticValidationError as e:
            logger.error("channel_record_invalid", error_count=e.error_count())
            raise wrap_exception(
                e,
                "Gateway returned a malformed channel record",
                exception_class=ValidationError,
                constraint="ChannelRecord schema",
            ) from e

        channels = [Channel.from_record(record, strict_pubkey=self.strict_pubkeys) for record in records]
        logger.debug("channels_fetched", channel_count=len(channels))
        return channels

    async def _enrich_with_aliases(self, channels: list[Channel]) -> None:
        """Resolve the alias of every distinct peer, one lookup per pubkey.

        A failed lookup only marks the channels of that peer. If the step as
        a whole fails, every channel is marked and the query still succeeds.
        """
        if not channels:
            return

        try:
            pubkeys = list(dict.fromkeys(channel.remote_pubkey for channel in channels))
            semaphore = asyncio.Semaphore(self.max_concurrent_alias_lookups)
            lookups = await asyncio.gather(
                *(self._lookup_alias(pubkey, semaphore) for pubkey in pubkeys)
            )
            by_pubkey = dict(zip(pubkeys, lookups, strict=True))

            for channel in channels:
                lookup = by_pubkey[channel.remote_pubkey]
                channel.attach_alias(lookup.alias, lookup.error)

            logger.debug(
                "alias_retrieval_completed",
                peer_count=len(pubkeys),
                failed_count=sum(1 for lookup in lookups if lookup.error is not None),
            )
        except Exception as e:
            message = sanitize_error_message(error_message(e))
            logger.error("alias_enrichment_failed", error=message, error_type=type(e).__name__)
            for channel in channels:
                channel.attach_alias(ALIAS_ERROR_PLACEHOLDER, ChannelErrorInfo.alias_failed(message))

    async def _lookup_alias(self, pubkey: str, semaphore: asyncio.Semaphore) -> _AliasLookup:
        async with semaphore:
            try:
                alias = await asyncio.wait_for(
                    self.gateway.get_node_alias(pubkey),
                    timeout=self.alias_timeout_seconds,
                )
            except asyncio.TimeoutError:
                logger.warning(
                    "alias_retrieval_timeout",
                    pubkey=f"{pubkey[:8]}...",
                    timeout_seconds=self.alias_timeout_seconds,
                )
                return _AliasLookup(
                    alias=UNKNOWN_ALIAS,
                    error=ChannelErrorInfo.alias_timeout(
                        f"Alias lookup timed out after {self.alias_timeout_seconds}s"
                    ),
                )
            except Exception as e:
                message = sanitize_error_message(error_message(e))
                logger.debug("alias_retrieval_failed", pubkey=f"{pubkey[:8]}...", error=message)
                return _AliasLookup(
                    alias=ALIAS_ERROR_PLACEHOLDER,
                    error=ChannelErrorInfo.alias_failed(message),
                )

        return _AliasLookup(alias=alias or UNKNOWN_ALIAS)


__all__ = ["ChannelHealthService", "ChannelSnapshot", "RebalanceRecommendation"]

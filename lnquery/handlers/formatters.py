"""Text formatting for channel query responses.

All percentages are rounded half away from zero; a channel's remote share
is always ``100 - local`` so each pair sums to 100.
"""

from collections.abc import Sequence

from lnquery.channels.application.services.channel_service import RebalanceRecommendation
from lnquery.channels.domain.enums import HealthStatus
from lnquery.channels.domain.models import Channel
from lnquery.channels.domain.value_objects import HealthCriteria
from lnquery.channels.schemas import ChannelSummary
from lnquery.utils.formatting import format_satoshis, format_sats, percent

NO_CHANNELS_TEXT = "No channels found."
ALL_HEALTHY_TEXT = "Good news! All your channels are healthy."

TOP_N = 3


def _channels(count: int) -> str:
    return f"{count} channel" if count == 1 else f"{count} channels"


def _active_phrase(active: int, inactive: int) -> str:
    active_part = f"{active} channel is active" if active == 1 else f"{active} channels are active"
    inactive_part = f"{inactive} is inactive" if inactive == 1 else f"{inactive} are inactive"
    return f"{active_part} and {inactive_part}."


def _state(channel: Channel) -> str:
    return "active" if channel.active else "inactive"


def _split_line(index: int, channel: Channel) -> str:
    return f"{index}. {channel.display_name}: {channel.local_percent}% local / {channel.remote_percent}% remote"


def _by_capacity(channels: Sequence[Channel]) -> list[Channel]:
    return sorted(channels, key=lambda c: c.capacity.value, reverse=True)


class ChannelFormatter:
    """Renders channel snapshots as user-facing text."""

    def __init__(self, criteria: HealthCriteria):
        self.criteria = criteria

    # =========================================================================
    # List
    # =========================================================================

    def format_list(
        self,
        channels: Sequence[Channel],
        summary: ChannelSummary,
        *,
        active_filter: bool | None = None,
    ) -> str:
        """Ranked channel list (largest first) with a trailing inactive section."""
        if summary.channel_count == 0:
            return NO_CHANNELS_TEXT

        lines = [
            f"Your node has {_channels(summary.channel_count)} with a total capacity of "
            f"{format_satoshis(summary.total_capacity)}. "
            f"{_active_phrase(summary.active_channels, summary.inactive_channels)}",
            "",
        ]

        if active_filter is None:
            heading = "Your channels:"
        else:
            heading = f"Your {'active' if active_filter else 'inactive'} channels:"

        ranked = _by_capacity(channels)
        if not ranked:
            lines.append(f"{heading} none.")
            return "\n".join(lines)

        lines.append(heading)
        for index, channel in enumerate(ranked, start=1):
            lines.append(f"{index}. {channel.display_name}: {channel.capacity.format()} ({_state(channel)})")

        inactive = [channel for channel in ranked if not channel.active]
        if inactive and active_filter is None:
            lines.extend(["", f"Inactive channels ({len(inactive)}):"])
            for index, channel in enumerate(inactive, start=1):
                lines.append(f"{index}. {channel.display_name}: {channel.capacity.format()}")

        return "\n".join(lines)

    # =========================================================================
    # Liquidity
    # =========================================================================

    def format_liquidity(
        self,
        channels: Sequence[Channel],
        summary: ChannelSummary,
        *,
        check_balance: bool = False,
    ) -> str:
        """Portfolio liquidity split plus the most balanced and imbalanced active channels."""
        if summary.channel_count == 0:
            return NO_CHANNELS_TEXT

        local_pct = percent(summary.total_local_balance, summary.total_capacity)
        remote_pct = percent(summary.total_remote_balance, summary.total_capacity)
        lines = [
            f"Liquidity Distribution: {format_satoshis(summary.total_local_balance)} local ({local_pct}%), "
            f"{format_satoshis(summary.total_remote_balance)} remote ({remote_pct}%).",
        ]

        active = [channel for channel in channels if channel.active]
        most_balanced = sorted(active, key=lambda c: c.imbalance)[:TOP_N]
        most_imbalanced = sorted(active, key=lambda c: c.imbalance, reverse=True)[:TOP_N]

        if most_balanced:
            lines.extend(["", "Your most balanced channels:"])
            lines.extend(_split_line(i, c) for i, c in enumerate(most_balanced, start=1))

        if most_imbalanced:
            lines.extend(["", "Your most imbalanced channels:"])
            lines.extend(_split_line(i, c) for i, c in enumerate(most_imbalanced, start=1))

        if check_balance:
            outside = [channel for channel in active if not channel.is_balanced(self.criteria)]
            lines.extend(["", f"Channels outside the healthy band ({len(outside)}):"])
            if outside:
                lines.extend(_split_line(i, c) for i, c in enumerate(outside, start=1))
            else:
                lines.append("None. Every active channel is within the healthy band.")

        return "\n".join(lines)

    # =========================================================================
    # Health
    # =========================================================================

    def format_health(self, channels: Sequence[Channel], summary: ChannelSummary) -> str:
        """Healthy/unhealthy counts with the channels that need attention."""
        if summary.channel_count == 0:
            return NO_CHANNELS_TEXT

        lines = [
            f"Channel Health Summary: {summary.healthy_channels} healthy, "
            f"{summary.unhealthy_channels} need attention."
        ]

        inactive, imbalanced = self._needing_attention(channels)
        if inactive:
            lines.extend(["", f"Inactive channels ({len(inactive)}):"])
            for index, channel in enumerate(inactive, start=1):
                lines.append(f"{index}. {channel.display_name}: {channel.capacity.format()}")

        if imbalanced:
            lines.extend(["", f"Imbalanced channels ({len(imbalanced)}):"])
            for index, channel in enumerate(imbalanced, start=1):
                lines.append(f"{index}. {channel.display_name}: {channel.local_percent}% local balance")

        return "\n".join(lines)

    # =========================================================================
    # Unhealthy
    # =========================================================================

    def format_unhealthy(
        self,
        channels: Sequence[Channel],
        summary: ChannelSummary,
        recommendations: Sequence[RebalanceRecommendation] = (),
        *,
        active_filter: bool | None = None,
    ) -> str:
        """Unhealthy channels, inactive first, with suggested rebalances.

        ``summary`` always covers the whole node, so the header still counts
        unhealthy channels that an ``active_filter`` removed from ``channels``.
        """
        if summary.channel_count == 0:
            return NO_CHANNELS_TEXT
        if summary.unhealthy_channels == 0:
            return ALL_HEALTHY_TEXT

        unhealthy_label = (
            "1 unhealthy channel"
            if summary.unhealthy_channels == 1
            else f"{summary.unhealthy_channels} unhealthy channels"
        )
        lines = [f"Your node has {unhealthy_label} out of {summary.channel_count} total channels."]

        inactive, imbalanced = self._needing_attention(channels)
        if not inactive and not imbalanced:
            scope = "" if active_filter is None else f"{'active' if active_filter else 'inactive'} "
            lines.extend(["", f"Your {scope}unhealthy channels: none."])
            return "\n".join(lines)

        if inactive:
            lines.extend(["", f"Inactive channels ({len(inactive)}):"])
            for index, channel in enumerate(inactive, start=1):
                lines.append(f"{index}. {channel.display_name}: {channel.capacity.format()} (inactive)")

        by_point = {rec.channel_point: rec for rec in recommendations}
        if imbalanced:
            lines.extend(["", f"Imbalanced channels ({len(imbalanced)}):"])
            for index, channel in enumerate(imbalanced, start=1):
                line = _split_line(index, channel)
                rec = by_point.get(channel.channel_point)
                if rec is not None and rec.amount_sat != 0:
                    line += f" (suggested: {rec.direction} {format_sats(rec.abs_amount_sat)})"
                lines.append(line)

        statuses = {channel.health_status(self.criteria) for channel in imbalanced}
        lines.extend(["", "Recommendations:"])
        if inactive:
            lines.append("- For inactive channels: Try reconnecting to the peers or check if they are online")
        if HealthStatus.LOW_LOCAL in statuses:
            lines.append(
                "- For channels with low local balance: Rebalance funds into them or reduce routing through them"
            )
        if HealthStatus.HIGH_LOCAL in statuses:
            lines.append("- For channels with high local balance: Try routing payments through these channels")

        return "\n".join(lines)

    def _needing_attention(self, channels: Sequence[Channel]) -> tuple[list[Channel], list[Channel]]:
        """Split unhealthy channels into inactive (largest first) and imbalanced active ones."""
        inactive: list[Channel] = []
        imbalanced: list[Channel] = []
        for channel in channels:
            status = channel.health_status(self.criteria)
            if status is HealthStatus.INACTIVE:
                inactive.append(channel)
            elif not status.is_healthy:
                imbalanced.append(channel)
        return _by_capacity(inactive), imbalanced

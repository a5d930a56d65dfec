"""Application services."""

from .channel_service import ChannelHealthService, ChannelSnapshot, RebalanceRecommendation

__all__ = ["ChannelHealthService", "ChannelSnapshot", "RebalanceRecommendation"]

"""Channel domain handler.

Answers every channel intent from one ``ChannelHealthService`` snapshot and
renders it with the variant matching ``intent.kind``.
"""

from lnquery.channels.application.services.channel_service import (
    ChannelHealthService,
    ChannelSnapshot,
)
from lnquery.exceptions import LNQueryError
from lnquery.intents.models import Domain, Intent, IntentKind
from lnquery.utils.logging import get_logger
from lnquery.utils.sanitize import sanitize_error

from .base import DomainHandler, HandlerResult
from .formatters import ChannelFormatter

logger = get_logger(__name__)


class ChannelDomainHandler(DomainHandler):
    """Handler for channel-related intents."""

    def __init__(self, service: ChannelHealthService, formatter: ChannelFormatter | None = None):
        self.service = service
        self.formatter = formatter or ChannelFormatter(service.criteria)

    def can_handle(self, intent: Intent) -> bool:
        return intent.domain is Domain.CHANNELS

    async def handle(self, intent: Intent) -> HandlerResult:
        kind = intent.kind
        logger.debug("channel_intent_handling", kind=kind.value, operation=intent.operation.value)

        try:
            if kind is IntentKind.CHANNEL_UNHEALTHY:
                snapshot = await self.service.load_unhealthy_snapshot()
            else:
                snapshot = await self.service.load_snapshot()
        except LNQueryError as e:
            sanitized = sanitize_error(e)
            logger.error(
                "channel_intent_failed",
                kind=kind.value,
                error=sanitized.message,
                error_type=sanitized.error_type,
            )
            raise

        active_filter = intent.attributes.active
        if active_filter is not None:
            snapshot = snapshot.filter(lambda channel: channel.active is active_filter)

        text = self.render(kind, snapshot, intent)
        return HandlerResult(text=text, result=snapshot.to_result(), kind=kind)

    def render(self, kind: IntentKind, snapshot: ChannelSnapshot, intent: Intent) -> str:
        """Pick the response variant; anything unrecognised falls back to the list."""
        channels, summary = snapshot.channels, snapshot.summary

        if kind is IntentKind.CHANNEL_LIQUIDITY:
            return self.formatter.format_liquidity(
                channels, summary, check_balance=bool(intent.attributes.check_balance)
            )
        if kind is IntentKind.CHANNEL_HEALTH:
            return self.formatter.format_health(channels, summary)
        if kind is IntentKind.CHANNEL_UNHEALTHY:
            return self.formatter.format_unhealthy(
                channels,
                summary,
                self.service.recommendations_for(channels),
                active_filter=intent.attributes.active,
            )
        return self.formatter.format_list(channels, summary, active_filter=intent.attributes.active)

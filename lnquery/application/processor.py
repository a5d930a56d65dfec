"""Lightning query processor: the single entry point for natural-language queries."""

from dataclasses import dataclass
from typing import Any

from lnquery.channels.application.services.channel_service import ChannelHealthService
from lnquery.channels.domain.value_objects import HealthCriteria
from lnquery.channels.gateway import LightningNetworkGateway
from lnquery.handlers.channel_handler import ChannelDomainHandler
from lnquery.handlers.registry import DomainHandlerRegistry
from lnquery.intents.classifier import RegexIntentClassifier
from lnquery.intents.models import Domain, Intent
from lnquery.utils.logging import clear_correlation_id, get_logger, set_correlation_id
from lnquery.utils.sanitize import sanitize_error

logger = get_logger(__name__)

ERROR_TEXT_PREFIX = "Sorry, I couldn't process your query: "


@dataclass
class QueryResponse:
    """Answer to a query.

    ``data`` is the serialised ``ChannelQueryResult`` on success and
    ``{"error": <sanitized message>}`` on failure.
    """

    text: str
    data: dict[str, Any]
    intent: Intent

    @property
    def is_error(self) -> bool:
        return "error" in self.data

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "data": self.data, "intent": self.intent.to_dict()}


class LightningQueryProcessor:
    """Classifies a query, routes it to a domain handler and returns the answer."""

    def __init__(self, classifier: RegexIntentClassifier, registry: DomainHandlerRegistry):
        self.classifier = classifier
        self.registry = registry

    async def execute_query(self, query: str) -> QueryResponse:
        """Answer a natural-language query.

        Business failures (gateway errors, invalid channel data, no handler)
        come back as an error response; this method does not raise for them.
        """
        correlation_id = set_correlation_id()
        try:
            logger.info("query_received", query_length=len(query) if isinstance(query, str) else 0)

            intent = self.classifier.classify(query)
            handler = self.registry.get_handler_for_intent(intent)
            logger.debug("handler_selected", handler=type(handler).__name__, kind=intent.kind.value)

            result = await handler.handle(intent)
            logger.info(
                "query_completed",
                kind=result.kind.value,
                channel_count=len(result.result.channels),
            )
            return QueryResponse(text=result.text, data=result.result.to_payload(), intent=intent)

        except Exception as e:
            sanitized = sanitize_error(e)
            logger.error(
                "query_failed",
                error=sanitized.message,
                error_type=sanitized.error_type,
            )
            return QueryResponse(
                text=f"{ERROR_TEXT_PREFIX}{sanitized.message}",
                data={"error": sanitized.message},
                intent=Intent.unknown(query if isinstance(query, str) else "", error=sanitized),
            )
        finally:
            clear_correlation_id()


def build_processor(
    gateway: LightningNetworkGateway,
    criteria: HealthCriteria | None = None,
) -> LightningQueryProcessor:
    """Wire the classifier, channel service, handler and registry around a gateway."""
    service = ChannelHealthService(gateway, criteria)
    registry = DomainHandlerRegistry({Domain.CHANNELS: ChannelDomainHandler(service)})
    return LightningQueryProcessor(RegexIntentClassifier(), registry)

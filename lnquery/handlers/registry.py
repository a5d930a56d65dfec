"""Domain handler registry.

The domain-to-handler table is fixed when the registry is built and exposed
read-only, so one registry can be shared by concurrent queries.
"""

from collections.abc import Mapping
from types import MappingProxyType

from lnquery.exceptions import NoHandlerFoundError
from lnquery.intents.models import Domain, Intent
from lnquery.utils.logging import get_logger

from .base import DomainHandler

logger = get_logger(__name__)


class DomainHandlerRegistry:
    """Routes intents to domain handlers."""

    def __init__(
        self,
        handlers: Mapping[Domain, DomainHandler],
        default_handler: DomainHandler | None = None,
    ):
        self._handlers: Mapping[Domain, DomainHandler] = MappingProxyType(dict(handlers))
        self._default_handler = default_handler

        logger.debug(
            "handler_registry_built",
            domains=[domain.value for domain in self._handlers],
            has_default=default_handler is not None,
        )

    @property
    def handlers(self) -> Mapping[Domain, DomainHandler]:
        return self._handlers

    @property
    def default_handler(self) -> DomainHandler | None:
        return self._default_handler

    def get_handler(self, domain: Domain) -> DomainHandler:
        """Handler registered for a domain, falling back to the default.

        Raises:
            NoHandlerFoundError: If neither exists
        """
        handler = self._handlers.get(domain) or self._default_handler
        if handler is None:
            raise NoHandlerFoundError(
                f"No handler registered for domain: {domain.value}",
                domain=domain.value,
            )
        return handler

    def get_handler_for_intent(self, intent: Intent) -> DomainHandler:
        """Pick the handler for an intent.

        Order: the handler registered for ``intent.domain`` if it accepts the
        intent; else the first registered handler that accepts it; else the
        default handler.

        Raises:
            NoHandlerFoundError: If no handler applies
        """
        domain_handler = self._handlers.get(intent.domain)
        if domain_handler is not None and domain_handler.can_handle(intent):
            return domain_handler

        for handler in self._handlers.values():
            if handler.can_handle(intent):
                return handler

        if self._default_handler is not None:
            return self._default_handler

        raise NoHandlerFoundError(
            f"No handler found for intent: {intent.domain.value}/{intent.operation.value}",
            domain=intent.domain.value,
            operation=intent.operation.value,
        )

"""Domain handler interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from lnquery.channels.schemas import ChannelQueryResult
from lnquery.intents.models import Intent, IntentKind


@dataclass
class HandlerResult:
    """Answer to one intent: user-facing text plus structured data."""

    text: str
    result: ChannelQueryResult
    kind: IntentKind


class DomainHandler(ABC):
    """Answers intents for one data domain."""

    @abstractmethod
    def can_handle(self, intent: Intent) -> bool:
        """Whether this handler accepts the intent."""

    @abstractmethod
    async def handle(self, intent: Intent) -> HandlerResult:
        """Answer the intent.

        Raises:
            LNQueryError: On gateway or validation failures
        """

"""Regex/keyword intent classifier.

Deterministic and stateless: the same query always yields the same intent,
and one instance can serve concurrent queries.

Classification steps:
1. Domain: always ``channels`` (single implemented domain).
2. Operation: ``liquidity`` if the query mentions liquidity, balance,
   capacity or funds; ``list`` otherwise.
3. Attributes:
   - ``inactive`` sets ``active=False``; otherwise ``active`` sets ``active=True``.
   - ``imbalanced`` in a liquidity query sets ``check_balance=True``.
   - focus from the phrase families below, most specific first
     (unhealthy before health).

Any failure yields an unknown intent carrying the sanitized error; the
classifier never raises.
"""

import re

from lnquery.exceptions import IntentClassificationError
from lnquery.utils.logging import get_logger
from lnquery.utils.sanitize import sanitize_error

from .models import Domain, Focus, Intent, IntentAttributes, Operation

logger = get_logger(__name__)

LIQUIDITY_KEYWORDS = ("liquidity", "balance", "capacity", "fund")

UNHEALTHY_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"show unhealthy channels",
        r"unhealthy channels",
        r"problematic channels",
        r"channels (that need|needing|requiring) attention",
        r"broken channels",
        r"inactive channels",
        r"channels (with|having) (issues|problems)",
    )
)

# "active channels" is deliberately absent: it is an attribute filter, and
# "inactive channels" is already an unhealthy phrase.
HEALTH_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"channel (status|health)",
        r"channels? health",
        r"channel (issues|problems)",
    )
)


class RegexIntentClassifier:
    """Keyword and phrase based query classifier."""

    def classify(self, query: str) -> Intent:
        """Classify a natural-language query.

        Args:
            query: Free-text user question

        Returns:
            Classified intent, or an unknown intent with ``error`` set
        """
        try:
            if not isinstance(query, str):
                raise IntentClassificationError(
                    f"Query must be a string, got {type(query).__name__}"
                )

            domain = self.determine_domain(query)
            operation = self.determine_operation(query, domain)
            attributes = self.extract_attributes(query, domain, operation)
            intent = Intent(domain=domain, operation=operation, query=query, attributes=attributes)

            logger.info(
                "intent_parsed",
                domain=domain.value,
                operation=operation.value,
                kind=intent.kind.value,
                has_attributes=not attributes.is_empty,
            )
            return intent

        except Exception as e:
            sanitized = sanitize_error(e)
            logger.error("intent_parse_failed", error=sanitized.message, error_type=sanitized.error_type)
            return Intent.unknown(query if isinstance(query, str) else "", error=sanitized)

    def determine_domain(self, query: str) -> Domain:
        return Domain.CHANNELS

    def determine_operation(self, query: str, domain: Domain) -> Operation:
        if domain is not Domain.CHANNELS:
            return Operation.LIST

        lowered = query.lower()
        if any(keyword in lowered for keyword in LIQUIDITY_KEYWORDS):
            return Operation.LIQUIDITY
        return Operation.LIST

    def extract_attributes(self, query: str, domain: Domain, operation: Operation) -> IntentAttributes:
        if domain is not Domain.CHANNELS:
            return IntentAttributes()

        lowered = query.lower()

        # "inactive" contains "active", so it is checked first
        active: bool | None = None
        if "inactive" in lowered:
            active = False
        elif "active" in lowered:
            active = True

        check_balance: bool | None = None
        if operation is Operation.LIQUIDITY and "imbalanced" in lowered:
            check_balance = True

        return IntentAttributes(active=active, check_balance=check_balance, focus=self.detect_focus(query))

    def detect_focus(self, query: str) -> Focus | None:
        if any(pattern.search(query) for pattern in UNHEALTHY_PATTERNS):
            return Focus.UNHEALTHY
        if any(pattern.search(query) for pattern in HEALTH_PATTERNS):
            return Focus.HEALTH
        return None

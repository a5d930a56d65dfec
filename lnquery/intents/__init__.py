"""Query intent classification."""

from .classifier import RegexIntentClassifier
from .models import Domain, Focus, Intent, IntentAttributes, IntentKind, Operation

__all__ = [
    "Domain",
    "Focus",
    "Intent",
    "IntentAttributes",
    "IntentKind",
    "Operation",
    "RegexIntentClassifier",
]

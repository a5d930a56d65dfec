"""Intent routing and response rendering."""

from .base import DomainHandler, HandlerResult
from .channel_handler import ChannelDomainHandler
from .formatters import ChannelFormatter
from .registry import DomainHandlerRegistry

__all__ = [
    "ChannelDomainHandler",
    "ChannelFormatter",
    "DomainHandler",
    "DomainHandlerRegistry",
    "HandlerResult",
]

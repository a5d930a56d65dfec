"""Channel domain: value objects, enums and the channel entity."""

from .enums import ChannelState, ErrorType, HealthStatus
from .models import ALIAS_ERROR_PLACEHOLDER, UNKNOWN_ALIAS, Channel, ChannelErrorInfo
from .value_objects import Balance, Capacity, HealthCriteria

__all__ = [
    "ALIAS_ERROR_PLACEHOLDER",
    "UNKNOWN_ALIAS",
    "Balance",
    "Capacity",
    "Channel",
    "ChannelErrorInfo",
    "ChannelState",
    "ErrorType",
    "HealthCriteria",
    "HealthStatus",
]

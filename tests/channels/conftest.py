"""Shared test fixtures for channel tests."""

import pytest

from lnquery.channels.application.services.channel_service import ChannelHealthService
from lnquery.channels.domain.value_objects import HealthCriteria


@pytest.fixture
def default_band() -> HealthCriteria:
    """The service's default 0.1-0.9 band."""
    return HealthCriteria(min_local_ratio=0.1, max_local_ratio=0.9)


@pytest.fixture
def health_service(mock_gateway) -> ChannelHealthService:
    """Health service over the five-channel mock node."""
    return ChannelHealthService(mock_gateway, alias_timeout_seconds=1.0)

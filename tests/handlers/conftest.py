"""Fixtures for handler tests: the five-channel node as enriched domain objects."""

import pytest

from lnquery.channels.application.services.channel_service import (
    ChannelHealthService,
    ChannelSnapshot,
)
from lnquery.channels.domain.models import Channel
from lnquery.channels.domain.value_objects import HealthCriteria
from lnquery.channels.schemas import ChannelRecord
from lnquery.handlers.formatters import ChannelFormatter


@pytest.fixture
def criteria() -> HealthCriteria:
    return HealthCriteria(min_local_ratio=0.1, max_local_ratio=0.9)


@pytest.fixture
def service(mock_gateway, criteria) -> ChannelHealthService:
    return ChannelHealthService(mock_gateway, criteria)


@pytest.fixture
def snapshot(channel_records, service) -> ChannelSnapshot:
    """Enriched snapshot built without going through the gateway."""
    aliases = {
        "acinq:0": "ACINQ",
        "bitrefill:0": "Bitrefill",
        "kraken:1": "Kraken",
        "lnbig:0": "LNBig",
        "wos:2": "WalletOfSatoshi",
    }
    channels = [Channel.from_record(ChannelRecord.model_validate(record)) for record in channel_records]
    for channel in channels:
        channel.attach_alias(aliases[channel.channel_point])
    return ChannelSnapshot(channels=channels, summary=service.build_summary(channels))


@pytest.fixture
def formatter(criteria) -> ChannelFormatter:
    return ChannelFormatter(criteria)

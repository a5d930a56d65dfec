"""Tests for the channel domain handler."""

import pytest

from lnquery.channels.application.services.channel_service import ChannelHealthService
from lnquery.exceptions import GatewayError
from lnquery.handlers.channel_handler import ChannelDomainHandler
from lnquery.intents import Domain, Focus, Intent, IntentAttributes, IntentKind, Operation


def make_intent(
    operation: Operation = Operation.LIST,
    **attributes,
) -> Intent:
    return Intent(
        domain=Domain.CHANNELS,
        operation=operation,
        query="test query",
        attributes=IntentAttributes(**attributes),
    )


@pytest.fixture
def handler(service):
    return ChannelDomainHandler(service)


class TestChannelDomainHandler:
    """Test intent handling end to end over the mock gateway."""

    def test_accepts_channel_intents_only(self, handler):
        assert handler.can_handle(make_intent())
        assert not handler.can_handle(Intent.unknown("???"))

    @pytest.mark.asyncio
    async def test_list(self, handler):
        result = await handler.handle(make_intent())

        assert result.kind is IntentKind.CHANNEL_LIST
        assert result.text.startswith("Your node has 5 channels")
        assert len(result.result.channels) == 5
        assert result.result.summary.channel_count == 5

    @pytest.mark.asyncio
    async def test_active_filter_narrows_channels_not_summary(self, handler):
        result = await handler.handle(make_intent(active=True))

        assert len(result.result.channels) == 4
        assert all(channel.active for channel in result.result.channels)
        assert result.result.summary.inactive_channels == 1
        assert "Your active channels:" in result.text

    @pytest.mark.asyncio
    async def test_liquidity(self, handler):
        result = await handler.handle(make_intent(Operation.LIQUIDITY, check_balance=True))

        assert result.kind is IntentKind.CHANNEL_LIQUIDITY
        assert result.text.startswith("Liquidity Distribution:")
        assert "Channels outside the healthy band (2):" in result.text

    @pytest.mark.asyncio
    async def test_health(self, handler):
        result = await handler.handle(make_intent(focus=Focus.HEALTH))

        assert result.kind is IntentKind.CHANNEL_HEALTH
        assert result.text.startswith("Channel Health Summary: 2 healthy, 3 need attention.")
        assert len(result.result.channels) == 5

    @pytest.mark.asyncio
    async def test_unhealthy_returns_only_unhealthy_channels(self, handler):
        result = await handler.handle(make_intent(focus=Focus.UNHEALTHY))

        assert result.kind is IntentKind.CHANNEL_UNHEALTHY
        assert [c.channel_point for c in result.result.channels] == ["bitrefill:0", "kraken:1", "wos:2"]
        assert result.result.summary.unhealthy_channels == 3
        assert "(suggested: send 450,000 sats)" in result.text

    @pytest.mark.asyncio
    async def test_unhealthy_with_inactive_filter(self, handler):
        result = await handler.handle(make_intent(active=False, focus=Focus.UNHEALTHY))

        assert [c.channel_point for c in result.result.channels] == ["wos:2"]

    @pytest.mark.asyncio
    async def test_unhealthy_with_filter_excluding_every_unhealthy_channel(self, gateway_factory, pubkeys, criteria):
        balanced = {"capacity": 1_000_000, "local_balance": 500_000, "remote_balance": 500_000}
        gateway = gateway_factory(
            channels=[
                dict(balanced, channel_point="acinq:0", remote_pubkey=pubkeys["ACINQ"], active=True),
                dict(balanced, channel_point="wos:0", remote_pubkey=pubkeys["WalletOfSatoshi"], active=False),
            ]
        )
        handler = ChannelDomainHandler(ChannelHealthService(gateway, criteria))

        result = await handler.handle(make_intent(active=True, focus=Focus.UNHEALTHY))

        assert result.result.channels == []
        assert result.result.summary.unhealthy_channels == 1
        assert result.text == (
            "Your node has 1 unhealthy channel out of 2 total channels.\n\nYour active unhealthy channels: none."
        )

    @pytest.mark.asyncio
    async def test_gateway_failure_propagates(self, handler, mock_gateway):
        mock_gateway.fail_channels()

        with pytest.raises(GatewayError, match="Node unreachable"):
            await handler.handle(make_intent())

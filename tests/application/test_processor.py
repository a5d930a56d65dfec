"""Tests for the query processor."""

import pytest

from lnquery.application import QueryResponse, build_processor
from lnquery.application.processor import ERROR_TEXT_PREFIX, LightningQueryProcessor
from lnquery.handlers.registry import DomainHandlerRegistry
from lnquery.intents import IntentKind, RegexIntentClassifier
from lnquery.utils.logging import get_correlation_id


@pytest.fixture
def processor(mock_gateway):
    return build_processor(mock_gateway)


class TestExecuteQuery:
    """Test end-to-end query answering."""

    @pytest.mark.asyncio
    async def test_list_query(self, processor):
        response = await processor.execute_query("Show me my channels")

        assert isinstance(response, QueryResponse)
        assert not response.is_error
        assert response.intent.kind is IntentKind.CHANNEL_LIST
        assert response.text.startswith(
            "Your node has 5 channels with a total capacity of 0.05000000 BTC (5,000,000 sats)."
        )
        assert response.data["summary"]["totalCapacity"] == 5_000_000
        assert len(response.data["channels"]) == 5

    @pytest.mark.asyncio
    async def test_liquidity_query(self, processor):
        response = await processor.execute_query("Show me channel liquidity")

        assert response.intent.kind is IntentKind.CHANNEL_LIQUIDITY
        assert response.text.startswith("Liquidity Distribution:")

    @pytest.mark.asyncio
    async def test_unhealthy_query(self, processor):
        response = await processor.execute_query("show unhealthy channels")

        assert response.intent.kind is IntentKind.CHANNEL_UNHEALTHY
        assert response.text.startswith("Your node has 3 unhealthy channels out of 5 total channels.")
        assert len(response.data["channels"]) == 3

    @pytest.mark.asyncio
    async def test_active_unhealthy_query_with_only_inactive_problems(self, gateway_factory, pubkeys):
        balanced = {"capacity": 1_000_000, "local_balance": 500_000, "remote_balance": 500_000}
        gateway = gateway_factory(
            channels=[
                dict(balanced, channel_point="acinq:0", remote_pubkey=pubkeys["ACINQ"], active=True),
                dict(balanced, channel_point="wos:0", remote_pubkey=pubkeys["WalletOfSatoshi"], active=False),
            ]
        )

        response = await build_processor(gateway).execute_query(
            "show channels needing attention that are active"
        )

        assert response.intent.kind is IntentKind.CHANNEL_UNHEALTHY
        assert response.data["summary"]["unhealthyChannels"] == 1
        assert response.data["channels"] == []
        assert response.text == "\n".join(
            [
                "Your node has 1 unhealthy channel out of 2 total channels.",
                "",
                "Your active unhealthy channels: none.",
            ]
        )

    @pytest.mark.asyncio
    async def test_alias_failure_still_answers(self, processor, mock_gateway, pubkeys):
        mock_gateway.fail_alias(pubkeys["ACINQ"])

        response = await processor.execute_query("list channels")

        assert not response.is_error
        acinq = response.data["channels"][0]
        assert acinq["remote_alias"] == "Unknown (Error retrieving)"
        assert acinq["_error"]["type"] == "alias_retrieval_failed"
        assert "1. Unknown (Error retrieving): 0.02000000 BTC" in response.text

    @pytest.mark.asyncio
    async def test_gateway_failure_becomes_error_response(self, processor, mock_gateway):
        mock_gateway.fail_channels()

        response = await processor.execute_query("Show me my channels")

        assert response.is_error
        assert response.text == f"{ERROR_TEXT_PREFIX}Node unreachable"
        assert response.text == "Sorry, I couldn't process your query: Node unreachable"
        assert response.data == {"error": "Node unreachable"}
        assert response.intent.kind is IntentKind.UNKNOWN
        assert response.intent.error.error_type == "GatewayError"

    @pytest.mark.asyncio
    async def test_error_text_is_sanitized(self, processor, mock_gateway):
        mock_gateway.fail_channels(OSError("LND_MACAROON_PATH=/secret/admin.macaroon is unreadable"))

        response = await processor.execute_query("Show me my channels")

        assert "/secret" not in response.text
        assert response.data == {"error": "[REDACTED_MACAROON_PATH] is unreadable"}

    @pytest.mark.asyncio
    async def test_missing_handler_becomes_error_response(self):
        processor = LightningQueryProcessor(RegexIntentClassifier(), DomainHandlerRegistry({}))

        response = await processor.execute_query("Show me my channels")

        assert response.data == {"error": "No handler found for intent: channels/list"}

    @pytest.mark.asyncio
    async def test_correlation_id_cleared_after_query(self, processor):
        await processor.execute_query("Show me my channels")
        assert get_correlation_id() is None

    @pytest.mark.asyncio
    async def test_to_dict(self, processor):
        payload = (await processor.execute_query("check channel health")).to_dict()

        assert set(payload) == {"text", "data", "intent"}
        assert payload["intent"]["kind"] == "channel_health"
        assert payload["intent"]["attributes"] == {"focus": "health"}

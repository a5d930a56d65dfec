"""
Pytest configuration and global fixtures.

This module provides shared fixtures used across all tests: isolated
settings, the five-channel node fixture and a scriptable mock gateway.
"""

import asyncio
import json
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

import lnquery.utils.config as config_module
from lnquery.channels.schemas import ChannelRecord
from lnquery.exceptions import AliasLookupError, GatewayError
from lnquery.utils.config import Settings, reload_settings


def make_pubkey(char: str) -> str:
    """Build a valid 66-hex-char compressed pubkey from one hex character."""
    return "02" + char * 64


PUBKEY_ACINQ = make_pubkey("a")
PUBKEY_BITREFILL = make_pubkey("b")
PUBKEY_KRAKEN = make_pubkey("c")
PUBKEY_LNBIG = make_pubkey("d")
PUBKEY_WOS = make_pubkey("e")

ALIASES = {
    PUBKEY_ACINQ: "ACINQ",
    PUBKEY_BITREFILL: "Bitrefill",
    PUBKEY_KRAKEN: "Kraken",
    PUBKEY_LNBIG: "LNBig",
    PUBKEY_WOS: "WalletOfSatoshi",
}


def five_channel_records() -> list[dict[str, Any]]:
    """The worked example node: 5,000,000 sats split evenly, 4 active, 1 inactive.

    Local ratios: ACINQ 50%, Bitrefill 95%, Kraken 5%, LNBig ~51%, WalletOfSatoshi 30% (inactive).
    With the default 0.1-0.9 band, Bitrefill, Kraken and WalletOfSatoshi are unhealthy.
    """
    return [
        {
            "channel_point": "acinq:0",
            "remote_pubkey": PUBKEY_ACINQ,
            "capacity": 2_000_000,
            "local_balance": 1_000_000,
            "remote_balance": 1_000_000,
            "active": True,
        },
        {
            "channel_point": "bitrefill:0",
            "remote_pubkey": PUBKEY_BITREFILL,
            "capacity": 1_000_000,
            "local_balance": 950_000,
            "remote_balance": 50_000,
            "active": True,
        },
        {
            "channel_point": "kraken:1",
            "remote_pubkey": PUBKEY_KRAKEN,
            "capacity": 800_000,
            "local_balance": 40_000,
            "remote_balance": 760_000,
            "active": True,
        },
        {
            "channel_point": "lnbig:0",
            "remote_pubkey": PUBKEY_LNBIG,
            "capacity": 700_000,
            "local_balance": 360_000,
            "remote_balance": 340_000,
            "active": True,
        },
        {
            "channel_point": "wos:2",
            "remote_pubkey": PUBKEY_WOS,
            "capacity": 500_000,
            "local_balance": 150_000,
            "remote_balance": 350_000,
            "active": False,
        },
    ]


class MockGateway:
    """Scriptable in-memory gateway for testing."""

    def __init__(
        self,
        channels: list[dict[str, Any]] | None = None,
        aliases: dict[str, str | None] | None = None,
    ):
        self.channels = channels if channels is not None else five_channel_records()
        self.aliases = dict(ALIASES if aliases is None else aliases)
        self.failing_pubkeys: dict[str, Exception] = {}
        self.slow_pubkeys: dict[str, float] = {}
        self.channels_error: Exception | None = None

        self.get_channels_calls = 0
        self.alias_calls: list[str] = []

    async def get_channels(self) -> list[ChannelRecord | dict[str, Any]]:
        self.get_channels_calls += 1
        if self.channels_error is not None:
            raise self.channels_error
        return [dict(channel) for channel in self.channels]

    async def get_node_alias(self, pubkey: str) -> str | None:
        self.alias_calls.append(pubkey)
        if pubkey in self.slow_pubkeys:
            await asyncio.sleep(self.slow_pubkeys[pubkey])
        if pubkey in self.failing_pubkeys:
            raise self.failing_pubkeys[pubkey]
        return self.aliases.get(pubkey)

    def fail_alias(self, pubkey: str, error: Exception | None = None) -> None:
        self.failing_pubkeys[pubkey] = error or AliasLookupError("Node not found in graph", pubkey=pubkey)

    def fail_channels(self, error: Exception | None = None) -> None:
        self.channels_error = error or GatewayError("Node unreachable", operation="get_channels")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch) -> Generator[Settings, None, None]:
    """Give every test fresh settings built from a clean test environment."""
    for name in (
        "LNQUERY_HEALTH_MIN_LOCAL_RATIO",
        "LNQUERY_HEALTH_MAX_LOCAL_RATIO",
        "LNQUERY_ALIAS_TIMEOUT_SECONDS",
        "LNQUERY_MAX_CONCURRENT_ALIAS_LOOKUPS",
        "LNQUERY_STRICT_PUBKEYS",
        "LNQUERY_FIXTURE_PATH",
        "LNQUERY_JSON_LOGS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LNQUERY_ENVIRONMENT", "test")

    yield reload_settings()

    config_module._settings = None


@pytest.fixture
def channel_records() -> list[dict[str, Any]]:
    return five_channel_records()


@pytest.fixture
def mock_gateway() -> MockGateway:
    return MockGateway()


@pytest.fixture
def fixture_file(tmp_path: Path) -> Path:
    """Write the five-channel node as a static gateway JSON fixture."""
    path = tmp_path / "node.json"
    path.write_text(
        json.dumps({"channels": five_channel_records(), "aliases": ALIASES}),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def pubkeys() -> dict[str, str]:
    """Remote pubkey of each fixture channel, keyed by alias."""
    return {alias: pubkey for pubkey, alias in ALIASES.items()}


@pytest.fixture
def gateway_factory():
    """Build a mock gateway over custom channels and aliases."""
    return MockGateway

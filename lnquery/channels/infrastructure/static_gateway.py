"""In-memory Lightning node gateway.

Serves channel data from memory or from a JSON fixture file, so queries can be
answered without a live node (local CLI runs, demos, tests).

Fixture format::

    {
        "channels": [{"capacity": 1000000, "local_balance": 500000, ...}],
        "aliases": {"<pubkey>": "Node-1"},
        "failing_pubkeys": ["<pubkey>"],
        "alias_delays": {"<pubkey>": 0.5},
        "channels_error": "node unreachable"
    }

Only ``channels`` is required.
"""

import asyncio
import json
from pathlib import Path
from typing import Any

from lnquery.exceptions import AliasLookupError, ConfigurationError, GatewayError
from lnquery.utils.logging import get_logger

from ..schemas import ChannelRecord

logger = get_logger(__name__)


class StaticGateway:
    """Gateway backed by a fixed set of channel records."""

    def __init__(
        self,
        channels: list[ChannelRecord | dict[str, Any]] | None = None,
        aliases: dict[str, str] | None = None,
        *,
        failing_pubkeys: set[str] | None = None,
        alias_delays: dict[str, float] | None = None,
        channels_error: str | None = None,
    ):
        self.channels = [
            c if isinstance(c, ChannelRecord) else ChannelRecord.model_validate(c)
            for c in channels or []
        ]
        self.aliases = dict(aliases or {})
        self.failing_pubkeys = set(failing_pubkeys or ())
        self.alias_delays = dict(alias_delays or {})
        self.channels_error = channels_error

        self.alias_calls: list[str] = []

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StaticGateway":
        if "channels" not in data or not isinstance(data["channels"], list):
            raise ConfigurationError(
                "Fixture must contain a 'channels' list",
                setting="fixture_path",
                expected='{"channels": [...]}',
            )
        return cls(
            channels=data["channels"],
            aliases=data.get("aliases"),
            failing_pubkeys=set(data.get("failing_pubkeys", [])),
            alias_delays=data.get("alias_delays"),
            channels_error=data.get("channels_error"),
        )

    @classmethod
    def from_file(cls, path: Path | str) -> "StaticGateway":
        """Load a gateway from a JSON fixture file.

        Raises:
            ConfigurationError: If the file is missing or not valid fixture JSON
        """
        fixture_path = Path(path)
        try:
            data = json.loads(fixture_path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Fixture file not found: {fixture_path}",
                setting="fixture_path",
                original_error=e,
            ) from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Fixture file is not valid JSON: {e.msg} (line {e.lineno})",
                setting="fixture_path",
                original_error=e,
            ) from e

        gateway = cls.from_dict(data)
        logger.info("fixture_loaded", channel_count=len(gateway.channels))
        return gateway

    async def get_channels(self) -> list[ChannelRecord]:
        if self.channels_error is not None:
            raise GatewayError(self.channels_error, operation="get_channels")
        return [record.model_copy() for record in self.channels]

    async def get_node_alias(self, pubkey: str) -> str | None:
        self.alias_calls.append(pubkey)

        delay = self.alias_delays.get(pubkey)
        if delay:
            await asyncio.sleep(delay)

        if pubkey in self.failing_pubkeys:
            raise AliasLookupError("Node not found in graph", pubkey=pubkey)
        return self.aliases.get(pubkey)

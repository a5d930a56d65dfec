"""Lightning node gateway interface.

The core never talks to a node directly: anything that can list channels and
resolve node aliases (an LND gRPC client, an LNC session, a fixture file) can
stand behind this protocol.
"""

from typing import Any, Protocol, runtime_checkable

from .schemas import ChannelRecord


@runtime_checkable
class LightningNetworkGateway(Protocol):
    """Protocol defining the node gateway interface."""

    async def get_channels(self) -> list[ChannelRecord | dict[str, Any]]:
        """List all channels of the local node.

        Raises:
            GatewayError: If the node cannot be queried
        """
        ...

    async def get_node_alias(self, pubkey: str) -> str | None:
        """Resolve the alias of a remote node (None if it has none).

        Raises:
            GatewayError: If the lookup fails
        """
        ...

"""Data source registry: (protocol, chain) -> backend locator."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import (
    GRAPH_API_KEY_PLACEHOLDER,
    GRAPH_GATEWAY_BASE,
    MORPHO_API_URL,
    MORPHO_CHAIN_IDS,
    PROTOCOL_DISPLAY_NAMES,
    SUBGRAPH_SOURCES,
    Chain,
    Protocol,
)
from .exceptions import UnsupportedPairError
from .settings import QuerySettings

NOTE_NOT_CONFIGURED = "Demo data. Set GRAPH_API_KEY for live data."
NOTE_FORCED = "Demo data. Unset DEMO_MODE for live data."
NOTE_LIVE_FAILED = "Live source unavailable, using cached demo data."


@dataclass(frozen=True)
class DataSourceDescriptor:
    """Where the data for one (protocol, chain) pair lives."""

    protocol: Protocol
    chain: Chain
    url: str
    description: str
    requires_credential: bool
    chain_id: int | None = None

    @property
    def label(self) -> str:
        return f"{self.protocol.value}/{self.chain.value}"


def build_subgraph_url(subgraph_id: str, api_key: str | None) -> str:
    """Gateway URL for a subgraph; the key is embedded in the path."""
    return f"{GRAPH_GATEWAY_BASE}/{api_key or GRAPH_API_KEY_PLACEHOLDER}/subgraphs/id/{subgraph_id}"


class DataSourceRegistry:
    """Read-only map of every supported (protocol, chain) pair.

    Descriptors are built once from static configuration and the credentials
    present at construction time. Liveness is read from settings on every
    call so toggling ``demo_mode`` takes effect immediately.
    """

    def __init__(self, settings: QuerySettings):
        self.settings = settings
        api_key = (
            settings.graph_api_key.get_secret_value() if settings.graph_api_key else None
        )

        entries: dict[tuple[Protocol, Chain], DataSourceDescriptor] = {}
        for (protocol, chain), source in SUBGRAPH_SOURCES.items():
            entries[(protocol, chain)] = DataSourceDescriptor(
                protocol=protocol,
                chain=chain,
                url=build_subgraph_url(source["subgraph_id"], api_key),
                description=source["description"],
                requires_credential=True,
            )
        for chain, chain_id in MORPHO_CHAIN_IDS.items():
            entries[(Protocol.MORPHO_BLUE, chain)] = DataSourceDescriptor(
                protocol=Protocol.MORPHO_BLUE,
                chain=chain,
                url=MORPHO_API_URL,
                description=f"{PROTOCOL_DISPLAY_NAMES[Protocol.MORPHO_BLUE]} on "
                f"{chain.value.capitalize()} - markets, rates, vaults",
                requires_credential=False,
                chain_id=chain_id,
            )
        self._entries = entries

    def locate(self, protocol: Protocol | str, chain: Chain | str) -> DataSourceDescriptor:
        """Return the descriptor for a pair.

        Raises:
            UnsupportedPairError: If the pair is not in the support matrix
        """
        try:
            key = (Protocol(protocol), Chain(chain))
        except ValueError as e:
            raise UnsupportedPairError(str(protocol), str(chain)) from e
        descriptor = self._entries.get(key)
        if descriptor is None:
            raise UnsupportedPairError(key[0].value, key[1].value)
        return descriptor

    def descriptors(self, protocol: Protocol | None = None) -> list[DataSourceDescriptor]:
        return [
            d for d in self._entries.values() if protocol is None or d.protocol == protocol
        ]

    def synthetic_reason(self, descriptor: DataSourceDescriptor) -> str | None:
        """Why a source must be served from synthetic data, or None if live."""
        if self.settings.demo_mode:
            return NOTE_FORCED
        if descriptor.requires_credential and not self.settings.graph_key_configured:
            return NOTE_NOT_CONFIGURED
        return None

    def is_live(self, descriptor: DataSourceDescriptor) -> bool:
        return self.synthetic_reason(descriptor) is None

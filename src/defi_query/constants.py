"""Data source constants."""

from enum import Enum
from typing import TypedDict


class Chain(str, Enum):
    BASE = "base"
    ARBITRUM = "arbitrum"
    OPTIMISM = "optimism"
    ETHEREUM = "ethereum"


class Protocol(str, Enum):
    AAVE_V3 = "aave-v3"
    UNISWAP_V3 = "uniswap-v3"
    MORPHO_BLUE = "morpho-blue"


class Action(str, Enum):
    TVL = "tvl"
    RATES = "rates"
    POOLS = "pools"
    VOLUME = "volume"
    VAULTS = "vaults"
    UNKNOWN = "unknown"


class SubgraphSource(TypedDict):
    subgraph_id: str
    description: str


GRAPH_GATEWAY_BASE = "https://gateway.thegraph.com/api"
GRAPH_API_KEY_PLACEHOLDER = "[YOUR-API-KEY]"

# Subgraph IDs on The Graph decentralized network
SUBGRAPH_SOURCES: dict[tuple[Protocol, Chain], SubgraphSource] = {
    (Protocol.AAVE_V3, Chain.BASE): {
        "subgraph_id": "GQFbb95cE6d8mV989mL5figjaGaKCQB3xqYrr1bRyXqF",
        "description": "Aave V3 on Base - TVL, lending rates, reserves",
    },
    (Protocol.AAVE_V3, Chain.ARBITRUM): {
        "subgraph_id": "DLuE98kEb5pQNXAcKFQGQgfSQ57Xdou4jnVbAEqMfy3B",
        "description": "Aave V3 on Arbitrum - TVL, lending rates, reserves",
    },
    (Protocol.AAVE_V3, Chain.OPTIMISM): {
        "subgraph_id": "DSfLz8oQBUeU5atALgUFQKMTSYV9mZAVYp4noLSXAfQ",
        "description": "Aave V3 on Optimism - TVL, lending rates, reserves",
    },
    (Protocol.UNISWAP_V3, Chain.BASE): {
        "subgraph_id": "43Hwfi3dJSoGpyas9VwNoDAv55yjgGrPpNSmbQZArzMG",
        "description": "Uniswap V3 on Base - pools, TVL, volume",
    },
    (Protocol.UNISWAP_V3, Chain.ARBITRUM): {
        "subgraph_id": "FbCGRftH4a3yZugY7TnbYgPJVEv2LvMT6oF1fxPe9aJM",
        "description": "Uniswap V3 on Arbitrum - pools, TVL, volume",
    },
}

MORPHO_API_URL = "https://blue-api.morpho.org/graphql"

MORPHO_CHAIN_IDS: dict[Chain, int] = {
    Chain.BASE: 8453,
    Chain.ETHEREUM: 1,
}

PROTOCOL_DISPLAY_NAMES: dict[Protocol, str] = {
    Protocol.AAVE_V3: "Aave V3",
    Protocol.UNISWAP_V3: "Uniswap V3",
    Protocol.MORPHO_BLUE: "Morpho Blue",
}

DEFAULT_LIMIT = 10
MAX_PAGE_SIZE = 50

RAY = 10**27
WAD = 10**18

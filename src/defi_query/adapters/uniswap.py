from __future__ import annotations

from dataclasses import replace
from typing import Any, Literal

from ..constants import DEFAULT_LIMIT, MAX_PAGE_SIZE, Action, Chain, Protocol
from ..domain import DexTvl, PoolStats, now_ms
from ..exceptions import DataSourceError
from ..logger import get_logger
from ..units import fee_tier_to_bps, parse_count, parse_usd
from . import demo_data
from .base import BaseProtocolAccessor, require_items

logger = get_logger(__name__)

PoolOrder = Literal["tvl", "volume", "fees"]

UNISWAP_POOLS_QUERY = """
query UniswapPools($first: Int!, $orderBy: String!, $orderDirection: String!) {
  pools(
    first: $first
    orderBy: $orderBy
    orderDirection: $orderDirection
  ) {
    id
    token0 { symbol name decimals }
    token1 { symbol name decimals }
    feeTier
    liquidity
    totalValueLockedUSD
    volumeUSD
    feesUSD
    txCount
    token0Price
    token1Price
  }
}
"""

UNISWAP_FACTORY_QUERY = """
query UniswapFactory {
  factories(first: 1) {
    id
    poolCount
    txCount
    totalValueLockedUSD
    totalVolumeUSD
  }
}
"""

# Subgraph field and record attribute for each ordering key
_ORDER_FIELDS: dict[str, tuple[str, str]] = {
    "tvl": ("totalValueLockedUSD", "tvl_usd"),
    "volume": ("volumeUSD", "volume_24h_usd"),
    "fees": ("feesUSD", "fees_24h_usd"),
}

TVL_SAMPLE_SIZE = 20
TVL_TOP_POOLS = 10


def _symbol(token: Any) -> str:
    if isinstance(token, dict):
        return str(token.get("symbol") or "?")
    return "?"


def format_pool(pool: dict[str, Any]) -> PoolStats:
    """Normalize a raw subgraph pool."""
    token0 = _symbol(pool.get("token0"))
    token1 = _symbol(pool.get("token1"))
    return PoolStats(
        pair=f"{token0}/{token1}",
        fee_tier=fee_tier_to_bps(pool.get("feeTier")),
        tvl_usd=parse_usd(pool.get("totalValueLockedUSD")),
        volume_24h_usd=parse_usd(pool.get("volumeUSD")),
        fees_24h_usd=parse_usd(pool.get("feesUSD")),
        tx_count=parse_count(pool.get("txCount")),
        price=f"1 {token0} = {parse_usd(pool.get('token0Price')):.6f} {token1}",
    )


def _sort_key(order_by: str) -> str:
    if order_by not in _ORDER_FIELDS:
        raise ValueError(
            f"Unknown pool ordering '{order_by}'. Available: {', '.join(_ORDER_FIELDS)}"
        )
    return _ORDER_FIELDS[order_by][1]


class UniswapV3Accessor(BaseProtocolAccessor):
    """Uniswap V3 pools served from The Graph subgraphs."""

    protocol = Protocol.UNISWAP_V3
    supported_chains = (Chain.BASE, Chain.ARBITRUM)
    capabilities = frozenset({Action.TVL, Action.POOLS, Action.VOLUME})

    async def fetch_tvl(self, chain: Chain) -> DexTvl:
        """Protocol TVL on ``chain`` plus its 10 largest pools.

        The factory entity supplies the chain-wide total and pool count. When
        the factory query fails, both are computed from the fetched pools.
        """
        descriptor = self.ensure_chain(chain)

        async def live() -> DexTvl:
            data = await self._query(
                descriptor,
                UNISWAP_POOLS_QUERY,
                {
                    "first": TVL_SAMPLE_SIZE,
                    "orderBy": "totalValueLockedUSD",
                    "orderDirection": "desc",
                },
            )
            pools = [format_pool(p) for p in require_items(data, "pools", descriptor.label)]

            try:
                factory_data = await self._query(descriptor, UNISWAP_FACTORY_QUERY)
                factory = require_items(factory_data, "factories", descriptor.label)[0]
                total_tvl_usd = parse_usd(factory.get("totalValueLockedUSD"))
                pool_count = parse_count(factory.get("poolCount"))
            except DataSourceError as e:
                logger.info(
                    "Factory totals unavailable for %s, summing pools instead: %s",
                    descriptor.label,
                    e,
                )
                total_tvl_usd = sum(p.tvl_usd for p in pools)
                pool_count = len(pools)

            return DexTvl(
                protocol=self.protocol,
                chain=descriptor.chain,
                total_tvl_usd=total_tvl_usd,
                pool_count=pool_count,
                top_pools=pools[:TVL_TOP_POOLS],
            )

        def synthetic(note: str) -> DexTvl:
            pools = demo_data.UNISWAP_POOLS.get(descriptor.chain, [])
            return DexTvl(
                protocol=self.protocol,
                chain=descriptor.chain,
                total_tvl_usd=demo_data.UNISWAP_TVL.get(descriptor.chain, 0.0),
                pool_count=demo_data.UNISWAP_POOL_COUNT.get(descriptor.chain, 0),
                top_pools=[replace(p) for p in pools[:TVL_TOP_POOLS]],
                demo=True,
                demo_note=note,
            )

        return await self._live_or_synthetic(descriptor, live, synthetic)

    async def fetch_top_pools(
        self,
        chain: Chain,
        limit: int = DEFAULT_LIMIT,
        order_by: PoolOrder = "tvl",
    ) -> list[PoolStats]:
        """Largest pools on ``chain`` by TVL, 24h volume or 24h fees.

        Each pool is stamped with the request time since it is returned on
        its own rather than inside a snapshot.
        """
        descriptor = self.ensure_chain(chain)
        attr = _sort_key(order_by)

        async def live() -> list[PoolStats]:
            data = await self._query(
                descriptor,
                UNISWAP_POOLS_QUERY,
                {
                    "first": min(limit, MAX_PAGE_SIZE),
                    "orderBy": _ORDER_FIELDS[order_by][0],
                    "orderDirection": "desc",
                },
            )
            pools = [format_pool(p) for p in require_items(data, "pools", descriptor.label)]
            return self._rank(pools, attr, limit)

        def synthetic(note: str) -> list[PoolStats]:
            pools = [replace(p) for p in demo_data.UNISWAP_POOLS.get(descriptor.chain, [])]
            return self._rank(pools, attr, limit, demo=True, demo_note=note)

        return await self._live_or_synthetic(descriptor, live, synthetic)

    @staticmethod
    def _rank(
        pools: list[PoolStats],
        attr: str,
        limit: int,
        demo: bool | None = None,
        demo_note: str | None = None,
    ) -> list[PoolStats]:
        timestamp = now_ms()
        ranked = sorted(pools, key=lambda p: getattr(p, attr), reverse=True)[:limit]
        for pool in ranked:
            pool.timestamp = timestamp
            pool.demo = demo
            pool.demo_note = demo_note
        return ranked

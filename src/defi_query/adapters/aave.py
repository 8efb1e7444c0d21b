from __future__ import annotations

from dataclasses import replace
from typing import Any

from ..constants import DEFAULT_LIMIT, MAX_PAGE_SIZE, Action, Chain, Protocol
from ..domain import LendingRates, LendingTvl, ReserveRates
from ..units import fraction_to_percent, parse_usd, ray_to_percent
from . import demo_data
from .base import BaseProtocolAccessor, require_items

AAVE_RESERVES_QUERY = """
query AaveReserves($first: Int!, $orderBy: String!, $orderDirection: String!) {
  reserves(
    first: $first
    orderBy: $orderBy
    orderDirection: $orderDirection
    where: { isActive: true }
  ) {
    id
    symbol
    name
    decimals
    totalLiquidity
    totalLiquidityUSD
    totalCurrentVariableDebt
    totalCurrentVariableDebtUSD
    liquidityRate
    variableBorrowRate
    utilizationRate
  }
}
"""

TVL_SAMPLE_SIZE = 20
TVL_TOP_RESERVES = 10


def format_reserve(reserve: dict[str, Any]) -> ReserveRates:
    """Normalize a raw subgraph reserve.

    Rates arrive as ray-scaled annual rates, utilization as a 0-1 fraction.
    """
    return ReserveRates(
        symbol=str(reserve.get("symbol") or ""),
        name=str(reserve.get("name") or ""),
        tvl_usd=parse_usd(reserve.get("totalLiquidityUSD")),
        supply_apy=ray_to_percent(reserve.get("liquidityRate")),
        borrow_apy=ray_to_percent(reserve.get("variableBorrowRate")),
        utilization_rate=fraction_to_percent(reserve.get("utilizationRate"), 2),
    )


class AaveV3Accessor(BaseProtocolAccessor):
    """Aave V3 lending markets served from The Graph subgraphs."""

    protocol = Protocol.AAVE_V3
    supported_chains = (Chain.BASE, Chain.ARBITRUM, Chain.OPTIMISM)
    capabilities = frozenset({Action.TVL, Action.RATES})

    async def fetch_tvl(self, chain: Chain) -> LendingTvl:
        """Total liquidity across the largest reserves on ``chain``.

        The total is summed over the 20 largest active reserves; the top 10
        of those are returned.
        """
        descriptor = self.ensure_chain(chain)

        async def live() -> LendingTvl:
            data = await self._query(
                descriptor,
                AAVE_RESERVES_QUERY,
                {
                    "first": TVL_SAMPLE_SIZE,
                    "orderBy": "totalLiquidityUSD",
                    "orderDirection": "desc",
                },
            )
            reserves = [format_reserve(r) for r in require_items(data, "reserves", descriptor.label)]
            return LendingTvl(
                protocol=self.protocol,
                chain=descriptor.chain,
                total_tvl_usd=sum(r.tvl_usd for r in reserves),
                reserve_count=len(reserves),
                top_reserves=reserves[:TVL_TOP_RESERVES],
            )

        def synthetic(note: str) -> LendingTvl:
            reserves = [replace(r) for r in demo_data.AAVE_RESERVES.get(descriptor.chain, [])]
            return LendingTvl(
                protocol=self.protocol,
                chain=descriptor.chain,
                total_tvl_usd=sum(r.tvl_usd for r in reserves),
                reserve_count=len(reserves),
                top_reserves=reserves,
                demo=True,
                demo_note=note,
            )

        return await self._live_or_synthetic(descriptor, live, synthetic)

    async def fetch_rates(self, chain: Chain, limit: int = DEFAULT_LIMIT) -> LendingRates:
        """Reserves on ``chain`` ordered by supply APY, highest first."""
        descriptor = self.ensure_chain(chain)

        async def live() -> LendingRates:
            data = await self._query(
                descriptor,
                AAVE_RESERVES_QUERY,
                {
                    "first": min(limit, MAX_PAGE_SIZE),
                    "orderBy": "liquidityRate",
                    "orderDirection": "desc",
                },
            )
            reserves = [format_reserve(r) for r in require_items(data, "reserves", descriptor.label)]
            reserves.sort(key=lambda r: r.supply_apy, reverse=True)
            return LendingRates(
                protocol=self.protocol, chain=descriptor.chain, rates=reserves[:limit]
            )

        def synthetic(note: str) -> LendingRates:
            reserves = sorted(
                (replace(r) for r in demo_data.AAVE_RESERVES.get(descriptor.chain, [])),
                key=lambda r: r.supply_apy,
                reverse=True,
            )
            return LendingRates(
                protocol=self.protocol,
                chain=descriptor.chain,
                rates=reserves[:limit],
                demo=True,
                demo_note=note,
            )

        return await self._live_or_synthetic(descriptor, live, synthetic)

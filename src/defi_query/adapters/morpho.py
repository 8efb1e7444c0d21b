from __future__ import annotations

from dataclasses import replace
from operator import attrgetter
from typing import Any, Literal

from ..constants import DEFAULT_LIMIT, MAX_PAGE_SIZE, Action, Chain, Protocol
from ..domain import MarketRates, MarketStats, MarketTvl, TopVaults, VaultStats
from ..fanout import gather_settled
from ..units import fraction_to_percent, parse_usd, wad_to_percent
from . import demo_data
from .base import BaseProtocolAccessor, require_items

MarketOrder = Literal["supplyAPY", "borrowAPY", "tvl"]

MORPHO_MARKETS_QUERY = """
query MorphoMarkets($chainIds: [Int!]!, $first: Int!) {
  markets(
    where: { chainId_in: $chainIds }
    orderBy: SupplyAssetsUsd
    orderDirection: Desc
    first: $first
  ) {
    items {
      id
      uniqueKey
      lltv
      loanAsset { address symbol name decimals priceUsd }
      collateralAsset { address symbol name decimals priceUsd }
      state {
        supplyAssets
        supplyAssetsUsd
        borrowAssets
        borrowAssetsUsd
        liquidityAssetsUsd
        utilization
        supplyApy
        borrowApy
        netSupplyApy
        netBorrowApy
      }
    }
  }
}
"""

MORPHO_VAULTS_QUERY = """
query MorphoVaults($chainIds: [Int!]!, $first: Int!) {
  vaults(
    where: { chainId_in: $chainIds }
    orderBy: TotalAssetsUsd
    orderDirection: Desc
    first: $first
  ) {
    items {
      address
      name
      symbol
      creationTimestamp
      asset { address symbol name decimals priceUsd }
      state {
        totalAssets
        totalAssetsUsd
        apy
        netApy
      }
    }
  }
}
"""

_MARKET_SORT_ATTRS: dict[str, str] = {
    "supplyAPY": "supply_apy",
    "borrowAPY": "borrow_apy",
    "tvl": "tvl_usd",
}


def _nested(item: dict[str, Any], key: str) -> dict[str, Any]:
    value = item.get(key)
    return value if isinstance(value, dict) else {}


def format_market(market: dict[str, Any]) -> MarketStats:
    """Normalize a Morpho API market; APYs and utilization are 0-1 fractions."""
    state = _nested(market, "state")
    collateral = _nested(market, "collateralAsset")
    return MarketStats(
        id=str(market.get("uniqueKey") or market.get("id") or ""),
        loan_token=str(_nested(market, "loanAsset").get("symbol") or "?"),
        collateral_token=str(collateral.get("symbol") or "None"),
        lltv=wad_to_percent(market.get("lltv")),
        tvl_usd=round(parse_usd(state.get("supplyAssetsUsd")), 2),
        supply_apy=fraction_to_percent(state.get("supplyApy"), 4),
        borrow_apy=fraction_to_percent(state.get("borrowApy"), 4),
        utilization=fraction_to_percent(state.get("utilization"), 2),
    )


def format_vault(vault: dict[str, Any]) -> VaultStats:
    state = _nested(vault, "state")
    return VaultStats(
        address=str(vault.get("address") or ""),
        name=str(vault.get("name") or ""),
        symbol=str(vault.get("symbol") or ""),
        asset=str(_nested(vault, "asset").get("symbol") or "?"),
        tvl_usd=round(parse_usd(state.get("totalAssetsUsd")), 2),
        apy=fraction_to_percent(state.get("apy"), 4),
        net_apy=fraction_to_percent(state.get("netApy"), 4),
    )


def _market_sort_attr(sort_by: str) -> str:
    if sort_by not in _MARKET_SORT_ATTRS:
        raise ValueError(
            f"Unknown market ordering '{sort_by}'. "
            f"Available: {', '.join(_MARKET_SORT_ATTRS)}"
        )
    return _MARKET_SORT_ATTRS[sort_by]


class MorphoBlueAccessor(BaseProtocolAccessor):
    """Morpho Blue markets and vaults served from the public Morpho API.

    The API needs no credential, so data is live unless demo mode is forced.
    """

    protocol = Protocol.MORPHO_BLUE
    supported_chains = (Chain.BASE, Chain.ETHEREUM)
    capabilities = frozenset({Action.TVL, Action.RATES, Action.VAULTS})

    def _chain_vars(self, chain_id: int | None, first: int) -> dict[str, Any]:
        return {"chainIds": [chain_id], "first": first}

    async def fetch_tvl(self, chain: Chain, limit: int = 20) -> MarketTvl:
        """Supplied USD across the largest markets on ``chain``."""
        descriptor = self.ensure_chain(chain)

        async def live() -> MarketTvl:
            data = await self._query(
                descriptor,
                MORPHO_MARKETS_QUERY,
                self._chain_vars(descriptor.chain_id, min(limit, MAX_PAGE_SIZE)),
            )
            markets = [format_market(m) for m in require_items(data, "markets", descriptor.label)]
            return MarketTvl(
                protocol=self.protocol,
                chain=descriptor.chain,
                total_tvl_usd=sum(m.tvl_usd for m in markets),
                market_count=len(markets),
                top_markets=markets,
            )

        def synthetic(note: str) -> MarketTvl:
            markets = [
                replace(m) for m in demo_data.MORPHO_MARKETS.get(descriptor.chain, [])[:limit]
            ]
            return MarketTvl(
                protocol=self.protocol,
                chain=descriptor.chain,
                total_tvl_usd=sum(m.tvl_usd for m in markets),
                market_count=len(markets),
                top_markets=markets,
                demo=True,
                demo_note=note,
            )

        return await self._live_or_synthetic(descriptor, live, synthetic)

    async def fetch_rates(
        self,
        chain: Chain,
        limit: int = DEFAULT_LIMIT,
        sort_by: MarketOrder = "supplyAPY",
    ) -> MarketRates:
        """Markets on ``chain`` ranked by ``sort_by``, highest first."""
        descriptor = self.ensure_chain(chain)
        attr = _market_sort_attr(sort_by)

        async def live() -> MarketRates:
            data = await self._query(
                descriptor,
                MORPHO_MARKETS_QUERY,
                self._chain_vars(descriptor.chain_id, MAX_PAGE_SIZE),
            )
            markets = [format_market(m) for m in require_items(data, "markets", descriptor.label)]
            return MarketRates(
                protocol=self.protocol,
                chain=descriptor.chain,
                markets=sorted(markets, key=attrgetter(attr), reverse=True)[:limit],
            )

        def synthetic(note: str) -> MarketRates:
            markets = [replace(m) for m in demo_data.MORPHO_MARKETS.get(descriptor.chain, [])]
            return MarketRates(
                protocol=self.protocol,
                chain=descriptor.chain,
                markets=sorted(markets, key=attrgetter(attr), reverse=True)[:limit],
                demo=True,
                demo_note=note,
            )

        return await self._live_or_synthetic(descriptor, live, synthetic)

    async def fetch_top_vaults(self, chain: Chain, limit: int = DEFAULT_LIMIT) -> TopVaults:
        """Vaults on ``chain`` ordered by TVL, largest first."""
        descriptor = self.ensure_chain(chain)

        async def live() -> TopVaults:
            data = await self._query(
                descriptor,
                MORPHO_VAULTS_QUERY,
                self._chain_vars(descriptor.chain_id, min(limit, MAX_PAGE_SIZE)),
            )
            vaults = [format_vault(v) for v in require_items(data, "vaults", descriptor.label)]
            vaults.sort(key=lambda v: v.tvl_usd, reverse=True)
            return TopVaults(
                protocol=self.protocol, chain=descriptor.chain, vaults=vaults[:limit]
            )

        def synthetic(note: str) -> TopVaults:
            vaults = sorted(
                (replace(v) for v in demo_data.MORPHO_VAULTS.get(descriptor.chain, [])),
                key=lambda v: v.tvl_usd,
                reverse=True,
            )
            return TopVaults(
                protocol=self.protocol,
                chain=descriptor.chain,
                vaults=vaults[:limit],
                demo=True,
                demo_note=note,
            )

        return await self._live_or_synthetic(descriptor, live, synthetic)

    async def fetch_top_vaults_all_chains(self, limit: int = DEFAULT_LIMIT) -> list[TopVaults]:
        return await gather_settled(
            [c.value for c in self.supported_chains],
            [self.fetch_top_vaults(c, limit) for c in self.supported_chains],
        )

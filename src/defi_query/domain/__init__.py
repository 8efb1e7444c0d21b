"""Normalized metric records returned by protocol accessors."""

from __future__ import annotations

import time
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any

from ..constants import Chain, Protocol

# Wire names that plain camelCase would get wrong
_WIRE_NAMES = {
    "total_tvl_usd": "totalTVLUSD",
    "tvl_usd": "tvlUSD",
    "supply_apy": "supplyAPY",
    "borrow_apy": "borrowAPY",
    "volume_24h_usd": "volume24hUSD",
    "fees_24h_usd": "fees24hUSD",
    "execution_time_ms": "executionTimeMs",
}

# Omitted from the wire form when unset
_OPTIONAL_FIELDS = {"timestamp", "demo", "demo_note"}


def now_ms() -> int:
    return int(time.time() * 1000)


def _wire_name(name: str) -> str:
    if name in _WIRE_NAMES:
        return _WIRE_NAMES[name]
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_wire(value: Any) -> Any:
    """Recursively convert records into JSON-ready structures with wire keys."""
    if is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {}
        for f in fields(value):
            item = getattr(value, f.name)
            if item is None and f.name in _OPTIONAL_FIELDS:
                continue
            out[_wire_name(f.name)] = to_wire(item)
        return out
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {to_wire(k): to_wire(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    return value


@dataclass
class ReserveRates:
    """One Aave reserve."""

    symbol: str
    name: str
    tvl_usd: float
    supply_apy: float  # percentage
    borrow_apy: float  # percentage
    utilization_rate: float  # percentage


@dataclass
class LendingTvl:
    protocol: Protocol
    chain: Chain
    total_tvl_usd: float
    reserve_count: int
    top_reserves: list[ReserveRates]
    timestamp: int = field(default_factory=now_ms)
    demo: bool | None = None
    demo_note: str | None = None


@dataclass
class LendingRates:
    protocol: Protocol
    chain: Chain
    rates: list[ReserveRates]
    timestamp: int = field(default_factory=now_ms)
    demo: bool | None = None
    demo_note: str | None = None


@dataclass
class PoolStats:
    """One Uniswap pool.

    ``timestamp``, ``demo`` and ``demo_note`` are only set when pools are
    returned on their own rather than nested in a ``DexTvl`` snapshot.
    """

    pair: str
    fee_tier: float  # bps
    tvl_usd: float
    volume_24h_usd: float
    fees_24h_usd: float
    tx_count: int
    price: str
    timestamp: int | None = None
    demo: bool | None = None
    demo_note: str | None = None


@dataclass
class DexTvl:
    protocol: Protocol
    chain: Chain
    total_tvl_usd: float
    pool_count: int
    top_pools: list[PoolStats]
    timestamp: int = field(default_factory=now_ms)
    demo: bool | None = None
    demo_note: str | None = None


@dataclass
class MarketStats:
    """One Morpho Blue market."""

    id: str
    loan_token: str
    collateral_token: str
    lltv: float  # percentage
    tvl_usd: float
    supply_apy: float  # percentage
    borrow_apy: float  # percentage
    utilization: float  # percentage


@dataclass
class MarketTvl:
    protocol: Protocol
    chain: Chain
    total_tvl_usd: float
    market_count: int
    top_markets: list[MarketStats]
    timestamp: int = field(default_factory=now_ms)
    demo: bool | None = None
    demo_note: str | None = None


@dataclass
class MarketRates:
    protocol: Protocol
    chain: Chain
    markets: list[MarketStats]
    timestamp: int = field(default_factory=now_ms)
    demo: bool | None = None
    demo_note: str | None = None


@dataclass
class VaultStats:
    """One Morpho vault."""

    address: str
    name: str
    symbol: str
    asset: str
    tvl_usd: float
    apy: float  # percentage
    net_apy: float  # percentage


@dataclass
class TopVaults:
    protocol: Protocol
    chain: Chain
    vaults: list[VaultStats]
    timestamp: int = field(default_factory=now_ms)
    demo: bool | None = None
    demo_note: str | None = None


__all__ = [
    "DexTvl",
    "LendingRates",
    "LendingTvl",
    "MarketRates",
    "MarketStats",
    "MarketTvl",
    "PoolStats",
    "ReserveRates",
    "TopVaults",
    "VaultStats",
    "now_ms",
    "to_wire",
]

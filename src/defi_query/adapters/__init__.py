from __future__ import annotations

from ..constants import Protocol
from .aave import AaveV3Accessor
from .base import BaseProtocolAccessor
from .morpho import MorphoBlueAccessor
from .uniswap import UniswapV3Accessor

ACCESSOR_REGISTRY: dict[Protocol, type[BaseProtocolAccessor]] = {
    Protocol.AAVE_V3: AaveV3Accessor,
    Protocol.UNISWAP_V3: UniswapV3Accessor,
    Protocol.MORPHO_BLUE: MorphoBlueAccessor,
}


def get_accessor_class(protocol: Protocol | str) -> type[BaseProtocolAccessor]:
    """Get accessor class by protocol identifier.

    Args:
        protocol: Protocol enum member or its string value (case-insensitive)

    Returns:
        Accessor class

    Raises:
        ValueError: If protocol is not recognized
    """
    try:
        key = Protocol(protocol.lower() if isinstance(protocol, str) else protocol)
    except ValueError:
        raise ValueError(
            f"Unknown protocol '{protocol}'. "
            f"Available: {', '.join(p.value for p in ACCESSOR_REGISTRY)}"
        ) from None
    return ACCESSOR_REGISTRY[key]


__all__ = [
    "ACCESSOR_REGISTRY",
    "AaveV3Accessor",
    "BaseProtocolAccessor",
    "MorphoBlueAccessor",
    "UniswapV3Accessor",
    "get_accessor_class",
]

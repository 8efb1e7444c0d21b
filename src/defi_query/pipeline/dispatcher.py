"""Route a resolved intent to protocol accessor calls and wrap the outcome."""

from __future__ import annotations

import time

from ..adapters import BaseProtocolAccessor, get_accessor_class
from ..constants import Action
from ..fanout import gather_keyed, gather_settled
from ..logger import get_logger
from ..nlq import QueryIntent
from ..report.envelope import ChainMapResult, ListResult, QueryResult, ResultData, SingleResult
from ..state import AppState

logger = get_logger(__name__)

UNKNOWN_PROTOCOL_MESSAGE = (
    "Could not determine protocol. Try specifying 'Aave', 'Uniswap' or 'Morpho' in your query."
)
UNKNOWN_ACTION_MESSAGE = (
    "Could not determine what to look up. "
    "Try asking for TVL, rates, pools, volume or vaults."
)


def elapsed_ms(started: float) -> int:
    return max(0, int((time.perf_counter() - started) * 1000))


async def _route(accessor: BaseProtocolAccessor, intent: QueryIntent) -> ResultData:
    """Call the accessor operation(s) that answer ``intent``.

    Actions a protocol cannot answer fall back to its TVL snapshot. Without
    a chain, TVL, rates and vaults fan out to a flat list while pools fan out
    to a map keyed by chain name.
    """
    chain = intent.chain
    limit = intent.limit
    action = intent.action if intent.action in accessor.capabilities else Action.TVL
    chains = accessor.supported_chains
    labels = [c.value for c in chains]

    if chain is not None:
        accessor.ensure_chain(chain)

    if action == Action.RATES:
        if chain is not None:
            return SingleResult(await accessor.fetch_rates(chain, limit))
        return ListResult(
            await gather_settled(labels, [accessor.fetch_rates(c, limit) for c in chains])
        )

    if action in (Action.POOLS, Action.VOLUME):
        order_by = "volume" if action == Action.VOLUME else "tvl"
        if chain is not None:
            return ListResult(await accessor.fetch_top_pools(chain, limit, order_by))
        return ChainMapResult(
            await gather_keyed(
                labels, [accessor.fetch_top_pools(c, limit, order_by) for c in chains]
            )
        )

    if action == Action.VAULTS:
        if chain is not None:
            return SingleResult(await accessor.fetch_top_vaults(chain, limit))
        return ListResult(await accessor.fetch_top_vaults_all_chains(limit))

    if chain is not None:
        return SingleResult(await accessor.fetch_tvl(chain))
    return ListResult(await accessor.fetch_tvl_all_chains())


async def dispatch(
    state: AppState, intent: QueryIntent, started: float | None = None
) -> QueryResult:
    """Execute ``intent`` and return an envelope. Never raises.

    Args:
        state: Application state
        intent: Resolved query intent
        started: ``time.perf_counter()`` reading taken when resolution began;
            defaults to now

    Returns:
        Success envelope with the routed data, or a failed envelope carrying
        guidance or the error message
    """
    if started is None:
        started = time.perf_counter()

    if intent.protocol is None:
        return QueryResult.failed(
            query=intent.raw_intent,
            error=UNKNOWN_PROTOCOL_MESSAGE,
            execution_time_ms=elapsed_ms(started),
            chain=intent.chain,
        )

    if intent.action == Action.UNKNOWN:
        return QueryResult.failed(
            query=intent.raw_intent,
            error=UNKNOWN_ACTION_MESSAGE,
            execution_time_ms=elapsed_ms(started),
            protocol=intent.protocol,
            chain=intent.chain,
        )

    accessor = get_accessor_class(intent.protocol)(state)
    try:
        data = await _route(accessor, intent)
    except Exception as e:
        logger.warning(
            "Query %r failed for %s: %s", intent.raw_intent, intent.protocol.value, e
        )
        return QueryResult.failed(
            query=intent.raw_intent,
            error=str(e) or type(e).__name__,
            execution_time_ms=elapsed_ms(started),
            protocol=intent.protocol,
            chain=intent.chain,
        )

    return QueryResult.ok(
        query=intent.raw_intent,
        data=data,
        execution_time_ms=elapsed_ms(started),
        protocol=intent.protocol,
        chain=intent.chain,
    )

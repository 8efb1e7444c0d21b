from unittest.mock import AsyncMock

import pytest

from defi_query.constants import Action, Chain, Protocol
from defi_query.domain import LendingTvl, MarketTvl
from defi_query.exceptions import TransportError
from defi_query.nlq import QueryIntent
from defi_query.pipeline.dispatcher import (
    UNKNOWN_ACTION_MESSAGE,
    UNKNOWN_PROTOCOL_MESSAGE,
    dispatch,
)
from defi_query.report import ChainMapResult, ListResult, SingleResult


def _intent(**kwargs):
    kwargs.setdefault("raw_intent", "test query")
    return QueryIntent(**kwargs)


@pytest.mark.asyncio
async def test_missing_protocol_fails_with_guidance(make_state):
    result = await dispatch(make_state(), _intent(action=Action.TVL, chain=Chain.BASE))

    assert result.success is False
    assert result.error == UNKNOWN_PROTOCOL_MESSAGE
    assert result.chain == Chain.BASE
    assert result.data is None


@pytest.mark.asyncio
async def test_unknown_action_fails_with_guidance(make_state):
    result = await dispatch(make_state(), _intent(protocol=Protocol.AAVE_V3))

    assert result.success is False
    assert result.error == UNKNOWN_ACTION_MESSAGE
    assert result.protocol == Protocol.AAVE_V3


@pytest.mark.asyncio
async def test_single_chain_tvl(make_state):
    result = await dispatch(
        make_state(),
        _intent(protocol=Protocol.AAVE_V3, chain=Chain.BASE, action=Action.TVL),
    )

    assert result.success is True
    assert isinstance(result.data, SingleResult)
    assert isinstance(result.data.value, LendingTvl)
    assert result.data.value.chain == Chain.BASE
    assert result.execution_time_ms >= 0


@pytest.mark.asyncio
async def test_tvl_without_chain_fans_out_in_chain_order(make_state):
    result = await dispatch(make_state(), _intent(protocol=Protocol.AAVE_V3, action=Action.TVL))

    assert isinstance(result.data, ListResult)
    assert [s.chain for s in result.data.items] == [
        Chain.BASE,
        Chain.ARBITRUM,
        Chain.OPTIMISM,
    ]


@pytest.mark.asyncio
async def test_rates_without_chain_is_flat_list(make_state):
    result = await dispatch(
        make_state(), _intent(protocol=Protocol.AAVE_V3, action=Action.RATES, limit=2)
    )

    assert isinstance(result.data, ListResult)
    assert len(result.data.items) == 3
    assert all(len(r.rates) == 2 for r in result.data.items)


@pytest.mark.asyncio
async def test_pools_on_chain_is_flat_list(make_state):
    result = await dispatch(
        make_state(),
        _intent(protocol=Protocol.UNISWAP_V3, chain=Chain.ARBITRUM, action=Action.POOLS, limit=3),
    )

    assert isinstance(result.data, ListResult)
    assert [p.pair for p in result.data.items] == ["USDC/WETH", "WBTC/WETH", "USDT/USDC"]


@pytest.mark.asyncio
async def test_volume_without_chain_is_keyed_by_chain(make_state):
    result = await dispatch(
        make_state(), _intent(protocol=Protocol.UNISWAP_V3, action=Action.VOLUME, limit=1)
    )

    assert isinstance(result.data, ChainMapResult)
    assert list(result.data.entries) == ["base", "arbitrum"]
    assert result.data.entries["base"][0].pair == "USDC/USDbC"
    assert result.data.entries["arbitrum"][0].pair == "USDT/USDC"


@pytest.mark.asyncio
async def test_pool_fan_out_maps_failed_chain_to_none(make_state):
    state = make_state(graph_api_key="key", fallback_on_error=False)
    state.client.execute = AsyncMock(side_effect=TransportError("HTTP error: 500", 500))

    result = await dispatch(state, _intent(protocol=Protocol.UNISWAP_V3, action=Action.POOLS))

    assert result.success is True
    assert result.data.entries == {"base": None, "arbitrum": None}


@pytest.mark.asyncio
async def test_vaults_with_and_without_chain(make_state):
    state = make_state(demo_mode=True)

    single = await dispatch(
        state, _intent(protocol=Protocol.MORPHO_BLUE, chain=Chain.BASE, action=Action.VAULTS)
    )
    fanned = await dispatch(state, _intent(protocol=Protocol.MORPHO_BLUE, action=Action.VAULTS))

    assert isinstance(single.data, SingleResult)
    assert isinstance(fanned.data, ListResult)
    assert [v.chain for v in fanned.data.items] == [Chain.BASE, Chain.ETHEREUM]


@pytest.mark.asyncio
async def test_unsupported_action_falls_back_to_tvl(make_state):
    result = await dispatch(
        make_state(demo_mode=True),
        _intent(protocol=Protocol.MORPHO_BLUE, chain=Chain.ETHEREUM, action=Action.POOLS),
    )

    assert result.success is True
    assert isinstance(result.data.value, MarketTvl)


@pytest.mark.asyncio
async def test_unsupported_chain_fails_envelope(make_state):
    result = await dispatch(
        make_state(),
        _intent(protocol=Protocol.UNISWAP_V3, chain=Chain.OPTIMISM, action=Action.POOLS),
    )

    assert result.success is False
    assert result.error == "Uniswap V3 not supported on optimism. Supported: base, arbitrum"
    assert result.protocol == Protocol.UNISWAP_V3
    assert result.chain == Chain.OPTIMISM


@pytest.mark.asyncio
async def test_live_error_without_fallback_fails_envelope(make_state):
    state = make_state(graph_api_key="key", fallback_on_error=False)
    state.client.execute = AsyncMock(side_effect=TransportError("aave-v3/base HTTP error: 503", 503))

    result = await dispatch(
        state, _intent(protocol=Protocol.AAVE_V3, chain=Chain.BASE, action=Action.RATES)
    )

    assert result.success is False
    assert result.error == "aave-v3/base HTTP error: 503"


@pytest.mark.asyncio
async def test_envelope_query_is_raw_intent(make_state):
    result = await dispatch(
        make_state(),
        _intent(
            protocol=Protocol.AAVE_V3,
            chain=Chain.BASE,
            action=Action.TVL,
            raw_intent="Aave V3 TVL on Base chain",
        ),
    )

    assert result.query == "Aave V3 TVL on Base chain"

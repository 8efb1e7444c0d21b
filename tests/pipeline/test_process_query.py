from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from defi_query.constants import Chain, Protocol
from defi_query.nlq import IntentResolver
from defi_query.pipeline.dispatcher import UNKNOWN_PROTOCOL_MESSAGE
from defi_query.pipeline.run import process_query
from defi_query.report import http_status_for


@pytest.mark.asyncio
async def test_unresolvable_query_is_422_with_guidance(make_state):
    result = await process_query(make_state(), "hello")

    assert result.success is False
    assert result.error == UNKNOWN_PROTOCOL_MESSAGE
    assert http_status_for(result) == 422
    assert result.to_dict()["query"] == "hello"


@pytest.mark.asyncio
async def test_aave_tvl_on_base_without_credentials(make_state):
    result = await process_query(make_state(), "Aave TVL on Base")
    wire = result.to_dict()

    assert result.success is True
    assert wire["protocol"] == "aave-v3"
    assert wire["chain"] == "base"
    assert wire["dataShape"] == "single"
    assert wire["data"]["demo"] is True
    assert wire["data"]["totalTVLUSD"] == pytest.approx(180_700_000)
    assert wire["data"]["topReserves"][0]["symbol"] == "USDC"
    assert http_status_for(result) == 200


@pytest.mark.asyncio
async def test_top_uniswap_pools_by_volume(make_state):
    result = await process_query(make_state(), "top 5 uniswap pools on arbitrum by volume")
    wire = result.to_dict()

    assert result.protocol == Protocol.UNISWAP_V3
    assert result.chain == Chain.ARBITRUM
    assert wire["dataShape"] == "list"
    volumes = [p["volume24hUSD"] for p in wire["data"]]
    assert len(volumes) == 5
    assert volumes == sorted(volumes, reverse=True)
    assert all(p["demo"] is True for p in wire["data"])


@pytest.mark.asyncio
async def test_llm_resolves_when_rules_do_not_commit(make_state):
    state = make_state(llm_api_key="sk-test", demo_mode=True)
    completion = AsyncMock(
        return_value=SimpleNamespace(
            choices=[
                SimpleNamespace(
                    message=SimpleNamespace(
                        content='{"protocol":"morpho-blue","chain":"ethereum",'
                        '"action":"vaults","limit":2,"rawIntent":"Largest Morpho vaults"}'
                    )
                )
            ]
        )
    )
    resolver = IntentResolver.from_settings(state.settings, completion=completion)

    result = await process_query(state, "where should I park stablecoins?", resolver=resolver)

    assert result.success is True
    assert result.query == "Largest Morpho vaults"
    assert len(result.data.value.vaults) == 2

import asyncio

import pytest

from defi_query.fanout import gather_keyed, gather_settled


async def _value(value, delay=0.0):
    await asyncio.sleep(delay)
    return value


async def _boom(message):
    raise RuntimeError(message)


@pytest.mark.asyncio
async def test_gather_settled_keeps_label_order_and_drops_failures():
    results = await gather_settled(
        ["base", "arbitrum", "optimism"],
        [_value("b", 0.02), _boom("arbitrum down"), _value("o")],
    )

    assert results == ["b", "o"]


@pytest.mark.asyncio
async def test_gather_settled_all_failed_is_empty():
    assert await gather_settled(["a"], [_boom("nope")]) == []


@pytest.mark.asyncio
async def test_gather_settled_logs_failed_branch(caplog):
    with caplog.at_level("WARNING", logger="defi_query.fanout"):
        await gather_settled(["arbitrum"], [_boom("HTTP 500")])

    assert "arbitrum" in caplog.text
    assert "HTTP 500" in caplog.text


@pytest.mark.asyncio
async def test_gather_keyed_maps_failures_to_none():
    results = await gather_keyed(["base", "arbitrum"], [_boom("down"), _value([1, 2])])

    assert results == {"base": None, "arbitrum": [1, 2]}
    assert list(results) == ["base", "arbitrum"]


@pytest.mark.asyncio
async def test_branches_run_concurrently():
    started = asyncio.get_running_loop().time()

    await gather_settled(["a", "b", "c"], [_value(i, 0.1) for i in range(3)])

    assert asyncio.get_running_loop().time() - started < 0.25

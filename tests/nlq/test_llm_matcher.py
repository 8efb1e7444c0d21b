from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from defi_query.constants import Action, Chain, Protocol
from defi_query.exceptions import IntentAmbiguityError
from defi_query.nlq import LLMMatcher, extract_json_object
from defi_query.settings import QuerySettings


def _reply(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def settings():
    return QuerySettings(llm_api_key="sk-test", llm_model="anthropic/test-model")


def test_extract_json_object_from_fenced_reply():
    text = 'Sure!\n```json\n{"protocol": "aave-v3", "nested": {"a": 1}}\n```'

    assert extract_json_object(text) == {"protocol": "aave-v3", "nested": {"a": 1}}


def test_extract_json_object_skips_invalid_braces():
    text = 'use {placeholders} like this: {"action": "tvl"}'

    assert extract_json_object(text) == {"action": "tvl"}


def test_extract_json_object_none_without_object():
    assert extract_json_object("no json here") is None
    assert extract_json_object("[1, 2, 3]") is None


@pytest.mark.asyncio
async def test_parse_builds_intent_from_reply(settings):
    completion = AsyncMock(
        return_value=_reply(
            '{"protocol":"uniswap-v3","chain":"arbitrum","action":"pools",'
            '"token":null,"limit":5,"rawIntent":"Top Uniswap V3 pools on Arbitrum"}'
        )
    )
    matcher = LLMMatcher(settings, completion=completion)

    intent = await matcher.parse("show me the biggest uni pairs over on arb")

    assert intent.protocol == Protocol.UNISWAP_V3
    assert intent.chain == Chain.ARBITRUM
    assert intent.action == Action.POOLS
    assert intent.limit == 5
    assert intent.token is None
    assert intent.raw_intent == "Top Uniswap V3 pools on Arbitrum"


@pytest.mark.asyncio
async def test_parse_passes_model_key_and_prompt(settings):
    completion = AsyncMock(return_value=_reply('{"action":"unknown","rawIntent":"x"}'))
    matcher = LLMMatcher(settings, completion=completion)

    await matcher.parse("hello")

    kwargs = completion.call_args.kwargs
    assert kwargs["model"] == "anthropic/test-model"
    assert kwargs["api_key"] == "sk-test"
    assert kwargs["max_tokens"] == 300
    assert kwargs["timeout"] == 15.0
    assert kwargs["messages"][0]["role"] == "system"
    assert "morpho-blue" in kwargs["messages"][0]["content"]
    assert kwargs["messages"][1] == {"role": "user", "content": "hello"}


@pytest.mark.asyncio
async def test_parse_fills_missing_raw_intent_and_limit(settings):
    completion = AsyncMock(
        return_value=_reply('{"protocol":"aave-v3","chain":null,"action":"rates","limit":null}')
    )

    intent = await LLMMatcher(settings, completion=completion).parse("best lending rates")

    assert intent.raw_intent == "best lending rates"
    assert intent.limit == 10
    assert intent.chain is None


@pytest.mark.asyncio
async def test_attempt_always_commits(settings):
    completion = AsyncMock(return_value=_reply('{"action":"unknown","rawIntent":"greeting"}'))

    outcome = await LLMMatcher(settings, completion=completion).attempt("hello")

    assert outcome.committed is True
    assert outcome.intent.action == Action.UNKNOWN


@pytest.mark.asyncio
async def test_missing_key_raises_without_calling_model():
    completion = AsyncMock()

    with pytest.raises(IntentAmbiguityError, match="not configured"):
        await LLMMatcher(QuerySettings(), completion=completion).parse("aave")

    completion.assert_not_called()


@pytest.mark.asyncio
async def test_transport_failure_raises_ambiguity(settings):
    completion = AsyncMock(side_effect=RuntimeError("connection reset"))

    with pytest.raises(IntentAmbiguityError, match="connection reset"):
        await LLMMatcher(settings, completion=completion).parse("aave")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "content",
    [
        "I cannot help with that.",
        "",
        '{"protocol":"compound","action":"tvl","rawIntent":"x"}',
        '{"action":"tvl","limit":-3,"rawIntent":"x"}',
    ],
)
async def test_unusable_reply_raises_ambiguity(settings, content):
    completion = AsyncMock(return_value=_reply(content))

    with pytest.raises(IntentAmbiguityError):
        await LLMMatcher(settings, completion=completion).parse("aave")


@pytest.mark.asyncio
async def test_reply_without_choices_raises_ambiguity(settings):
    completion = AsyncMock(return_value=SimpleNamespace(choices=[]))

    with pytest.raises(IntentAmbiguityError, match="No JSON"):
        await LLMMatcher(settings, completion=completion).parse("aave")


@pytest.mark.asyncio
async def test_parse_joins_content_blocks(settings):
    content = [
        {"type": "text", "text": "Here you go:"},
        SimpleNamespace(type="text", text='{"protocol":"aave-v3","action":"tvl","rawIntent":"x"}'),
        {"type": "image_url", "image_url": {"url": "https://example.invalid/a.png"}},
    ]
    completion = AsyncMock(return_value=_reply(content))

    intent = await LLMMatcher(settings, completion=completion).parse("aave tvl")

    assert intent.protocol == Protocol.AAVE_V3
    assert intent.action == Action.TVL


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [None, 42, [{"type": "image_url"}]])
async def test_non_text_content_raises_ambiguity(settings, content):
    completion = AsyncMock(return_value=_reply(content))

    with pytest.raises(IntentAmbiguityError, match="No JSON"):
        await LLMMatcher(settings, completion=completion).parse("aave")

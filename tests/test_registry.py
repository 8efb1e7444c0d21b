import pytest

from defi_query.constants import Chain, Protocol
from defi_query.exceptions import UnsupportedPairError
from defi_query.registry import (
    NOTE_FORCED,
    NOTE_NOT_CONFIGURED,
    DataSourceRegistry,
    build_subgraph_url,
)
from defi_query.settings import QuerySettings

SUPPORTED = {
    (Protocol.AAVE_V3, Chain.BASE),
    (Protocol.AAVE_V3, Chain.ARBITRUM),
    (Protocol.AAVE_V3, Chain.OPTIMISM),
    (Protocol.UNISWAP_V3, Chain.BASE),
    (Protocol.UNISWAP_V3, Chain.ARBITRUM),
    (Protocol.MORPHO_BLUE, Chain.BASE),
    (Protocol.MORPHO_BLUE, Chain.ETHEREUM),
}


@pytest.mark.parametrize("protocol", list(Protocol))
@pytest.mark.parametrize("chain", list(Chain))
def test_locate_succeeds_exactly_on_support_matrix(protocol, chain):
    registry = DataSourceRegistry(QuerySettings())

    if (protocol, chain) in SUPPORTED:
        descriptor = registry.locate(protocol, chain)
        assert descriptor.protocol == protocol
        assert descriptor.chain == chain
    else:
        with pytest.raises(UnsupportedPairError):
            registry.locate(protocol, chain)


def test_locate_accepts_string_values():
    registry = DataSourceRegistry(QuerySettings())

    descriptor = registry.locate("aave-v3", "optimism")

    assert descriptor.label == "aave-v3/optimism"


def test_locate_unknown_names_raise_unsupported_pair():
    registry = DataSourceRegistry(QuerySettings())

    with pytest.raises(UnsupportedPairError, match="compound on polygon"):
        registry.locate("compound", "polygon")


def test_subgraph_url_uses_placeholder_without_key():
    registry = DataSourceRegistry(QuerySettings())

    descriptor = registry.locate(Protocol.AAVE_V3, Chain.BASE)

    assert descriptor.url == (
        "https://gateway.thegraph.com/api/[YOUR-API-KEY]/subgraphs/id/"
        "GQFbb95cE6d8mV989mL5figjaGaKCQB3xqYrr1bRyXqF"
    )
    assert descriptor.requires_credential is True


def test_subgraph_url_embeds_key():
    registry = DataSourceRegistry(QuerySettings(graph_api_key="abc123"))

    descriptor = registry.locate(Protocol.UNISWAP_V3, Chain.ARBITRUM)

    assert descriptor.url == build_subgraph_url(
        "FbCGRftH4a3yZugY7TnbYgPJVEv2LvMT6oF1fxPe9aJM", "abc123"
    )
    assert "/api/abc123/" in descriptor.url


def test_morpho_descriptors_carry_chain_ids():
    registry = DataSourceRegistry(QuerySettings())

    base = registry.locate(Protocol.MORPHO_BLUE, Chain.BASE)
    mainnet = registry.locate(Protocol.MORPHO_BLUE, Chain.ETHEREUM)

    assert base.url == "https://blue-api.morpho.org/graphql"
    assert base.chain_id == 8453
    assert mainnet.chain_id == 1
    assert base.requires_credential is False


def test_liveness_without_graph_key():
    registry = DataSourceRegistry(QuerySettings())
    aave = registry.locate(Protocol.AAVE_V3, Chain.BASE)
    morpho = registry.locate(Protocol.MORPHO_BLUE, Chain.BASE)

    assert registry.is_live(aave) is False
    assert registry.synthetic_reason(aave) == NOTE_NOT_CONFIGURED
    assert registry.is_live(morpho) is True


def test_demo_mode_forces_everything_synthetic():
    registry = DataSourceRegistry(QuerySettings(graph_api_key="abc123", demo_mode=True))

    for descriptor in registry.descriptors():
        assert registry.is_live(descriptor) is False
        assert registry.synthetic_reason(descriptor) == NOTE_FORCED


def test_liveness_is_read_per_call():
    settings = QuerySettings(graph_api_key="abc123")
    registry = DataSourceRegistry(settings)
    descriptor = registry.locate(Protocol.AAVE_V3, Chain.ARBITRUM)

    assert registry.is_live(descriptor) is True

    settings.demo_mode = True

    assert registry.is_live(descriptor) is False


def test_descriptors_filter_by_protocol():
    registry = DataSourceRegistry(QuerySettings())

    uniswap = registry.descriptors(Protocol.UNISWAP_V3)

    assert {d.chain for d in uniswap} == {Chain.BASE, Chain.ARBITRUM}
    assert len(registry.descriptors()) == len(SUPPORTED)

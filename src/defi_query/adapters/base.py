from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from ..constants import DEFAULT_LIMIT, PROTOCOL_DISPLAY_NAMES, Action, Chain, Protocol
from ..exceptions import DataSourceError, MalformedResponseError, UnsupportedChainError
from ..fanout import gather_settled
from ..logger import get_logger
from ..registry import NOTE_LIVE_FAILED, DataSourceDescriptor

if TYPE_CHECKING:
    from ..state import AppState

logger = get_logger(__name__)

T = TypeVar("T")


def chain_name(chain: Chain | str) -> str:
    return chain.value if isinstance(chain, Enum) else str(chain)


def require_items(payload: dict[str, Any], key: str, label: str) -> list[dict[str, Any]]:
    """Pull a non-empty list out of a GraphQL ``data`` object.

    Raises:
        MalformedResponseError: If the list is missing, of the wrong type or empty
    """
    items = payload.get(key)
    if isinstance(items, dict):
        items = items.get("items")
    if not isinstance(items, list) or not items:
        raise MalformedResponseError(f"{label} returned no {key}")
    return [item for item in items if isinstance(item, dict)]


class BaseProtocolAccessor(ABC):
    """Abstract base class for protocol accessors.

    Subclasses declare the protocol, the chains it is deployed on and the
    actions it can answer. Every public fetch goes through
    ``_live_or_synthetic`` so the live/synthetic decision is made per call.
    """

    protocol: ClassVar[Protocol]
    supported_chains: ClassVar[tuple[Chain, ...]]
    capabilities: ClassVar[frozenset[Action]]

    def __init__(self, state: AppState):
        """Initialize the accessor with application state.

        Args:
            state: Application state carrying settings, registry and client
        """
        self.state = state
        self.registry = state.registry
        self.client = state.client

    @property
    def display_name(self) -> str:
        return PROTOCOL_DISPLAY_NAMES[self.protocol]

    def supports(self, chain: Chain | str | None) -> bool:
        return chain is not None and chain_name(chain) in {
            c.value for c in self.supported_chains
        }

    def ensure_chain(self, chain: Chain | str) -> DataSourceDescriptor:
        """Validate the chain and return its data source.

        Raises:
            UnsupportedChainError: If the protocol is not deployed on ``chain``
        """
        if not self.supports(chain):
            raise UnsupportedChainError(
                self.display_name,
                chain_name(chain),
                [c.value for c in self.supported_chains],
            )
        return self.registry.locate(self.protocol, Chain(chain_name(chain)))

    async def _live_or_synthetic(
        self,
        descriptor: DataSourceDescriptor,
        live: Callable[[], Awaitable[T]],
        synthetic: Callable[[str], T],
    ) -> T:
        """Serve live data when possible, synthetic data otherwise.

        Live failures are absorbed unless ``fallback_on_error`` is disabled,
        in which case the ``DataSourceError`` propagates.
        """
        reason = self.registry.synthetic_reason(descriptor)
        if reason is not None:
            logger.debug("Serving %s from demo data: %s", descriptor.label, reason)
            return synthetic(reason)

        try:
            return await live()
        except DataSourceError as e:
            if not self.state.settings.fallback_on_error:
                raise
            logger.warning(
                "Live query for %s failed, serving demo data: %s", descriptor.label, e
            )
            return synthetic(NOTE_LIVE_FAILED)

    async def _query(
        self,
        descriptor: DataSourceDescriptor,
        query: str,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await self.client.execute(
            descriptor.url, query, variables, label=descriptor.label
        )

    @abstractmethod
    async def fetch_tvl(self, chain: Chain) -> Any:
        """Fetch the TVL snapshot for a single chain."""
        ...

    async def fetch_rates(self, chain: Chain, limit: int = DEFAULT_LIMIT) -> Any:
        raise NotImplementedError(f"{self.display_name} does not provide rates")

    async def fetch_top_pools(
        self, chain: Chain, limit: int = DEFAULT_LIMIT, order_by: str = "tvl"
    ) -> list[Any]:
        raise NotImplementedError(f"{self.display_name} does not provide pools")

    async def fetch_top_vaults(self, chain: Chain, limit: int = DEFAULT_LIMIT) -> Any:
        raise NotImplementedError(f"{self.display_name} does not provide vaults")

    async def fetch_top_vaults_all_chains(self, limit: int = DEFAULT_LIMIT) -> list[Any]:
        raise NotImplementedError(f"{self.display_name} does not provide vaults")

    async def fetch_tvl_all_chains(self) -> list[Any]:
        """Fetch TVL on every supported chain; failing chains are omitted."""
        return await gather_settled(
            [c.value for c in self.supported_chains],
            [self.fetch_tvl(c) for c in self.supported_chains],
        )

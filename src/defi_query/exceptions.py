"""Exception hierarchy for the query pipeline."""

from __future__ import annotations

from collections.abc import Iterable


class DefiQueryError(Exception):
    """Base class for all errors raised by defi-query."""


class UnsupportedPairError(DefiQueryError):
    """Raised when a (protocol, chain) pair has no registered data source."""

    def __init__(self, protocol: str, chain: str):
        super().__init__(f"No data source registered for {protocol} on {chain}")
        self.protocol = protocol
        self.chain = chain


class UnsupportedChainError(DefiQueryError):
    """Raised when an accessor is asked for a chain outside its supported set."""

    def __init__(self, display_name: str, chain: str, supported: Iterable[str]):
        self.supported = tuple(supported)
        super().__init__(
            f"{display_name} not supported on {chain}. "
            f"Supported: {', '.join(self.supported)}"
        )
        self.chain = chain


class DataSourceError(DefiQueryError):
    """A live data source could not produce a usable answer."""


class TransportError(DataSourceError):
    """Network failure, timeout or non-2xx status from a live source."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(DataSourceError):
    """Live source answered, but the payload was unusable."""


class IntentAmbiguityError(DefiQueryError):
    """A matcher could not turn the query into an intent."""

"""Uniform response envelope returned for every query."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from ..constants import Chain, Protocol
from ..domain import now_ms, to_wire


@dataclass(frozen=True)
class SingleResult:
    """One snapshot object."""

    kind: ClassVar[str] = "single"
    value: Any

    def to_wire(self) -> Any:
        return to_wire(self.value)


@dataclass(frozen=True)
class ListResult:
    """A flat list, in request order, of snapshots or records."""

    kind: ClassVar[str] = "list"
    items: list[Any]

    def to_wire(self) -> Any:
        return to_wire(self.items)


@dataclass(frozen=True)
class ChainMapResult:
    """Per-chain results keyed by chain name; a failed chain maps to None."""

    kind: ClassVar[str] = "chain_map"
    entries: dict[str, Any]

    def to_wire(self) -> Any:
        return to_wire(self.entries)


ResultData = Union[SingleResult, ListResult, ChainMapResult]


@dataclass
class QueryResult:
    """Outcome of one query.

    A successful result carries ``data`` and no ``error``; a failed one
    carries ``error`` and no ``data``.
    """

    success: bool
    query: str
    execution_time_ms: int
    protocol: Protocol | None = None
    chain: Chain | None = None
    data: ResultData | None = None
    error: str | None = None
    timestamp: int = field(default_factory=now_ms)

    def __post_init__(self) -> None:
        if self.success and self.error is not None:
            raise ValueError("A successful result cannot carry an error")
        if not self.success and self.data is not None:
            raise ValueError("A failed result cannot carry data")
        if not self.success and not self.error:
            raise ValueError("A failed result must carry an error message")

    @classmethod
    def ok(
        cls,
        query: str,
        data: ResultData,
        execution_time_ms: int,
        protocol: Protocol | None = None,
        chain: Chain | None = None,
    ) -> "QueryResult":
        return cls(
            success=True,
            query=query,
            protocol=protocol,
            chain=chain,
            data=data,
            execution_time_ms=execution_time_ms,
        )

    @classmethod
    def failed(
        cls,
        query: str,
        error: str,
        execution_time_ms: int,
        protocol: Protocol | None = None,
        chain: Chain | None = None,
    ) -> "QueryResult":
        return cls(
            success=False,
            query=query,
            protocol=protocol,
            chain=chain,
            error=error,
            execution_time_ms=execution_time_ms,
        )

    @property
    def data_shape(self) -> str | None:
        return self.data.kind if self.data is not None else None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON wire format; unset optional members are omitted."""
        out: dict[str, Any] = {"success": self.success, "query": self.query}
        if self.protocol is not None:
            out["protocol"] = self.protocol.value
        if self.chain is not None:
            out["chain"] = self.chain.value
        if self.data is not None:
            out["dataShape"] = self.data.kind
            out["data"] = self.data.to_wire()
        if self.error is not None:
            out["error"] = self.error
        out["executionTimeMs"] = self.execution_time_ms
        out["timestamp"] = self.timestamp
        return out


def http_status_for(result: QueryResult) -> int:
    """Transport status for an envelope: 200 on success, 422 otherwise."""
    return 200 if result.success else 422

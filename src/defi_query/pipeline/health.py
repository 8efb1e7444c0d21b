"""Service health report with optional live probes of every subgraph."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal

from .. import __version__
from ..exceptions import DataSourceError
from ..fanout import gather_settled
from ..registry import DataSourceDescriptor
from ..state import AppState

SERVICE_NAME = "defi-query"

HEALTH_QUERY = """
query HealthCheck {
  _meta {
    block { number }
    deployment
    hasIndexingErrors
  }
}
"""

_PROCESS_STARTED = time.monotonic()

HealthStatus = Literal["healthy", "degraded", "down"]


@dataclass
class SourceHealth:
    protocol: str
    chain: str
    status: HealthStatus
    latency_ms: int
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "protocol": self.protocol,
            "chain": self.chain,
            "status": self.status,
            "latencyMs": self.latency_ms,
        }
        if self.error is not None:
            out["error"] = self.error
        return out


async def probe_source(state: AppState, descriptor: DataSourceDescriptor) -> SourceHealth:
    """Run the ``_meta`` query against one subgraph.

    Indexing errors mark the source degraded; any request failure marks it down.
    """
    started = time.perf_counter()
    try:
        data = await state.client.execute(
            descriptor.url, HEALTH_QUERY, label=f"{descriptor.label} health"
        )
    except DataSourceError as e:
        return SourceHealth(
            protocol=descriptor.protocol.value,
            chain=descriptor.chain.value,
            status="down",
            latency_ms=int((time.perf_counter() - started) * 1000),
            error=str(e),
        )

    meta = data.get("_meta") if isinstance(data.get("_meta"), dict) else {}
    return SourceHealth(
        protocol=descriptor.protocol.value,
        chain=descriptor.chain.value,
        status="degraded" if meta.get("hasIndexingErrors") else "healthy",
        latency_ms=int((time.perf_counter() - started) * 1000),
    )


def overall_status(sources: list[SourceHealth]) -> HealthStatus:
    return "healthy" if all(s.status == "healthy" for s in sources) else "degraded"


async def check_health(state: AppState, detailed: bool = False) -> dict[str, Any]:
    """Build the ``/health`` payload.

    Args:
        state: Application state
        detailed: Also probe every credentialed subgraph concurrently
    """
    report: dict[str, Any] = {
        "service": SERVICE_NAME,
        "version": __version__,
        "status": "healthy",
        "uptime": round(time.monotonic() - _PROCESS_STARTED, 3),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "demoMode": state.settings.demo_mode,
    }
    if not detailed:
        return report

    descriptors = [d for d in state.registry.descriptors() if d.requires_credential]
    sources = await gather_settled(
        [d.label for d in descriptors],
        [probe_source(state, d) for d in descriptors],
    )
    report["status"] = overall_status(sources)
    report["subgraphs"] = [s.to_dict() for s in sources]
    report["llmConfigured"] = state.settings.llm_configured
    report["graphApiKeyConfigured"] = state.settings.graph_key_configured
    return report

"""HTTP transport: a thin FastAPI layer over the query pipeline."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from . import __version__
from .domain import now_ms
from .logger import get_logger
from .nlq import IntentResolver
from .pipeline.health import check_health
from .pipeline.run import process_query
from .report.envelope import http_status_for
from .settings import QuerySettings
from .state import AppState

logger = get_logger(__name__)

QUERY_EXAMPLES = [
    "/query?q=Aave TVL on Base",
    "/query?q=Uniswap top pools on Arbitrum",
    "/query?q=What are the best lending rates on Aave?",
    "/query?q=top 5 uniswap pools on arbitrum by volume",
    "/query?q=Morpho vaults on Ethereum",
]


def create_app(
    state: AppState | None = None, resolver: IntentResolver | None = None
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        state: Application state; built from ``QuerySettings()`` when omitted
        resolver: Intent resolver; rules then LLM when omitted
    """
    state = state or AppState.from_settings(QuerySettings())
    resolver = resolver or IntentResolver.from_settings(state.settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("defi-query %s starting up", __version__)
        yield
        state.client.close()
        logger.info("defi-query shutting down")

    app = FastAPI(
        title="defi-query",
        description="Natural-language queries over Aave V3, Uniswap V3 and Morpho Blue.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.defi = state

    @app.get("/query")
    async def query(q: str | None = None) -> JSONResponse:
        """Answer a natural-language DeFi question.

        Returns the result envelope with status 200 on success and 422 when
        the query could not be answered. Without a chain, TVL, rates and
        vault queries return a flat list of per-chain snapshots, while pool
        and volume queries return an object keyed by chain name with null
        for chains that failed.
        """
        if q is None or not q.strip():
            return JSONResponse(
                {
                    "success": False,
                    "error": "Missing required query parameter: ?q=<natural language query>",
                    "examples": QUERY_EXAMPLES,
                },
                status_code=400,
            )

        text = q.strip()
        try:
            result = await process_query(state, text, resolver=resolver)
        except Exception as e:
            logger.exception("Unhandled error while answering %r", text)
            body: dict[str, Any] = {
                "success": False,
                "query": text,
                "error": f"Internal query error: {e}",
                "executionTimeMs": 0,
                "timestamp": now_ms(),
            }
            return JSONResponse(body, status_code=500)

        return JSONResponse(result.to_dict(), status_code=http_status_for(result))

    @app.get("/health")
    async def health(detailed: bool = False) -> dict[str, Any]:
        """Service status; ``detailed=true`` also probes every subgraph."""
        return await check_health(state, detailed=detailed)

    return app

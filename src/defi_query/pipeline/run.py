"""High-level query orchestration: text in, envelope out."""

from __future__ import annotations

import time

from ..nlq import IntentResolver
from ..report.envelope import QueryResult
from ..state import AppState
from .dispatcher import dispatch


async def process_query(
    state: AppState, text: str, resolver: IntentResolver | None = None
) -> QueryResult:
    """Resolve ``text`` into an intent and dispatch it.

    Execution time is measured from the start of resolution.

    Args:
        state: Application state containing settings, registry and logger
        text: The natural-language question
        resolver: Resolver to use; defaults to rules followed by the LLM
    """
    started = time.perf_counter()
    log = state.logger

    resolver = resolver or IntentResolver.from_settings(state.settings)
    intent = await resolver.resolve(text)
    log.info(
        "Resolved query",
        extra={
            "query": text,
            "protocol": intent.protocol.value if intent.protocol else None,
            "chain": intent.chain.value if intent.chain else None,
            "action": intent.action.value,
        },
    )

    result = await dispatch(state, intent, started=started)
    log.info(
        "Query completed",
        extra={"success": result.success, "execution_time_ms": result.execution_time_ms},
    )
    return result

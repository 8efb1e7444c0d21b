"""Wait-for-all fan-out that tolerates individual failures."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Sequence
from typing import TypeVar

from .logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def _report_failure(label: str, error: BaseException) -> None:
    logger.warning("Fan-out branch '%s' failed: %s", label, error)


async def gather_settled(
    labels: Sequence[str], awaitables: Sequence[Awaitable[T]]
) -> list[T]:
    """Run every branch to completion and keep only the successes.

    Results keep the order of ``labels``; failed branches are logged and
    dropped.
    """
    results = await asyncio.gather(*awaitables, return_exceptions=True)

    merged: list[T] = []
    for label, result in zip(labels, results):
        if isinstance(result, BaseException):
            _report_failure(label, result)
            continue
        merged.append(result)

    logger.debug("Fan-out settled: %d/%d branches succeeded", len(merged), len(labels))
    return merged


async def gather_keyed(
    labels: Sequence[str], awaitables: Sequence[Awaitable[T]]
) -> dict[str, T | None]:
    """Like ``gather_settled`` but keyed by label, with None for failures."""
    results = await asyncio.gather(*awaitables, return_exceptions=True)

    keyed: dict[str, T | None] = {}
    for label, result in zip(labels, results):
        if isinstance(result, BaseException):
            _report_failure(label, result)
            keyed[label] = None
        else:
            keyed[label] = result
    return keyed

from __future__ import annotations

from .envelope import (
    ChainMapResult,
    ListResult,
    QueryResult,
    ResultData,
    SingleResult,
    http_status_for,
)
from .formatter import format_result

__all__ = [
    "ChainMapResult",
    "ListResult",
    "QueryResult",
    "ResultData",
    "SingleResult",
    "format_result",
    "http_status_for",
]

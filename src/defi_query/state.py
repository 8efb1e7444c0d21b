"""Application state container."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .clients import GraphQLClient
from .registry import DataSourceRegistry
from .settings import QuerySettings


@dataclass
class AppState:
    """Container for application-wide state and dependencies.

    Passed through the pipeline to avoid global state and enable testing.
    """

    settings: QuerySettings
    logger: logging.Logger
    registry: DataSourceRegistry
    client: GraphQLClient

    @classmethod
    def from_settings(
        cls, settings: QuerySettings, logger: logging.Logger | None = None
    ) -> "AppState":
        return cls(
            settings=settings,
            logger=logger or logging.getLogger("defi_query"),
            registry=DataSourceRegistry(settings),
            client=GraphQLClient(request_timeout=settings.request_timeout),
        )

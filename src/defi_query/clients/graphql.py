"""GraphQL-over-HTTP client shared by subgraph and Morpho accessors.

Requests are issued with a pooled ``requests.Session`` on a worker thread so
they never block the event loop. Every failure is translated into the
``DataSourceError`` family; callers decide whether to fall back.
"""

from __future__ import annotations

import asyncio
from typing import Any

import requests

from ..exceptions import MalformedResponseError, TransportError
from ..logger import get_logger

logger = get_logger(__name__)


class GraphQLClient:
    """Minimal GraphQL POST client.

    No retries are performed: a failed request surfaces immediately so the
    caller can substitute synthetic data.
    """

    def __init__(self, *, request_timeout: float = 15.0):
        self._request_timeout = request_timeout
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "User-Agent": "defi-query/0.1",
            }
        )

    async def execute(
        self,
        url: str,
        query: str,
        variables: dict[str, Any] | None = None,
        *,
        label: str = "graphql",
    ) -> dict[str, Any]:
        """Execute a GraphQL query and return its ``data`` object.

        Args:
            url: Endpoint URL
            query: GraphQL document
            variables: Query variables
            label: Short identifier used in error messages and logs

        Returns:
            The ``data`` member of the GraphQL response

        Raises:
            TransportError: Network failure, timeout or non-2xx status
            MalformedResponseError: Unparseable JSON, GraphQL errors, or no data
        """
        logger.debug("Querying %s", label)
        return await asyncio.to_thread(self._post, url, query, variables or {}, label)

    def _post(
        self,
        url: str,
        query: str,
        variables: dict[str, Any],
        label: str,
    ) -> dict[str, Any]:
        try:
            response = self._session.post(
                url,
                json={"query": query, "variables": variables},
                timeout=self._request_timeout,
            )
        except requests.exceptions.RequestException as e:
            # The exception text carries the URL, which embeds the API key
            raise TransportError(f"{label} request failed: {type(e).__name__}") from e

        if not response.ok:
            raise TransportError(
                f"{label} HTTP error: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"{label} returned invalid JSON") from e

        if not isinstance(payload, dict):
            raise MalformedResponseError(f"{label} returned unexpected payload: {payload!r}")

        errors = payload.get("errors")
        if errors:
            messages = "; ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in errors
            )
            raise MalformedResponseError(f"{label} GraphQL error: {messages}")

        data = payload.get("data")
        if not isinstance(data, dict):
            raise MalformedResponseError(f"{label} returned no data")

        return data

    def close(self) -> None:
        self._session.close()

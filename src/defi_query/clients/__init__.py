from __future__ import annotations

from .graphql import GraphQLClient

__all__ = ["GraphQLClient"]

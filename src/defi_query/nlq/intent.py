"""Canonical query intent produced by the resolver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..constants import DEFAULT_LIMIT, Action, Chain, Protocol


class QueryIntent(BaseModel):
    """Structured form of a natural-language question.

    ``chain`` of None means every chain the protocol supports. ``token`` is
    carried through for callers but no accessor filters on it.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    protocol: Protocol | None = None
    chain: Chain | None = None
    action: Action = Action.UNKNOWN
    token: str | None = None
    limit: int = Field(default=DEFAULT_LIMIT, gt=0)
    raw_intent: str = Field(alias="rawIntent")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Treat explicit nulls as missing so field defaults apply."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @field_validator("token")
    @classmethod
    def upper_token(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip().upper() or None

    @property
    def is_actionable(self) -> bool:
        return self.protocol is not None and self.action != Action.UNKNOWN

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class MatchOutcome:
    """Result of one matcher: the intent and whether resolution can stop."""

    intent: QueryIntent
    committed: bool

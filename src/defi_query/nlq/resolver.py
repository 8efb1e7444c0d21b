"""Priority chain of intent matchers."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol as TypingProtocol

from ..exceptions import IntentAmbiguityError
from ..logger import get_logger
from ..settings import QuerySettings
from .intent import MatchOutcome, QueryIntent
from .llm import Completion, LLMMatcher
from .rules import RuleMatcher

logger = get_logger(__name__)


class IntentMatcher(TypingProtocol):
    name: str

    async def attempt(self, query: str) -> MatchOutcome: ...


class IntentResolver:
    """Try matchers in order until one commits to an intent.

    The first matcher's intent is kept as the fallback; later matchers that
    raise ``IntentAmbiguityError`` are logged and skipped. ``resolve`` never
    raises.
    """

    def __init__(self, matchers: Sequence[IntentMatcher]):
        if not matchers:
            raise ValueError("IntentResolver needs at least one matcher")
        self.matchers = list(matchers)

    @classmethod
    def from_settings(
        cls, settings: QuerySettings, completion: Completion | None = None
    ) -> "IntentResolver":
        return cls([RuleMatcher(), LLMMatcher(settings, completion=completion)])

    async def resolve(self, query: str) -> QueryIntent:
        fallback: QueryIntent | None = None

        for matcher in self.matchers:
            try:
                outcome = await matcher.attempt(query)
            except IntentAmbiguityError as e:
                logger.warning(
                    "Matcher '%s' could not resolve query, using earlier result: %s",
                    matcher.name,
                    e,
                )
                continue

            if outcome.committed:
                logger.debug("Matcher '%s' resolved %r", matcher.name, query)
                return outcome.intent
            if fallback is None:
                fallback = outcome.intent

        return fallback or QueryIntent(raw_intent=query)

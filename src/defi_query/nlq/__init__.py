from __future__ import annotations

from .intent import MatchOutcome, QueryIntent
from .llm import LLMMatcher, extract_json_object
from .resolver import IntentMatcher, IntentResolver
from .rules import RuleMatcher

__all__ = [
    "IntentMatcher",
    "IntentResolver",
    "LLMMatcher",
    "MatchOutcome",
    "QueryIntent",
    "RuleMatcher",
    "extract_json_object",
]

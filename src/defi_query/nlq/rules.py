"""Deterministic keyword matcher: the free first stage of intent resolution."""

from __future__ import annotations

import re

from ..constants import DEFAULT_LIMIT, Action, Chain, Protocol
from .intent import MatchOutcome, QueryIntent

# Evaluation order is significant: the first matching pattern wins.
PROTOCOL_PATTERNS: tuple[tuple[re.Pattern[str], Protocol], ...] = (
    (re.compile(r"aave"), Protocol.AAVE_V3),
    (re.compile(r"uniswap|\buni(?:v3)?\b"), Protocol.UNISWAP_V3),
    (re.compile(r"morpho"), Protocol.MORPHO_BLUE),
)

CHAIN_PATTERNS: tuple[tuple[re.Pattern[str], Chain], ...] = (
    (re.compile(r"\bbase\b"), Chain.BASE),
    (re.compile(r"arbitrum|\barb\b"), Chain.ARBITRUM),
    (re.compile(r"optimism|\bop\b"), Chain.OPTIMISM),
    (re.compile(r"ethereum|mainnet|\beth\b"), Chain.ETHEREUM),
)

# An explicit ordering clause outranks the keyword families below
BY_VOLUME_PATTERN = re.compile(r"\bby\s+(?:24h\s+)?volume\b")

ACTION_PATTERNS: tuple[tuple[re.Pattern[str], Action], ...] = (
    (re.compile(r"tvl|total value locked|locked"), Action.TVL),
    (re.compile(r"rate|apy|apr|yield|interest|lending|borrow|supply"), Action.RATES),
    (re.compile(r"pool|pair|liquidity"), Action.POOLS),
    (re.compile(r"volume|\bvol\b"), Action.VOLUME),
    (re.compile(r"vault"), Action.VAULTS),
)

TOKEN_PATTERN = re.compile(r"\b(usdc|usdt|dai|eth|weth|btc|wbtc|matic|arb|op|link|aave)\b")

LIMIT_PATTERN = re.compile(r"top\s+(\d+)")


def _first_match(patterns, text):
    for pattern, value in patterns:
        if pattern.search(text):
            return value
    return None


def _match_action(text: str) -> Action:
    if BY_VOLUME_PATTERN.search(text):
        return Action.VOLUME
    return _first_match(ACTION_PATTERNS, text) or Action.UNKNOWN


def _match_token(text: str, protocol: Protocol | None) -> str | None:
    protocol_word = protocol.value.split("-")[0] if protocol else None
    for match in TOKEN_PATTERN.finditer(text):
        token = match.group(1)
        if token != protocol_word:
            return token.upper()
    return None


def _match_limit(text: str) -> int:
    match = LIMIT_PATTERN.search(text)
    if not match:
        return DEFAULT_LIMIT
    return int(match.group(1)) or DEFAULT_LIMIT


class RuleMatcher:
    """Keyword and alias-table matcher.

    Pure and deterministic: the same text always yields the same intent.
    """

    name = "rules"

    def parse(self, query: str) -> QueryIntent:
        text = query.lower().strip()
        protocol = _first_match(PROTOCOL_PATTERNS, text)
        return QueryIntent(
            protocol=protocol,
            chain=_first_match(CHAIN_PATTERNS, text),
            action=_match_action(text),
            token=_match_token(text, protocol),
            limit=_match_limit(text),
            raw_intent=query,
        )

    async def attempt(self, query: str) -> MatchOutcome:
        intent = self.parse(query)
        return MatchOutcome(intent=intent, committed=intent.is_actionable)

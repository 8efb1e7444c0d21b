"""Generative second stage of intent resolution, called through litellm."""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from typing import Any

import litellm
from pydantic import ValidationError

from ..exceptions import IntentAmbiguityError
from ..logger import TRACE, get_logger
from ..settings import QuerySettings
from .intent import MatchOutcome, QueryIntent

logger = get_logger(__name__)

Completion = Callable[..., Awaitable[Any]]

SYSTEM_PROMPT = """You are a DeFi data query parser. Parse natural language queries about DeFi protocols into structured JSON.

Supported protocols:
- aave-v3: Lending protocol. Chains: base, arbitrum, optimism
- uniswap-v3: DEX/AMM. Chains: base, arbitrum
- morpho-blue: Lending markets and vaults. Chains: base, ethereum

Supported actions:
- tvl: Total Value Locked
- rates: Lending/supply/borrow rates
- pools: Top liquidity pools
- volume: Trading volume
- vaults: Top lending vaults by deposits
- unknown: Cannot determine

Chain aliases:
- "base", "base chain", "base network" -> base
- "arbitrum", "arb", "arbitrum one" -> arbitrum
- "optimism", "op", "optimism network" -> optimism
- "ethereum", "eth", "mainnet" -> ethereum

Protocol aliases:
- "aave", "aave v3", "aave3" -> aave-v3
- "uniswap", "uni", "uniswap v3", "univ3" -> uniswap-v3
- "morpho", "morpho blue" -> morpho-blue

Respond ONLY with valid JSON in this exact format:
{
  "protocol": "aave-v3" | "uniswap-v3" | "morpho-blue" | null,
  "chain": "base" | "arbitrum" | "optimism" | "ethereum" | null,
  "action": "tvl" | "rates" | "pools" | "volume" | "vaults" | "unknown",
  "token": "USDC" | null,
  "limit": 10,
  "rawIntent": "brief description of what was asked"
}

Examples:
- "Aave TVL on Base" -> {"protocol":"aave-v3","chain":"base","action":"tvl","token":null,"limit":10,"rawIntent":"Aave V3 TVL on Base chain"}
- "top uniswap pools on arbitrum" -> {"protocol":"uniswap-v3","chain":"arbitrum","action":"pools","token":null,"limit":10,"rawIntent":"Top Uniswap V3 pools on Arbitrum"}
- "what are the best lending rates?" -> {"protocol":"aave-v3","chain":null,"action":"rates","token":null,"limit":10,"rawIntent":"Best lending rates across all chains"}
- "uniswap volume" -> {"protocol":"uniswap-v3","chain":null,"action":"volume","token":null,"limit":10,"rawIntent":"Uniswap V3 volume"}
- "biggest morpho vaults on mainnet" -> {"protocol":"morpho-blue","chain":"ethereum","action":"vaults","token":null,"limit":10,"rawIntent":"Largest Morpho Blue vaults on Ethereum"}"""


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Return the first balanced JSON object embedded in ``text``.

    Handles replies wrapped in prose or markdown fences by attempting a
    decode at every opening brace.
    """
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(obj, dict):
            return obj
        start = text.find("{", start + 1)
    return None


def _reply_text(response: Any) -> str:
    """Flatten the first choice's content, which may be a list of content blocks."""
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            text = block.get("text") if isinstance(block, dict) else getattr(block, "text", None)
            if isinstance(text, str):
                parts.append(text)
        return "\n".join(parts)
    return str(content)


class LLMMatcher:
    """Ask a hosted model to restate the query as an intent.

    Any failure is raised as ``IntentAmbiguityError`` so the resolver can
    fall back to the rule-based intent.
    """

    name = "llm"

    def __init__(self, settings: QuerySettings, completion: Completion | None = None):
        self.settings = settings
        self._completion = completion or litellm.acompletion

    async def attempt(self, query: str) -> MatchOutcome:
        return MatchOutcome(intent=await self.parse(query), committed=True)

    async def parse(self, query: str) -> QueryIntent:
        if not self.settings.llm_configured:
            raise IntentAmbiguityError("LLM API key is not configured")

        api_key = self.settings.llm_api_key.get_secret_value()  # type: ignore[union-attr]
        try:
            response = await self._completion(
                model=self.settings.llm_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": query},
                ],
                max_tokens=self.settings.llm_max_tokens,
                api_key=api_key,
                timeout=self.settings.request_timeout,
            )
        except Exception as e:
            raise IntentAmbiguityError(f"LLM request failed: {e}") from e

        text = _reply_text(response)
        logger.log(TRACE, "LLM reply for %r: %s", query, text)
        payload = extract_json_object(text)
        if payload is None:
            raise IntentAmbiguityError("No JSON object found in LLM reply")

        if not payload.get("rawIntent"):
            payload["rawIntent"] = query
        try:
            return QueryIntent.model_validate(payload)
        except ValidationError as e:
            raise IntentAmbiguityError(f"LLM reply does not describe a valid intent: {e}") from e

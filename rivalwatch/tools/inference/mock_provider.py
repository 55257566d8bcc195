# rivalwatch/tools/inference/mock_provider.py
"""
Mock Inference Backend

Purpose
-------
Deterministic, network-free backend for tests, local dev and as the stand-in
when a network backend has no credential.

Design
------
- Pure keyword rules over the lower-cased prompt, checked in a fixed priority:
    1. pricing      ("$" + price/pricing/plan)
    2. minor update (date-only / customer-count-only deltas) => no change
    3. product announcement
    4. messaging / positioning shift
    5. feature announcement
    6. length threshold (> 3000 chars)
  The order is the behavior: the evaluation scenarios depend on it.
- Optional simulated latency (async sleep) when standing in for a real backend.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable, Callable
from typing import Any

_PRICE_RE = re.compile(r"\$\d+")

LENGTH_THRESHOLD = 3000
DEFAULT_DELAY_S = 0.5


class MockBackend:
    name = "mock"

    def __init__(
        self,
        delay_s: float = 0.0,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.delay_s = delay_s
        self._sleep = sleep
        self.calls = 0

    async def analyze(self, prompt: str) -> dict[str, Any]:
        self.calls += 1
        if self.delay_s > 0:
            await self._sleep(self.delay_s)
        return mock_analysis(prompt)


def _has(text: str, *words: str) -> bool:
    return any(w in text for w in words)


def mock_analysis(prompt: str) -> dict[str, Any]:
    lower = prompt.lower()

    # --- 1. Pricing ---
    if "$" in lower and _has(lower, "price", "pricing", "plan"):
        prices = list(dict.fromkeys(_PRICE_RE.findall(prompt)))
        if len(prices) >= 2:
            return {
                "hasSignificantChange": True,
                "changeType": "pricing",
                "changeSummary": "Pricing plan updated with new rates",
                "details": {"oldValue": prices[0], "newValue": prices[1], "impactLevel": "high"},
                "confidence": "high",
                "competitiveAnalysis": "Competitor has adjusted pricing strategy",
            }
        return {
            "hasSignificantChange": False,
            "changeType": "pricing",
            "changeSummary": "Pricing content modified",
            "details": {"impactLevel": "medium"},
            "confidence": "medium",
        }

    # --- 2. Minor update: dates / customer counters only ---
    if (
        ("january" in lower and "last updated" in lower)
        or ("1,000" in lower and "1,050" in lower)
        or ("customers" in lower and not _has(lower, "feature", "pricing", "announcement"))
    ):
        return {
            "hasSignificantChange": False,
            "changeType": "other",
            "changeSummary": "Minor content updates detected",
            "details": {"impactLevel": "low"},
            "confidence": "medium",
        }

    # --- 3. Product announcement ---
    if (
        ("announcing" in lower and _has(lower, "2.0", "platform", "update"))
        or "major platform update" in lower
        or "product launch" in lower
    ):
        return {
            "hasSignificantChange": True,
            "changeType": "product",
            "changeSummary": "Major product announcement detected",
            "details": {"impactLevel": "high"},
            "confidence": "high",
            "competitiveAnalysis": "Significant product update may impact competitive landscape",
        }

    # --- 4. Messaging / positioning ---
    if (
        ("enterprise" in lower and "small" in lower)
        or ("scaling organizations" in lower and "small teams" in lower)
        or ("100+" in lower and "2-10" in lower)
    ):
        return {
            "hasSignificantChange": True,
            "changeType": "messaging",
            "changeSummary": "Market positioning shift detected",
            "details": {"impactLevel": "high"},
            "confidence": "high",
            "competitiveAnalysis": "Competitor has shifted target market positioning",
        }

    # --- 5. Features ---
    if _has(lower, "feature", "capability", "functionality") and _has(lower, "new", "announcing", "introducing"):
        return {
            "hasSignificantChange": True,
            "changeType": "features",
            "changeSummary": "New features announced in product offering",
            "details": {"impactLevel": "medium"},
            "confidence": "high",
            "competitiveAnalysis": "Competitor expanding product capabilities",
        }

    # --- 6. Length threshold ---
    significant = len(prompt) > LENGTH_THRESHOLD
    return {
        "hasSignificantChange": significant,
        "changeType": "other",
        "changeSummary": "Content changes detected" if significant else "Minor content updates",
        "details": {"impactLevel": "medium" if significant else "low"},
        "confidence": "low",
    }


__all__ = ["DEFAULT_DELAY_S", "LENGTH_THRESHOLD", "MockBackend", "mock_analysis"]

# rivalwatch/tools/inference/health.py
"""Provider self-test: one canonical pricing prompt, timed."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable

from rivalwatch.schemas.models import HealthReport

from .provider_base import InferenceBackend

HEALTH_CHECK_PROMPT = """Test prompt for SaaS competitive intelligence analysis.

COMPETITOR: TestSaaS
PAGE TYPE: pricing
TEXT SIMILARITY: 85.0%

OLD CONTENT SNAPSHOT:
Headlines: Basic Plan, Pro Plan
Pricing: Basic: $10/month, Pro: $25/month
Features: Task Management, Time Tracking
Content Preview: Choose your plan. Basic plan includes task management...

NEW CONTENT SNAPSHOT:
Headlines: Basic Plan, Pro Plan
Pricing: Basic: $15/month, Pro: $30/month
Features: Task Management, Time Tracking
Content Preview: Choose your plan. Basic plan includes task management...

Respond with JSON: { "hasSignificantChange": true, "changeType": "pricing", "changeSummary": "Test response", "details": { "impactLevel": "medium" }, "confidence": "high" }"""


async def check_backend(
    backend: InferenceBackend,
    *,
    timeout_s: float = 60.0,
    clock: Callable[[], float] = time.monotonic,
) -> HealthReport:
    """Never raises: transport/parse failures and malformed payloads become success=False."""
    started = clock()

    def _elapsed() -> int:
        return max(0, int((clock() - started) * 1000))

    try:
        payload = await asyncio.wait_for(backend.analyze(HEALTH_CHECK_PROMPT), timeout=timeout_s)
    except Exception as e:  # noqa: BLE001
        return HealthReport(backend=backend.name, success=False, response_time_ms=_elapsed(), error=str(e) or type(e).__name__)

    if not isinstance(payload, dict) or "hasSignificantChange" not in payload:
        return HealthReport(
            backend=backend.name, success=False, response_time_ms=_elapsed(), error="Invalid response structure"
        )
    return HealthReport(backend=backend.name, success=True, response_time_ms=_elapsed())


__all__ = ["HEALTH_CHECK_PROMPT", "check_backend"]

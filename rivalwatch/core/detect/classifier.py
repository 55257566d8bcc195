# rivalwatch/core/detect/classifier.py
"""
Differ/Classifier for pairs of page fingerprints.

Purpose
-------
Decide whether two fingerprints of the same page differ in a business-relevant
way and label the change (type, impact, confidence).

Design
------
- Identical content hashes short-circuit to "no change" without inference.
- Otherwise a structured prompt goes to the configured InferenceBackend; its
  JSON payload is coerced field by field into a ClassificationResult.
- Any inference failure (transport, timeout, parse, unexpected exception)
  degrades to the rule-based fallback. `classify_change` never raises.
- Configuration is fixed at construction (`ClassifierConfig`), so there is no
  ordering between "configure" and "classify".

Public API
----------
class ClassifierConfig
class ChangeClassifier:
    async def classify_change(competitor_name, page_type, old, new) -> ClassificationResult
    async def classify_batch(items) -> list[ClassificationResult]
def parse_classification(payload, *, backend=None, keep_raw=False) -> ClassificationResult
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rivalwatch.logs import redact
from rivalwatch.schemas.labels import coerce_change_type, coerce_level
from rivalwatch.schemas.models import (
    ChangeDetails,
    ClassificationRequest,
    ClassificationResult,
    PageFingerprint,
)
from rivalwatch.tools.inference.errors import InferenceError, InferenceParseError
from rivalwatch.tools.inference.mock_provider import MockBackend
from rivalwatch.tools.inference.provider_base import InferenceBackend

from .fallback import fallback_classification
from .prompt import build_prompt

logger = logging.getLogger(__name__)


class ClassifierConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    test_mode: bool = Field(False, description="Attach the raw backend payload to each result.")
    batch_delay_s: float = Field(1.0, ge=0, description="Pause between two items in classify_batch.")
    inference_timeout_s: float = Field(60.0, gt=0, description="Upper bound on one backend call.")


NO_CHANGE = ClassificationResult(
    has_significant_change=False,
    change_type="other",
    change_summary="No changes detected",
    details=ChangeDetails(impact_level="low"),
    confidence="high",
)


# ---------------------------
# Payload coercion
# ---------------------------


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == "true"


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_classification(
    payload: Any,
    *,
    backend: str | None = None,
    keep_raw: bool = False,
) -> ClassificationResult:
    """
    Coerce a backend payload into a ClassificationResult.

    Missing or invalid fields default to: changeType 'other', impactLevel
    'medium', confidence 'medium'. A non-object payload raises
    InferenceParseError so the caller can fall back.
    """
    if not isinstance(payload, dict):
        raise InferenceParseError(
            f"Expected a JSON object, got {type(payload).__name__}",
            backend=backend or "unknown",
            raw_text=repr(payload),
        )

    details = payload.get("details")
    if not isinstance(details, dict):
        details = {}

    return ClassificationResult(
        has_significant_change=_as_bool(payload.get("hasSignificantChange")),
        change_type=coerce_change_type(payload.get("changeType")),
        change_summary=_as_text(payload.get("changeSummary")) or "Changes detected",
        details=ChangeDetails(
            old_value=_as_text(details.get("oldValue")),
            new_value=_as_text(details.get("newValue")),
            impact_level=coerce_level(details.get("impactLevel")),
        ),
        confidence=coerce_level(payload.get("confidence")),
        competitive_analysis=_as_text(payload.get("competitiveAnalysis")),
        raw_response=payload if keep_raw else None,
        backend=backend,
    )


# ---------------------------
# Classifier
# ---------------------------


class ChangeClassifier:
    def __init__(
        self,
        backend: InferenceBackend | None = None,
        config: ClassifierConfig | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._backend = backend or MockBackend()
        self.config = config or ClassifierConfig()
        self._sleep = sleep

    @property
    def backend(self) -> InferenceBackend:
        return self._backend

    async def classify_change(
        self,
        competitor_name: str,
        page_type: str,
        old: PageFingerprint,
        new: PageFingerprint,
    ) -> ClassificationResult:
        if old.content_hash == new.content_hash:
            return NO_CHANGE

        name = getattr(self._backend, "name", type(self._backend).__name__)
        try:
            prompt = build_prompt(competitor_name, page_type, old, new)
            payload = await asyncio.wait_for(self._backend.analyze(prompt), timeout=self.config.inference_timeout_s)
            return parse_classification(payload, backend=name, keep_raw=self.config.test_mode)
        except InferenceParseError as e:
            logger.warning(
                "Inference via %s returned unparseable output (%s); raw=%r. Using rule-based fallback.",
                e.backend,
                redact(str(e)),
                redact(e.snippet),
            )
            return fallback_classification(page_type, old, new, error=redact(str(e)))
        except InferenceError as e:
            logger.warning("Inference via %s failed: %s. Using rule-based fallback.", e.backend, redact(str(e)))
            return fallback_classification(page_type, old, new, error=redact(str(e)))
        except Exception as e:  # noqa: BLE001
            msg = f"{type(e).__name__}: {e}"
            logger.warning("Inference via %s failed unexpectedly: %s. Using rule-based fallback.", name, redact(msg))
            return fallback_classification(page_type, old, new, error=redact(msg))

    async def classify_batch(self, items: Sequence[ClassificationRequest]) -> list[ClassificationResult]:
        """Sequential, with `batch_delay_s` between two items. A failing item never aborts the batch."""
        results: list[ClassificationResult] = []
        for i, item in enumerate(items):
            if i and self.config.batch_delay_s > 0:
                await self._sleep(self.config.batch_delay_s)
            try:
                result = await self.classify_change(item.competitor_name, item.page_type, item.old, item.new)
            except Exception as e:  # noqa: BLE001
                logger.error("Failed to classify changes for %s: %s", item.competitor_name, e)
                result = ClassificationResult(
                    has_significant_change=False,
                    change_type="other",
                    change_summary="Analysis failed",
                    details=ChangeDetails(impact_level="low"),
                    confidence="low",
                    error=f"{type(e).__name__}: {e}",
                )
            results.append(result)
        return results


__all__ = ["ClassifierConfig", "ChangeClassifier", "NO_CHANGE", "parse_classification"]

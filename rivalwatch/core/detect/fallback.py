# rivalwatch/core/detect/fallback.py
"""
Rule-based classification used whenever inference is unavailable or unusable.

The fallback never drops a byte-level change that reached it: the verdict is
always significant, with low confidence.
"""

from __future__ import annotations

from rivalwatch.core.normalize.compare import text_similarity
from rivalwatch.schemas.labels import ChangeType, Level
from rivalwatch.schemas.models import ChangeDetails, ClassificationResult, PageFingerprint

FALLBACK_BACKEND = "fallback"
FEATURE_DELTA_THRESHOLD = 2
RESTRUCTURE_SIMILARITY = 0.5

_PAGE_TYPE_DEFAULTS: dict[str, ChangeType] = {
    "pricing": "pricing",
    "features": "features",
    "blog": "product",
}


def _pricing_mismatch(old: PageFingerprint, new: PageFingerprint) -> bool:
    old_p, new_p = old.extracted.pricing, new.extracted.pricing
    if len(old_p) != len(new_p):
        return True
    new_prices = {p.price for p in new_p}
    return any(p.price not in new_prices for p in old_p)


def _headline_mismatch(old: PageFingerprint, new: PageFingerprint) -> bool:
    old_h, new_h = old.extracted.headlines, new.extracted.headlines
    if len(old_h) != len(new_h):
        return True
    lowered = [h.lower() for h in new_h]
    return not all(any(o.lower() in n for n in lowered) for o in old_h)


def infer_change_type(page_type: str, old: PageFingerprint, new: PageFingerprint) -> ChangeType:
    """Ordered rules: pricing mismatch, feature-count delta, headline mismatch, page-type default."""
    if _pricing_mismatch(old, new):
        return "pricing"
    if abs(len(old.extracted.features) - len(new.extracted.features)) > FEATURE_DELTA_THRESHOLD:
        return "features"
    if _headline_mismatch(old, new):
        return "messaging"
    return _PAGE_TYPE_DEFAULTS.get(page_type, "other")


def fallback_classification(
    page_type: str,
    old: PageFingerprint,
    new: PageFingerprint,
    *,
    error: str | None = None,
) -> ClassificationResult:
    change_type = infer_change_type(page_type, old, new)

    summary = "Content changes detected"
    impact: Level = "medium"
    if change_type == "pricing":
        summary, impact = "Pricing page updates detected", "high"
    elif change_type == "features":
        summary, impact = "Feature page modifications found", "medium"
    elif text_similarity(old.cleaned_text, new.cleaned_text) < RESTRUCTURE_SIMILARITY:
        summary, impact = "Major content restructuring detected", "high"

    return ClassificationResult(
        has_significant_change=True,
        change_type=change_type,
        change_summary=summary,
        details=ChangeDetails(impact_level=impact),
        confidence="low",
        backend=FALLBACK_BACKEND,
        error=error,
    )


__all__ = ["FALLBACK_BACKEND", "infer_change_type", "fallback_classification"]

# rivalwatch/core/normalize/compare.py
"""
Structural diff between two fingerprints.

Used by the rule-based fallback for its summary and exposed to callers that
want to show *what* moved (plans, features, headlines) next to the verdict.
"""

from __future__ import annotations

from pydantic import Field

from rivalwatch.schemas.models import FeatureEntry, PageFingerprint, PricingEntry, _FrozenRecord


class FingerprintDiff(_FrozenRecord):
    has_changed: bool = Field(..., description="Content hashes differ.")
    pricing_added: tuple[PricingEntry, ...] = Field(default_factory=tuple)
    pricing_removed: tuple[PricingEntry, ...] = Field(default_factory=tuple)
    pricing_modified: tuple[PricingEntry, ...] = Field(default_factory=tuple)
    features_added: tuple[FeatureEntry, ...] = Field(default_factory=tuple)
    features_removed: tuple[FeatureEntry, ...] = Field(default_factory=tuple)
    headlines_added: tuple[str, ...] = Field(default_factory=tuple)
    headlines_removed: tuple[str, ...] = Field(default_factory=tuple)
    text_similarity: float = Field(1.0, ge=0.0, le=1.0, description="Jaccard similarity of lower-cased word sets.")


def text_similarity(a: str, b: str) -> float:
    """Jaccard index over whitespace-split, lower-cased words. Two empty texts are identical."""
    words_a = set(a.lower().split())
    words_b = set(b.lower().split())
    union = words_a | words_b
    if not union:
        return 1.0
    return len(words_a & words_b) / len(union)


def _diff_pricing(
    old: tuple[PricingEntry, ...], new: tuple[PricingEntry, ...]
) -> tuple[tuple[PricingEntry, ...], tuple[PricingEntry, ...], tuple[PricingEntry, ...]]:
    added = tuple(n for n in new if not any(o.plan == n.plan and o.price == n.price for o in old))
    removed = tuple(o for o in old if not any(o.plan == n.plan for n in new))
    modified = tuple(n for n in new if any(o.plan == n.plan and o.price != n.price for o in old))
    return added, removed, modified


def _missing_titles(src: tuple[FeatureEntry, ...], other: tuple[FeatureEntry, ...]) -> tuple[FeatureEntry, ...]:
    titles = {f.title.lower() for f in other}
    return tuple(f for f in src if f.title.lower() not in titles)


def _missing_lines(src: tuple[str, ...], other: tuple[str, ...]) -> tuple[str, ...]:
    lowered = {h.lower() for h in other}
    return tuple(h for h in src if h.lower() not in lowered)


def compare_fingerprints(old: PageFingerprint, new: PageFingerprint) -> FingerprintDiff:
    if old.content_hash == new.content_hash:
        return FingerprintDiff(has_changed=False)

    o, n = old.extracted, new.extracted
    added, removed, modified = _diff_pricing(o.pricing, n.pricing)
    return FingerprintDiff(
        has_changed=True,
        pricing_added=added,
        pricing_removed=removed,
        pricing_modified=modified,
        features_added=_missing_titles(n.features, o.features),
        features_removed=_missing_titles(o.features, n.features),
        headlines_added=_missing_lines(n.headlines, o.headlines),
        headlines_removed=_missing_lines(o.headlines, n.headlines),
        text_similarity=text_similarity(old.cleaned_text, new.cleaned_text),
    )


__all__ = ["FingerprintDiff", "compare_fingerprints", "text_similarity"]

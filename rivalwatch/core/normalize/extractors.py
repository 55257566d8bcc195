# rivalwatch/core/normalize/extractors.py
"""
Structured-signal extraction from cleaned page text.

Every extractor is a pure function over strings driven by an ordered rule
table, so each can be unit-tested without touching the classifier. Output is
a best-effort signal for prompting and heuristics, not ground truth.
"""

from __future__ import annotations

import re
from re import Pattern

from rivalwatch.schemas.models import FeatureEntry, PricingEntry

# ---------- Regex & keyword tables ----------

PRICING_PATTERNS: tuple[Pattern[str], ...] = (
    # $99/mo, $99/month, $999/year
    re.compile(r"\$(\d+(?:,\d{3})*(?:\.\d{2})?)\s*/\s*(monthly|month|mo|annually|year|yr)\b", re.IGNORECASE),
    # $99 per month
    re.compile(r"\$(\d+(?:,\d{3})*(?:\.\d{2})?)\s+per\s+(month|year)", re.IGNORECASE),
    # Free, Trial, Demo, Contact sales, ...
    re.compile(r"(free|trial|demo|contact\s+(?:us|sales)|custom|enterprise)", re.IGNORECASE),
)

FEATURE_PATTERNS: tuple[Pattern[str], ...] = (
    re.compile(r"^[\s]*[•·▪▫◦‣⁃]\s*(.+)$", re.MULTILINE),
    re.compile(r"^[\s]*[-*]\s*(.+)$", re.MULTILINE),
    re.compile(r"^\d+\.\s*(.+)$", re.MULTILINE),
    # "Label: description"
    re.compile(r"([A-Z][^:]+):\s*([^.\n]+)"),
)

_HEADING_RE = re.compile(r"<h[1-6][^>]*>([^<]+)</h[1-6]>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")

ENGLISH_STOPWORDS = frozenset({"the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by", "from", "as"})

MAX_FEATURES = 20
MAX_HEADLINES = 10
HEADLINE_SCAN_LINES = 50
LANGUAGE_SAMPLE_WORDS = 100

# ---------- Extractors ----------


def extract_pricing(text: str) -> list[PricingEntry]:
    """One PricingEntry per pattern match, in pattern order. No merging or dedup."""
    out: list[PricingEntry] = []
    for pattern in PRICING_PATTERNS:
        for m in pattern.finditer(text):
            groups = m.groups()
            price = groups[0] if groups and groups[0] else m.group(0)
            billing = groups[1] if len(groups) > 1 and groups[1] else "unknown"
            out.append(PricingEntry(price=price, billing_period=billing.lower()))
    return out


def extract_features(text: str) -> list[FeatureEntry]:
    """Bullet / numbered / 'Label: text' matches between 11 and 199 chars, capped at MAX_FEATURES."""
    out: list[FeatureEntry] = []
    for pattern in FEATURE_PATTERNS:
        for m in pattern.finditer(text):
            raw = (m.group(1) or "").strip()
            if not (10 < len(raw) < 200):
                continue
            parts = raw.split(":")
            title = parts[0].strip() or raw
            description = parts[1].strip() if ":" in raw else raw
            out.append(FeatureEntry(title=title, description=description))
    return out[:MAX_FEATURES]


def _looks_like_title(line: str) -> bool:
    return (
        10 < len(line) < 100
        and line[:1].isascii()
        and line[:1].isupper()
        and "." not in line
        and len(line.split(" ")) < 15
    )


def extract_headlines(html: str, text: str) -> list[str]:
    """
    <h1>–<h6> contents (6–199 chars) followed by title-like lines among the first
    HEADLINE_SCAN_LINES lines of text. Order-preserving dedup, capped at MAX_HEADLINES.
    """
    found: list[str] = []
    for m in _HEADING_RE.finditer(html or ""):
        heading = _TAG_RE.sub("", m.group(0)).strip()
        if 5 < len(heading) < 200:
            found.append(heading)

    for line in (text or "").split("\n")[:HEADLINE_SCAN_LINES]:
        trimmed = line.strip()
        if _looks_like_title(trimmed):
            found.append(trimmed)

    return list(dict.fromkeys(found))[:MAX_HEADLINES]


def extract_metadata(text: str) -> tuple[int, str]:
    """Return (word_count, language). Language is 'en' when >10% of the first 100 words are stopwords."""
    words = (text or "").split()
    sample = [w.lower() for w in words[:LANGUAGE_SAMPLE_WORDS]]
    ratio = sum(1 for w in sample if w in ENGLISH_STOPWORDS) / len(sample) if sample else 0.0
    return len(words), ("en" if ratio > 0.1 else "unknown")


__all__ = [
    "PRICING_PATTERNS",
    "FEATURE_PATTERNS",
    "ENGLISH_STOPWORDS",
    "extract_pricing",
    "extract_features",
    "extract_headlines",
    "extract_metadata",
]

# rivalwatch/core/normalize/fingerprint.py

from __future__ import annotations

import hashlib

from rivalwatch.schemas.models import ExtractedSignals, PageFingerprint

from .cleaning import clean_text
from .extractors import extract_features, extract_headlines, extract_metadata, extract_pricing


def content_hash(html: str) -> str:
    """SHA-256 hex digest of the raw markup. Whitespace or markup churn changes it."""
    return hashlib.sha256((html or "").encode("utf-8")).hexdigest()


def normalize(html: str, text: str) -> PageFingerprint:
    """
    Turn a raw (html, visible text) pair into a PageFingerprint.

    Pure: no I/O and no clock, so the same inputs always give an equal fingerprint.
    Headlines read the raw markup; every other signal reads the cleaned text.
    """
    cleaned = clean_text(text)
    word_count, language = extract_metadata(cleaned)
    signals = ExtractedSignals(
        pricing=tuple(extract_pricing(cleaned)),
        features=tuple(extract_features(cleaned)),
        headlines=tuple(extract_headlines(html, cleaned)),
        word_count=word_count,
        language=language,
    )
    return PageFingerprint(content_hash=content_hash(html), cleaned_text=cleaned, extracted=signals)


__all__ = ["content_hash", "normalize"]

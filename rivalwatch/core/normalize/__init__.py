# rivalwatch/core/normalize/__init__.py
from .cleaning import CLEANING_RULES, clean_text
from .compare import FingerprintDiff, compare_fingerprints, text_similarity
from .extractors import extract_features, extract_headlines, extract_metadata, extract_pricing
from .fingerprint import content_hash, normalize

__all__ = [
    "CLEANING_RULES",
    "clean_text",
    "content_hash",
    "normalize",
    "extract_pricing",
    "extract_features",
    "extract_headlines",
    "extract_metadata",
    "FingerprintDiff",
    "compare_fingerprints",
    "text_similarity",
]

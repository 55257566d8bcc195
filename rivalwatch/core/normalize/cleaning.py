# rivalwatch/core/normalize/cleaning.py
"""
Deterministic text cleaning.

Removes volatile noise (dates, times, view counters, "updated" stamps, cookie
boilerplate, loading placeholders) so that byte-level churn does not look like
a business change. Rules are data: an ordered list of (pattern, replacement).
"""

from __future__ import annotations

import re
from re import Pattern

_WS_RE = re.compile(r"\s+")

# ---------- Ordered noise rules ----------

CLEANING_RULES: tuple[tuple[str, Pattern[str], str], ...] = (
    ("whitespace", _WS_RE, " "),
    ("date_slash", re.compile(r"\b\d{1,2}/\d{1,2}/\d{2,4}\b"), ""),
    ("date_dash", re.compile(r"\b\d{1,2}-\d{1,2}-\d{2,4}\b"), ""),
    ("date_iso", re.compile(r"\b\d{4}-\d{2}-\d{2}\b"), ""),
    ("time", re.compile(r"\b\d{1,2}:\d{2}(?::\d{2})?\s*(?:AM|PM)?\b", re.IGNORECASE), ""),
    ("social_counter", re.compile(r"\b\d+(?:,\d{3})*\s*(?:views?|likes?|shares?|followers?)\b", re.IGNORECASE), ""),
    ("timestamp_phrase", re.compile(r"(?:updated|posted|published|modified|last\s+updated)[\s:]*\d+", re.IGNORECASE), ""),
    (
        "cookie_boilerplate",
        re.compile(
            r"(?:this\s+site\s+uses?\s+cookies?|accept\s+(?:all\s+)?cookies?|privacy\s+policy|cookie\s+settings)",
            re.IGNORECASE,
        ),
        "",
    ),
    ("loading_placeholder", re.compile(r"\b(?:loading\.{3}|please\s+wait\.{3}|loading\s+content)\b", re.IGNORECASE), ""),
)


def clean_text(text: str) -> str:
    """
    Apply CLEANING_RULES in order and collapse whitespace left behind by removals.

    A removal can join text into a new match for an earlier rule, so passes
    repeat until the output is stable: clean_text(clean_text(x)) == clean_text(x).
    """
    out = _WS_RE.sub(" ", text or "").strip()
    while True:
        prev = out
        for _name, pattern, repl in CLEANING_RULES:
            out = pattern.sub(repl, out)
        out = _WS_RE.sub(" ", out).strip()
        if out == prev:
            return out


__all__ = ["CLEANING_RULES", "clean_text"]

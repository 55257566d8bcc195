# rivalwatch/core/detect/prompt.py

from __future__ import annotations

from rivalwatch.schemas.models import PageFingerprint

MAX_PROMPT_HEADLINES = 3
MAX_PROMPT_PLANS = 5
MAX_PROMPT_FEATURES = 5
PREVIEW_CHARS = 500

ANALYSIS_FOCUS = (
    "Pricing changes (plans, amounts, billing terms, feature inclusions)",
    "New feature announcements or removals",
    "Product positioning and messaging changes",
    "Integration announcements",
    "Security/compliance updates",
)

IGNORE = (
    "Blog post dates and timestamps",
    "Customer testimonials and case studies",
    "Job postings and team updates",
    "Legal/privacy policy changes",
    "Social media feeds and view counts",
    "Cookie banners and UI elements",
)

RESPONSE_SCHEMA = """{
  "hasSignificantChange": boolean,
  "changeType": "pricing|features|messaging|product|integration|other",
  "changeSummary": "specific, actionable summary under 80 chars",
  "details": {
    "oldValue": "before state if applicable",
    "newValue": "after state if applicable",
    "impactLevel": "high|medium|low"
  },
  "confidence": "high|medium|low",
  "competitiveAnalysis": "brief competitive implications (optional)"
}"""


def word_count_ratio(old: PageFingerprint, new: PageFingerprint) -> float:
    """old/new word count as a percentage. An empty new page reads 100% only if the old one was empty too."""
    old_wc, new_wc = old.extracted.word_count, new.extracted.word_count
    if new_wc == 0:
        return 100.0 if old_wc == 0 else 0.0
    return old_wc / new_wc * 100


def _snapshot(label: str, fp: PageFingerprint) -> str:
    ex = fp.extracted
    headlines = ", ".join(ex.headlines[:MAX_PROMPT_HEADLINES]) or "None"
    pricing = ", ".join(f"{p.plan}: {p.price}/{p.billing_period}" for p in ex.pricing[:MAX_PROMPT_PLANS]) or "None detected"
    features = ", ".join(f.title for f in ex.features[:MAX_PROMPT_FEATURES]) or "None detected"
    return (
        f"{label} CONTENT SNAPSHOT:\n"
        f"Headlines: {headlines}\n"
        f"Pricing: {pricing}\n"
        f"Features: {features}\n"
        f"Content Preview: {fp.cleaned_text[:PREVIEW_CHARS]}..."
    )


def build_prompt(competitor_name: str, page_type: str, old: PageFingerprint, new: PageFingerprint) -> str:
    focus = "\n".join(f"- {line}" for line in ANALYSIS_FOCUS)
    ignore = "\n".join(f"- {line}" for line in IGNORE)
    return (
        "You are a SaaS competitive intelligence expert. Analyze these webpage contents for meaningful business changes.\n\n"
        f"COMPETITOR: {competitor_name}\n"
        f"PAGE TYPE: {page_type}\n"
        f"TEXT SIMILARITY: {word_count_ratio(old, new):.1f}%\n\n"
        f"{_snapshot('OLD', old)}\n\n"
        f"{_snapshot('NEW', new)}\n\n"
        f"ANALYSIS FOCUS:\n{focus}\n\n"
        f"IGNORE:\n{ignore}\n\n"
        f"Respond with JSON:\n{RESPONSE_SCHEMA}"
    )


__all__ = ["build_prompt", "word_count_ratio"]

# rivalwatch/core/fetch/text.py
"""
Visible-text extraction.

The browser path runs `VISIBLE_TEXT_JS` inside the page; `extract_visible_text`
applies the same removal rules to static HTML with BeautifulSoup.
"""

from __future__ import annotations

from bs4 import BeautifulSoup

NOISE_TAGS = ("script", "style", "noscript")
NOISE_SELECTORS = (
    '[class*="cookie"]',
    '[class*="banner"]',
    '[class*="popup"]',
    '[class*="modal"]',
    '[id*="cookie"]',
    '[id*="banner"]',
)

VISIBLE_TEXT_JS = (
    "() => {"
    f"  document.querySelectorAll('{', '.join(NOISE_TAGS)}').forEach(el => el.remove());"
    f"  document.querySelectorAll('{', '.join(NOISE_SELECTORS)}').forEach(el => el.remove());"
    "  return (document.body && (document.body.innerText || document.body.textContent)) || '';"
    "}"
)


def extract_visible_text(html: str) -> str:
    """Strip script/style/noscript and cookie/banner/modal containers, then read the text."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "lxml")
    for el in soup.find_all(list(NOISE_TAGS)):
        el.decompose()
    for el in soup.select(", ".join(NOISE_SELECTORS)):
        el.decompose()
    root = soup.body or soup
    return root.get_text("\n", strip=True)


__all__ = ["NOISE_TAGS", "NOISE_SELECTORS", "VISIBLE_TEXT_JS", "extract_visible_text"]

# rivalwatch/schemas/labels.py
"""
Canonical label sets shared by the detection pipeline.

The string values are part of the JSON contract consumed by downstream
collaborators (notification routing, dashboards), so they must not change.
"""

from __future__ import annotations

from typing import Literal, get_args

# =========================
# Classification labels
# =========================

ChangeType = Literal["pricing", "features", "messaging", "product", "integration", "other"]
Level = Literal["high", "medium", "low"]

# =========================
# Page / run labels
# =========================

PageType = Literal["pricing", "features", "blog", "homepage", "about", "other"]
RunStatus = Literal["running", "completed", "partial", "failed"]

# =========================
# Infrastructure labels
# =========================

BrowserEngine = Literal["chromium", "firefox", "webkit"]
ProviderName = Literal["openai", "anthropic", "mock"]
NotificationType = Literal["pricing_alert", "feature_alert", "weekly_summary"]

CHANGE_TYPES: tuple[str, ...] = get_args(ChangeType)
LEVELS: tuple[str, ...] = get_args(Level)
PROVIDERS: tuple[str, ...] = get_args(ProviderName)


def coerce_change_type(value: object, default: ChangeType = "other") -> ChangeType:
    """Return `value` if it is a known change type, else `default`."""
    if isinstance(value, str) and value.strip().lower() in CHANGE_TYPES:
        return value.strip().lower()  # type: ignore[return-value]
    return default


def coerce_level(value: object, default: Level = "medium") -> Level:
    """Return `value` if it is a known high/medium/low bucket, else `default`."""
    if isinstance(value, str) and value.strip().lower() in LEVELS:
        return value.strip().lower()  # type: ignore[return-value]
    return default


__all__ = [
    "ChangeType",
    "Level",
    "PageType",
    "RunStatus",
    "BrowserEngine",
    "ProviderName",
    "NotificationType",
    "CHANGE_TYPES",
    "LEVELS",
    "PROVIDERS",
    "coerce_change_type",
    "coerce_level",
]

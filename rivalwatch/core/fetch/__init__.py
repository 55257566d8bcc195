# rivalwatch/core/fetch/__init__.py
from .errors import (
    FETCH_ERRORS,
    BrowserLaunchError,
    FetchError,
    FetchTimeoutError,
    NavigationError,
    RobotsUnavailable,
    classify_fetch_error,
    fetch_error_guard,
)
from .page_fetcher import PageFetcher
from .rate_limit import MIN_REQUEST_INTERVAL_S, DomainRateLimiter
from .robots import RobotsCache, domain_of
from .text import extract_visible_text

__all__ = [
    "FetchError",
    "NavigationError",
    "FetchTimeoutError",
    "BrowserLaunchError",
    "RobotsUnavailable",
    "FETCH_ERRORS",
    "classify_fetch_error",
    "fetch_error_guard",
    "PageFetcher",
    "DomainRateLimiter",
    "MIN_REQUEST_INTERVAL_S",
    "RobotsCache",
    "domain_of",
    "extract_visible_text",
]

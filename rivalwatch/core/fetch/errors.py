# rivalwatch/core/fetch/errors.py
"""
Typed errors + utilities for the page fetcher.

Exports
-------
- FetchError, NavigationError, FetchTimeoutError, BrowserLaunchError,
  RobotsUnavailable
- FETCH_ERRORS
- classify_fetch_error(exc)
- fetch_error_guard()

None of these reach callers of `PageFetcher.fetch_page`: the fetcher turns
them into `FetchResult(error=...)`.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Iterator
from contextlib import contextmanager

# =========================
# Exception types
# =========================


class FetchError(RuntimeError):
    """Base class for page-fetch failures."""


class NavigationError(FetchError):
    """Navigation or transport failure (DNS, connection reset, bad response)."""


class FetchTimeoutError(FetchError):
    """Navigation or rendering exceeded the configured timeout."""


class BrowserLaunchError(FetchError):
    """The headless browser could not be started."""


class RobotsUnavailable(FetchError):
    """robots.txt could not be retrieved. Treated as permissive; only logged."""


FETCH_ERRORS = (
    NavigationError,
    FetchTimeoutError,
    BrowserLaunchError,
    RobotsUnavailable,
)

_TIMEOUT_PATTERN = re.compile(r"(timeout|timed\s*out)", re.IGNORECASE)
_NAVIGATION_PATTERN = re.compile(r"(net::|ERR_|navigat|connection|dns|refused|reset)", re.IGNORECASE)

# =========================
# Classification helpers
# =========================


def classify_fetch_error(exc: BaseException) -> FetchError:
    """
    Map arbitrary exceptions raised while fetching to a typed FetchError.

    Heuristics:
      - Already a FetchError → passed through
      - asyncio/builtin TimeoutError or Playwright timeouts → FetchTimeoutError
      - requests.* errors, net::ERR_* messages → NavigationError
      - Fallback → FetchError
    """
    if isinstance(exc, FetchError):
        return exc

    if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
        return FetchTimeoutError(str(exc) or "Timed out")

    try:
        import requests

        if isinstance(exc, requests.Timeout):
            return FetchTimeoutError(str(exc))
        if isinstance(exc, requests.RequestException):
            return NavigationError(str(exc))
    except ImportError:  # pragma: no cover
        pass

    msg = f"{type(exc).__name__}: {exc}"
    if _TIMEOUT_PATTERN.search(msg):
        return FetchTimeoutError(msg)
    if _NAVIGATION_PATTERN.search(msg):
        return NavigationError(msg)
    return FetchError(msg)


@contextmanager
def fetch_error_guard() -> Iterator[None]:
    """Context manager to normalize unexpected exceptions from fetch internals."""
    try:
        yield
    except FETCH_ERRORS:
        raise
    except Exception as exc:  # noqa: BLE001
        raise classify_fetch_error(exc) from exc


__all__ = [
    "FetchError",
    "NavigationError",
    "FetchTimeoutError",
    "BrowserLaunchError",
    "RobotsUnavailable",
    "FETCH_ERRORS",
    "classify_fetch_error",
    "fetch_error_guard",
]

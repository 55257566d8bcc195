# rivalwatch/core/fetch/page_fetcher.py
"""
Polite, browser-rendered page fetcher.

Purpose
-------
Retrieve rendered HTML + visible text for competitor pages while honoring
robots.txt and a per-domain request interval.

Design
------
- One `PageFetcher` per process owns the browser handle, the robots cache and
  the rate limiter; callers share it by reference.
- A fresh browser context per page keeps cookies/storage from leaking between
  fetches.
- `fetch_page` never raises: every failure becomes `FetchResult(error=...)`.
- Robots-blocked URLs return before any navigation is attempted.

Public API
----------
class PageFetcher:
    async def fetch_page(url, options=None) -> FetchResult
    async def fetch_many(urls, options=None) -> list[FetchResult]
    async def self_test() -> dict
    def stats() -> dict
    async def close() -> None
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any
from urllib.parse import urlparse

from rivalwatch.schemas.labels import BrowserEngine
from rivalwatch.schemas.models import FetchOptions, FetchResult

from .errors import BrowserLaunchError, FetchError, fetch_error_guard
from .rate_limit import DomainRateLimiter
from .robots import RobotsCache, domain_of
from .text import VISIBLE_TEXT_JS, extract_visible_text

logger = logging.getLogger(__name__)

# (engine) -> launched browser exposing new_context()/close()
BrowserFactory = Callable[[BrowserEngine], Awaitable[Any]]

_CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--no-first-run",
    "--no-default-browser-check",
    "--disable-background-timer-throttling",
    "--disable-backgrounding-occluded-windows",
    "--disable-renderer-backgrounding",
]

# Extra budget on top of the navigation timeout for waits + content extraction
_TIMEOUT_GRACE_S = 15.0
_SELECTOR_WAIT_MS = 10_000
_SETTLE_MS = 1_000


def _invalid_url_reason(url: str) -> str | None:
    try:
        parsed = urlparse(url)
        parsed.port  # raises on a malformed port
    except ValueError as exc:
        return str(exc)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return "expected an absolute http(s) URL"
    return None


class PageFetcher:
    def __init__(
        self,
        *,
        browser_factory: BrowserFactory | None = None,
        robots: RobotsCache | None = None,
        limiter: DomainRateLimiter | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._browser_factory = browser_factory
        self._robots = robots or RobotsCache()
        self._limiter = limiter or DomainRateLimiter()
        self._clock = clock
        self._browser: Any = None
        self._engine: BrowserEngine | None = None
        self._playwright: Any = None

    async def __aenter__(self) -> PageFetcher:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ---------- public ----------

    async def fetch_page(self, url: str, options: FetchOptions | None = None) -> FetchResult:
        opts = options or FetchOptions()
        ua = opts.effective_user_agent
        started = self._clock()

        invalid = _invalid_url_reason(url)
        if invalid is not None:
            logger.warning("Invalid URL %r: %s", url, invalid)
            return FetchResult(url=url, robots_compliant=opts.checks_robots, error=f"Invalid URL: {invalid}")

        crawl_delay: float | None = None
        if opts.checks_robots:
            if not await self._robots.is_allowed(url, ua):
                logger.warning("robots.txt disallows %s; skipping", url)
                return FetchResult(
                    url=url,
                    robots_blocked=True,
                    robots_compliant=True,
                    error="Blocked by robots.txt",
                )
            crawl_delay = await self._robots.crawl_delay(url, ua)

        await self._limiter.wait(domain_of(url), crawl_delay)

        try:
            with fetch_error_guard():
                html, text, status, title = await asyncio.wait_for(
                    self._render(url, opts),
                    timeout=opts.timeout_ms / 1000 + _TIMEOUT_GRACE_S,
                )
        except FetchError as exc:
            logger.warning("Error fetching %s: %s", url, exc)
            return FetchResult(
                url=url,
                load_time_ms=self._elapsed_ms(started),
                robots_compliant=opts.checks_robots,
                crawl_delay_s=crawl_delay,
                error=str(exc) or type(exc).__name__,
            )

        return FetchResult(
            url=url,
            html=html,
            extracted_text=text.strip(),
            status_code=status,
            load_time_ms=self._elapsed_ms(started),
            robots_compliant=opts.checks_robots,
            crawl_delay_s=crawl_delay,
            title=title,
        )

    async def fetch_many(self, urls: Sequence[str], options: FetchOptions | None = None) -> list[FetchResult]:
        """Fetch sequentially, in the given order, to respect per-domain limits."""
        return [await self.fetch_page(u, options) for u in urls]

    async def self_test(self, url: str = "https://example.com") -> dict[str, Any]:
        started = self._clock()
        result = await self.fetch_page(url, FetchOptions(timeout_ms=10_000, wait_for_network_idle=False))
        return {
            "success": result.error is None and len(result.html) > 0,
            "error": result.error,
            "performance_ms": self._elapsed_ms(started),
        }

    def stats(self) -> dict[str, Any]:
        return {
            "request_counts": self._limiter.stats(),
            "browser_running": self._browser is not None,
            "engine": self._engine,
        }

    async def close(self) -> None:
        browser, self._browser, self._engine = self._browser, None, None
        if browser is not None:
            try:
                await browser.close()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Browser close failed: %s", exc)
        pw, self._playwright = self._playwright, None
        if pw is not None:
            try:
                await pw.stop()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Playwright stop failed: %s", exc)

    # ---------- internals ----------

    async def _ensure_browser(self, engine: BrowserEngine) -> Any:
        if self._browser is not None and self._engine == engine:
            return self._browser
        if self._browser is not None:
            await self.close()
        try:
            self._browser = await self._launch(engine)
        except Exception as exc:
            raise BrowserLaunchError(f"Failed to launch {engine} browser: {exc}") from exc
        self._engine = engine
        return self._browser

    async def _launch(self, engine: BrowserEngine) -> Any:
        if self._browser_factory is not None:
            return await self._browser_factory(engine)
        try:
            from playwright.async_api import async_playwright
        except ImportError as e:  # pragma: no cover
            raise ImportError("playwright not installed") from e

        if self._playwright is None:
            self._playwright = await async_playwright().start()
        launcher = getattr(self._playwright, engine)
        return await launcher.launch(headless=True, args=_CHROMIUM_ARGS if engine == "chromium" else [])

    async def _render(self, url: str, opts: FetchOptions) -> tuple[str, str, int, str]:
        browser = await self._ensure_browser(opts.engine)
        width, height = opts.viewport
        context = await browser.new_context(viewport={"width": width, "height": height}, user_agent=opts.effective_user_agent)
        page = None
        try:
            page = await context.new_page()
            page.set_default_timeout(opts.timeout_ms)
            response = await page.goto(
                url,
                wait_until="networkidle" if opts.wait_for_network_idle else "domcontentloaded",
                timeout=opts.timeout_ms,
            )
            status = response.status if response is not None else 0

            if opts.wait_for_selector:
                try:
                    await page.wait_for_selector(opts.wait_for_selector, timeout=_SELECTOR_WAIT_MS)
                except Exception:  # noqa: BLE001
                    logger.warning("Selector %s not found on %s", opts.wait_for_selector, url)

            if opts.wait_for_network_idle:
                await page.wait_for_load_state("networkidle")
            else:
                await page.wait_for_timeout(_SETTLE_MS)

            html = await page.content()
            text = str(await page.evaluate(VISIBLE_TEXT_JS) or "")
            if not text.strip():
                # frames and shadow roots can leave innerText empty
                text = extract_visible_text(str(html))
            title = await page.title()
            return str(html), text, int(status), str(title or "")
        finally:
            if page is not None:
                await page.close()
            await context.close()

    def _elapsed_ms(self, started: float) -> int:
        return max(0, int((self._clock() - started) * 1000))


__all__ = ["BrowserFactory", "PageFetcher"]

# rivalwatch/core/fetch/rate_limit.py
"""Per-domain politeness delay shared by every fetch in the process."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

MIN_REQUEST_INTERVAL_S = 5.0


class DomainRateLimiter:
    """
    Enforce a minimum interval between two requests to the same domain.

    The interval is max(crawl_delay, min_interval_s). Waiting is an async sleep,
    never a busy loop. Not locked: pages in a run are fetched sequentially.
    """

    def __init__(
        self,
        min_interval_s: float = MIN_REQUEST_INTERVAL_S,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.min_interval_s = min_interval_s
        self._clock = clock
        self._sleep = sleep
        self._last_request: dict[str, float] = {}
        self._request_counts: dict[str, int] = {}

    def interval_for(self, crawl_delay: float | None = None) -> float:
        return max(self.min_interval_s, crawl_delay or 0.0)

    async def wait(self, domain: str, crawl_delay: float | None = None) -> float:
        """Block until `domain` is eligible, then stamp it. Returns seconds waited."""
        interval = self.interval_for(crawl_delay)
        waited = 0.0
        last = self._last_request.get(domain)
        if last is not None:
            elapsed = self._clock() - last
            if elapsed < interval:
                waited = interval - elapsed
                logger.info("Rate limiting: waiting %.0fms for domain %s", waited * 1000, domain)
                await self._sleep(waited)

        self._last_request[domain] = self._clock()
        self._request_counts[domain] = self._request_counts.get(domain, 0) + 1
        return waited

    def stats(self) -> dict[str, int]:
        return dict(self._request_counts)

    def reset(self) -> None:
        self._last_request.clear()
        self._request_counts.clear()


__all__ = ["MIN_REQUEST_INTERVAL_S", "DomainRateLimiter"]

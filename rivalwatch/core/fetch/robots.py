# rivalwatch/core/fetch/robots.py
"""
robots.txt helper using urllib.robotparser with pluggable fetch and a per-domain TTL cache.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import urljoin, urlparse
from urllib.robotparser import RobotFileParser

import requests

from .errors import RobotsUnavailable

logger = logging.getLogger(__name__)

# Fetch signature: (url) -> (status_code, body_text)
FetchFn = Callable[[str], tuple[int, str]]

ROBOTS_TTL_S = 3600.0


def robots_url_for(url: str) -> str:
    parsed = urlparse(url)
    return urljoin(f"{parsed.scheme}://{parsed.netloc}", "/robots.txt")


def domain_of(url: str) -> str:
    try:
        return urlparse(url).hostname or "unknown"
    except ValueError:
        return "unknown"


def http_fetch(user_agent: str, timeout_s: float = 10.0) -> FetchFn:
    """Build a blocking robots.txt fetcher backed by `requests`."""

    def _fetch(robots_url: str) -> tuple[int, str]:
        try:
            resp = requests.get(robots_url, headers={"User-Agent": user_agent}, timeout=timeout_s)
        except requests.RequestException as e:
            raise RobotsUnavailable(str(e)) from e
        return resp.status_code, resp.content.decode("utf-8", errors="ignore")

    return _fetch


@dataclass
class _Entry:
    parser: RobotFileParser | None  # None ⇒ permissive (robots unavailable/absent)
    fetched_at: float


class RobotsCache:
    """
    Per-domain robots.txt cache.

    - Entries live for `ttl_s` seconds (default one hour).
    - A robots.txt that is unreachable, empty or answered with status >= 400
      is cached as "allow everything".
    - The blocking fetch runs in a worker thread so callers can await it.
    """

    def __init__(
        self,
        fetch: FetchFn | None = None,
        *,
        user_agent: str = "rivalwatch",
        ttl_s: float = ROBOTS_TTL_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetch = fetch or http_fetch(user_agent)
        self._ttl_s = ttl_s
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    async def is_allowed(self, url: str, user_agent: str) -> bool:
        """Return True if `user_agent` may fetch `url`. Unknown robots ⇒ True."""
        parser = await self._parser_for(url)
        if parser is None:
            return True
        try:
            return parser.can_fetch(user_agent, url)
        except Exception:  # noqa: BLE001
            return True

    async def crawl_delay(self, url: str, user_agent: str) -> float | None:
        """Crawl-delay (seconds) declared for `user_agent`, or None."""
        parser = await self._parser_for(url)
        if parser is None:
            return None
        delay = parser.crawl_delay(user_agent)
        return float(delay) if delay is not None else None

    def invalidate(self, domain: str | None = None) -> None:
        if domain is None:
            self._entries.clear()
        else:
            self._entries.pop(domain, None)

    async def _parser_for(self, url: str) -> RobotFileParser | None:
        domain = domain_of(url)
        now = self._clock()
        entry = self._entries.get(domain)
        if entry is not None and now - entry.fetched_at < self._ttl_s:
            return entry.parser

        parser: RobotFileParser | None = None
        try:
            robots_url = robots_url_for(url)
            status, text = await asyncio.to_thread(self._fetch, robots_url)
        except Exception as e:  # noqa: BLE001
            logger.info("robots.txt unavailable for %s (%s); treating as permissive", domain, e)
        else:
            if status >= 400 or not text.strip():
                logger.info("robots.txt absent for %s (status=%s); treating as permissive", domain, status)
            else:
                parser = RobotFileParser(robots_url)
                parser.parse(text.splitlines())

        self._entries[domain] = _Entry(parser=parser, fetched_at=now)
        return parser


__all__ = ["FetchFn", "ROBOTS_TTL_S", "RobotsCache", "domain_of", "http_fetch", "robots_url_for"]

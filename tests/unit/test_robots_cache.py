# tests/unit/test_robots_cache.py

import asyncio

import pytest

from rivalwatch.core.fetch.errors import RobotsUnavailable
from rivalwatch.core.fetch.robots import RobotsCache, domain_of, robots_url_for
from tests.utils import DISALLOW_PRIVATE_ROBOTS, ManualClock, RobotsTransport

UA = "rivalwatch-tests"


def test_robots_url_and_domain_helpers():
    assert robots_url_for("https://acme.io/pricing?x=1") == "https://acme.io/robots.txt"
    assert domain_of("https://Acme.io:8443/a") == "acme.io"
    assert domain_of("not a url") == "unknown"


def test_disallowed_path_is_blocked_and_others_allowed():
    transport = RobotsTransport(DISALLOW_PRIVATE_ROBOTS)
    cache = RobotsCache(transport)

    async def _go():
        return (
            await cache.is_allowed("https://acme.io/private/plans", UA),
            await cache.is_allowed("https://acme.io/pricing", UA),
        )

    assert asyncio.run(_go()) == (False, True)
    # both lookups share one cached robots.txt
    assert transport.requested == ["https://acme.io/robots.txt"]


@pytest.mark.parametrize(
    "transport",
    [
        RobotsTransport("User-agent: *\nDisallow: /\n", status=404),
        RobotsTransport("User-agent: *\nDisallow: /\n", status=500),
        RobotsTransport("   "),
        RobotsTransport(error=RobotsUnavailable("connection refused")),
        RobotsTransport(error=OSError("dns failure")),
    ],
)
def test_unavailable_robots_is_permissive(transport):
    cache = RobotsCache(transport)
    assert asyncio.run(cache.is_allowed("https://acme.io/anything", UA)) is True
    assert asyncio.run(cache.crawl_delay("https://acme.io/anything", UA)) is None


def test_crawl_delay_is_read_for_agent():
    cache = RobotsCache(RobotsTransport("User-agent: *\nCrawl-delay: 7\nAllow: /\n"))
    assert asyncio.run(cache.crawl_delay("https://acme.io/", UA)) == 7.0


def test_entries_expire_after_ttl():
    clock = ManualClock()
    transport = RobotsTransport(DISALLOW_PRIVATE_ROBOTS)
    cache = RobotsCache(transport, ttl_s=60, clock=clock)

    asyncio.run(cache.is_allowed("https://acme.io/a", UA))
    clock.advance(59)
    asyncio.run(cache.is_allowed("https://acme.io/b", UA))
    assert len(transport.requested) == 1

    clock.advance(2)
    asyncio.run(cache.is_allowed("https://acme.io/c", UA))
    assert len(transport.requested) == 2


def test_cache_is_per_domain_and_invalidatable():
    transport = RobotsTransport(DISALLOW_PRIVATE_ROBOTS)
    cache = RobotsCache(transport)

    asyncio.run(cache.is_allowed("https://acme.io/a", UA))
    asyncio.run(cache.is_allowed("https://rival.dev/a", UA))
    assert transport.requested == ["https://acme.io/robots.txt", "https://rival.dev/robots.txt"]

    cache.invalidate("acme.io")
    asyncio.run(cache.is_allowed("https://acme.io/a", UA))
    assert transport.requested[-1] == "https://acme.io/robots.txt"
    assert len(transport.requested) == 3


def test_malformed_url_is_permissive_without_a_request():
    transport = RobotsTransport(DISALLOW_PRIVATE_ROBOTS)
    cache = RobotsCache(transport)
    assert asyncio.run(cache.is_allowed("http://[::1/pricing", UA)) is True
    assert transport.requested == []

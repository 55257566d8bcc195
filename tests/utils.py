# tests/utils.py
"""
Single source of truth for test data, factories and fakes.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

import time
from typing import Any

from rivalwatch.core.normalize.fingerprint import normalize
from rivalwatch.schemas.models import ExtractedSignals, FeatureEntry, PageFingerprint, PricingEntry
from rivalwatch.tools.inference.errors import InferenceTransportError

# -----------------------------
# Canned page content
# -----------------------------

PRICING_HTML_V1 = """<html><head><title>Acme Pricing</title></head><body>
<h1>Simple, transparent pricing</h1>
<h3>Starter</h3><p>$29/month</p>
<h3>Professional</h3><p>$79/month</p>
<h3>Enterprise</h3><p>Contact sales</p>
</body></html>"""

PRICING_TEXT_V1 = """Simple, transparent pricing
Starter
$29/month
Professional
$79/month
Enterprise
Contact sales"""

PRICING_HTML_V2 = PRICING_HTML_V1.replace("$29", "$39").replace("$79", "$99")
PRICING_TEXT_V2 = PRICING_TEXT_V1.replace("$29", "$39").replace("$79", "$99")

FEATURES_TEXT = """Powerful Features
- Real-time analytics dashboard
- Team collaboration tools
1. Single sign-on for every plan
Security: SOC 2 Type II certified"""

NOISY_TEXT = (
    "Posted 03/14/2024 at 10:30 AM   1,234 views\n"
    "Last updated: 5 days ago. Accept all cookies  Privacy Policy\n"
    "Loading... Our platform helps teams ship faster. Published 2024-03-14"
)

DEFAULT_USER_AGENT = "rivalwatch-tests"
ALLOW_ALL_ROBOTS = "User-agent: *\nAllow: /\n"
DISALLOW_PRIVATE_ROBOTS = "User-agent: *\nDisallow: /private\n"


# -----------------------------
# Fingerprint factories
# -----------------------------


def make_fingerprint(
    *,
    content_hash: str = "a" * 64,
    cleaned_text: str = "Acme helps teams ship faster",
    prices: tuple[str, ...] = (),
    features: tuple[str, ...] = (),
    headlines: tuple[str, ...] = (),
    word_count: int | None = None,
) -> PageFingerprint:
    """Build a fingerprint directly, bypassing extraction, for classifier-level tests."""
    return PageFingerprint(
        content_hash=content_hash,
        cleaned_text=cleaned_text,
        extracted=ExtractedSignals(
            pricing=tuple(PricingEntry(price=p, billing_period="month") for p in prices),
            features=tuple(FeatureEntry(title=f, description=f) for f in features),
            headlines=headlines,
            word_count=len(cleaned_text.split()) if word_count is None else word_count,
            language="en",
        ),
    )


def pricing_pair() -> tuple[PageFingerprint, PageFingerprint]:
    """Old/new fingerprints of the canned pricing page ($29/$79 -> $39/$99)."""
    return normalize(PRICING_HTML_V1, PRICING_TEXT_V1), normalize(PRICING_HTML_V2, PRICING_TEXT_V2)


# -----------------------------
# Inference fakes
# -----------------------------

NO_CHANGE_PAYLOAD: dict[str, Any] = {
    "hasSignificantChange": False,
    "changeType": "other",
    "changeSummary": "Nothing relevant",
    "details": {"impactLevel": "low"},
    "confidence": "high",
}

PRICING_PAYLOAD: dict[str, Any] = {
    "hasSignificantChange": True,
    "changeType": "pricing",
    "changeSummary": "Starter raised from $29 to $39",
    "details": {"oldValue": "$29/month", "newValue": "$39/month", "impactLevel": "high"},
    "confidence": "high",
    "competitiveAnalysis": "Room to undercut on entry tier",
}


class SpyBackend:
    """Records prompts and returns a canned payload."""

    def __init__(self, payload: Any = None, *, name: str = "spy") -> None:
        self.name = name
        self.payload = PRICING_PAYLOAD if payload is None else payload
        self.prompts: list[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def analyze(self, prompt: str) -> Any:
        self.prompts.append(prompt)
        return self.payload


class FailingBackend:
    """Raises a transport error on every call."""

    name = "failing"

    def __init__(self) -> None:
        self.calls = 0

    async def analyze(self, prompt: str) -> dict[str, Any]:
        self.calls += 1
        raise InferenceTransportError("connection reset by peer", backend=self.name)


class ExplodingBackend:
    """Raises an arbitrary, untyped exception on every call."""

    name = "exploding"

    async def analyze(self, prompt: str) -> dict[str, Any]:
        raise ZeroDivisionError("boom")


class NoSleep:
    """Async sleep stand-in that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# -----------------------------
# Browser fakes (Playwright-shaped)
# -----------------------------


class FakeResponse:
    def __init__(self, status: int) -> None:
        self.status = status


class FakePage:
    def __init__(self, browser: FakeBrowser) -> None:
        self._browser = browser
        self.closed = False
        self.default_timeout: float | None = None

    def set_default_timeout(self, timeout: float) -> None:
        self.default_timeout = timeout

    async def goto(self, url: str, *, wait_until: str, timeout: float) -> FakeResponse:
        self._browser.navigations.append((url, time.monotonic()))
        self._browser.wait_until.append(wait_until)
        if self._browser.goto_error is not None:
            raise self._browser.goto_error
        return FakeResponse(self._browser.status)

    async def wait_for_selector(self, selector: str, *, timeout: float) -> None:
        if selector not in self._browser.selectors:
            raise TimeoutError(f"selector {selector} not found")

    async def wait_for_load_state(self, state: str) -> None:
        return None

    async def wait_for_timeout(self, ms: float) -> None:
        return None

    async def content(self) -> str:
        return self._browser.html

    async def evaluate(self, script: str) -> str:
        return self._browser.text

    async def title(self) -> str:
        return self._browser.title

    async def close(self) -> None:
        self.closed = True


class FakeContext:
    def __init__(self, browser: FakeBrowser, **kwargs: Any) -> None:
        self._browser = browser
        self.kwargs = kwargs
        self.closed = False

    async def new_page(self) -> FakePage:
        page = FakePage(self._browser)
        self._browser.pages.append(page)
        return page

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    """Minimal stand-in for a Playwright Browser; counts navigations."""

    def __init__(
        self,
        *,
        html: str = PRICING_HTML_V1,
        text: str = PRICING_TEXT_V1,
        title: str = "Acme Pricing",
        status: int = 200,
        goto_error: BaseException | None = None,
        selectors: tuple[str, ...] = (),
    ) -> None:
        self.html = html
        self.text = text
        self.title = title
        self.status = status
        self.goto_error = goto_error
        self.selectors = selectors
        self.navigations: list[tuple[str, float]] = []
        self.wait_until: list[str] = []
        self.contexts: list[FakeContext] = []
        self.pages: list[FakePage] = []
        self.launches = 0
        self.closed = False

    async def new_context(self, **kwargs: Any) -> FakeContext:
        ctx = FakeContext(self, **kwargs)
        self.contexts.append(ctx)
        return ctx

    async def close(self) -> None:
        self.closed = True

    def factory(self):
        async def _launch(engine: str) -> FakeBrowser:
            self.launches += 1
            return self

        return _launch


# -----------------------------
# robots.txt transport fakes
# -----------------------------


class RobotsTransport:
    """Blocking FetchFn stand-in: (url) -> (status, body); counts calls."""

    def __init__(self, body: str = ALLOW_ALL_ROBOTS, status: int = 200, error: Exception | None = None) -> None:
        self.body = body
        self.status = status
        self.error = error
        self.requested: list[str] = []

    def __call__(self, url: str) -> tuple[int, str]:
        self.requested.append(url)
        if self.error is not None:
            raise self.error
        return self.status, self.body


class ManualClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

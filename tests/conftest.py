# tests/conftest.py
from __future__ import annotations

import os
import random

import pytest

from tests.utils import (
    PRICING_HTML_V1,
    PRICING_TEXT_V1,
    FailingBackend,
    FakeBrowser,
    ManualClock,
    NoSleep,
    RobotsTransport,
    SpyBackend,
    make_fingerprint,
)

_SECRET_ENV = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "LLM_PROVIDER",
    "LLM_MODEL",
    "TEST_USE_REAL_LLM",
)


# -------- Global deterministic seed --------
@pytest.fixture(autouse=True, scope="session")
def _seed_session():
    random.seed(1337)
    os.environ.setdefault("PYTHONHASHSEED", "0")
    yield


# -------- Keep real credentials out of every test --------
@pytest.fixture(autouse=True)
def _no_provider_env(monkeypatch):
    for key in _SECRET_ENV:
        monkeypatch.delenv(key, raising=False)
    yield


# -------- Fingerprint fixtures --------
@pytest.fixture
def fingerprint_factory():
    """
    Factory for hand-built fingerprints.

    Usage:
        fp = fingerprint_factory(content_hash="b" * 64, prices=("29",))
    """

    def _factory(**overrides):
        return make_fingerprint(**overrides)

    return _factory


# -------- Inference fixtures --------
@pytest.fixture
def spy_backend():
    return SpyBackend()


@pytest.fixture
def failing_backend():
    return FailingBackend()


@pytest.fixture
def no_sleep():
    return NoSleep()


# -------- Fetcher fixtures --------
@pytest.fixture
def fake_browser():
    """
    Factory for Playwright-shaped fake browsers.

    Usage:
        browser = fake_browser(status=404)
        fetcher = PageFetcher(browser_factory=browser.factory(), ...)
    """

    def _factory(**kwargs):
        kwargs.setdefault("html", PRICING_HTML_V1)
        kwargs.setdefault("text", PRICING_TEXT_V1)
        return FakeBrowser(**kwargs)

    return _factory


@pytest.fixture
def robots_transport():
    """Factory for blocking robots.txt transports: robots_transport(body, status=200, error=None)."""

    def _factory(*args, **kwargs):
        return RobotsTransport(*args, **kwargs)

    return _factory


@pytest.fixture
def manual_clock():
    return ManualClock()


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks integration tests")

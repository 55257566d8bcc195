# tests/unit/test_mock_backend.py
"""
MockBackend keyword rules. Priority order is the behavior under test.
"""

import asyncio

import pytest

from rivalwatch.tools.inference.mock_provider import LENGTH_THRESHOLD, MockBackend, mock_analysis
from rivalwatch.tools.inference.provider_base import InferenceBackend
from tests.utils import NoSleep


def test_is_an_inference_backend():
    assert isinstance(MockBackend(), InferenceBackend)


def test_two_distinct_prices_is_high_impact_pricing():
    out = mock_analysis("Pricing: Starter $29/month -> Starter $39/month")
    assert out["hasSignificantChange"] is True
    assert out["changeType"] == "pricing"
    assert out["details"] == {"oldValue": "$29", "newValue": "$39", "impactLevel": "high"}
    assert out["confidence"] == "high"


def test_single_price_is_not_significant():
    out = mock_analysis("Pricing: Starter $29/month, unchanged $29/month")
    assert out["hasSignificantChange"] is False
    assert out["changeType"] == "pricing"
    assert out["details"]["impactLevel"] == "medium"


def test_pricing_wins_over_everything_else():
    prompt = "Announcing new features for enterprise and small teams. Plan $10 -> $20. Last updated January"
    assert mock_analysis(prompt)["changeType"] == "pricing"


@pytest.mark.parametrize(
    "prompt",
    [
        "About us. Last updated: January 22",
        "Serving 1,000 teams, now 1,050 teams",
        "Over 500 happy customers worldwide",
    ],
)
def test_minor_updates_are_not_significant(prompt):
    out = mock_analysis(prompt)
    assert out["hasSignificantChange"] is False
    assert out["changeType"] == "other"
    assert out["details"]["impactLevel"] == "low"


def test_customers_with_feature_talk_is_not_minor():
    out = mock_analysis("Our customers love the new feature")
    assert out["changeType"] == "features"


@pytest.mark.parametrize(
    "prompt",
    [
        "Announcing Acme 2.0",
        "This is a major platform update for everyone",
        "Join our product launch event",
    ],
)
def test_product_announcements(prompt):
    out = mock_analysis(prompt)
    assert (out["changeType"], out["details"]["impactLevel"]) == ("product", "high")


def test_product_wins_over_features():
    assert mock_analysis("Announcing 2.0 with new features")["changeType"] == "product"


@pytest.mark.parametrize(
    "prompt",
    [
        "Built for small teams, now for the enterprise",
        "For teams of 2-10 people. For teams of 100+ people",
    ],
)
def test_messaging_shift(prompt):
    out = mock_analysis(prompt)
    assert out["changeType"] == "messaging"
    assert out["hasSignificantChange"] is True


def test_feature_announcement():
    out = mock_analysis("Introducing a capability for exports")
    assert out["changeType"] == "features"
    assert out["details"]["impactLevel"] == "medium"


def test_length_threshold():
    short = mock_analysis("x" * LENGTH_THRESHOLD)
    long = mock_analysis("x" * (LENGTH_THRESHOLD + 1))
    assert short["hasSignificantChange"] is False and short["details"]["impactLevel"] == "low"
    assert long["hasSignificantChange"] is True and long["details"]["impactLevel"] == "medium"
    assert long["confidence"] == short["confidence"] == "low"


def test_deterministic():
    prompt = "Announcing Acme 2.0"
    assert mock_analysis(prompt) == mock_analysis(prompt)


def test_delay_is_simulated_with_injected_sleep():
    sleep = NoSleep()
    backend = MockBackend(0.5, sleep=sleep)
    out = asyncio.run(backend.analyze("Announcing Acme 2.0"))
    assert out["changeType"] == "product"
    assert sleep.delays == [0.5]
    assert backend.calls == 1


def test_no_delay_by_default():
    sleep = NoSleep()
    asyncio.run(MockBackend(sleep=sleep).analyze("hello"))
    assert sleep.delays == []

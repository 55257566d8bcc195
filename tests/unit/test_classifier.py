# tests/unit/test_classifier.py
"""
ChangeClassifier: hash short-circuit, payload coercion, fallback on every
inference failure, batch mode.
"""

import asyncio
import logging

import pytest

from rivalwatch.core.detect.classifier import (
    NO_CHANGE,
    ChangeClassifier,
    ClassifierConfig,
    parse_classification,
)
from rivalwatch.schemas.models import ClassificationRequest
from rivalwatch.tools.inference.errors import InferenceParseError
from tests.utils import (
    NO_CHANGE_PAYLOAD,
    PRICING_PAYLOAD,
    ExplodingBackend,
    FailingBackend,
    NoSleep,
    SpyBackend,
    make_fingerprint,
    pricing_pair,
)


def _classify(classifier, old, new, page_type="pricing"):
    return asyncio.run(classifier.classify_change("Acme", page_type, old, new))


# ---------- short-circuit ----------


def test_identical_hash_never_calls_backend(spy_backend):
    fp = make_fingerprint()
    result = _classify(ChangeClassifier(spy_backend), fp, fp)
    assert result == NO_CHANGE
    assert result.has_significant_change is False
    assert result.confidence == "high" and result.impact_level == "low"
    assert spy_backend.calls == 0


def test_identical_hash_short_circuits_even_if_text_differs(spy_backend):
    old = make_fingerprint(cleaned_text="one")
    new = make_fingerprint(cleaned_text="completely different")
    assert _classify(ChangeClassifier(spy_backend), old, new) == NO_CHANGE
    assert spy_backend.calls == 0


# ---------- inference path ----------


def test_backend_payload_becomes_result(spy_backend):
    old, new = pricing_pair()
    result = _classify(ChangeClassifier(spy_backend), old, new)

    assert spy_backend.calls == 1
    assert "COMPETITOR: Acme" in spy_backend.prompts[0]
    assert result.has_significant_change is True
    assert result.change_type == "pricing"
    assert result.details.old_value == "$29/month"
    assert result.impact_level == "high"
    assert result.competitive_analysis == "Room to undercut on entry tier"
    assert result.backend == "spy"
    assert result.raw_response is None


def test_test_mode_keeps_raw_payload():
    old, new = pricing_pair()
    classifier = ChangeClassifier(SpyBackend(NO_CHANGE_PAYLOAD), ClassifierConfig(test_mode=True))
    result = _classify(classifier, old, new)
    assert result.raw_response == NO_CHANGE_PAYLOAD
    assert result.has_significant_change is False


def test_default_backend_is_mock():
    assert ChangeClassifier().backend.name == "mock"


# ---------- coercion ----------


@pytest.mark.parametrize(
    "flag, expected",
    [(True, True), ("true", True), ("TRUE ", True), (False, False), ("yes", False), (1, False), (None, False)],
)
def test_significance_flag_coercion(flag, expected):
    assert parse_classification({"hasSignificantChange": flag}).has_significant_change is expected


def test_invalid_labels_are_coerced():
    result = parse_classification(
        {
            "hasSignificantChange": True,
            "changeType": "rebrand",
            "changeSummary": "   ",
            "details": {"impactLevel": "critical"},
            "confidence": 0.9,
        }
    )
    assert result.change_type == "other"
    assert result.impact_level == "medium"
    assert result.confidence == "medium"
    assert result.change_summary == "Changes detected"


def test_labels_are_case_insensitive():
    result = parse_classification({"changeType": "Pricing", "details": {"impactLevel": "HIGH"}, "confidence": "Low"})
    assert (result.change_type, result.impact_level, result.confidence) == ("pricing", "high", "low")


def test_non_dict_details_are_ignored():
    assert parse_classification({"details": "high"}).impact_level == "medium"


def test_non_object_payload_raises_parse_error():
    with pytest.raises(InferenceParseError):
        parse_classification(["pricing"], backend="spy")


# ---------- fallback ----------


def test_transport_failure_falls_back_with_low_confidence(failing_backend, caplog):
    caplog.set_level(logging.WARNING, logger="rivalwatch")
    old, new = pricing_pair()

    result = _classify(ChangeClassifier(failing_backend), old, new)

    assert failing_backend.calls == 1
    assert result.has_significant_change is True
    assert result.confidence == "low"
    assert result.backend == "fallback"
    assert result.change_type == "pricing"
    assert "connection reset by peer" in result.error
    assert "Using rule-based fallback" in caplog.text


def test_unexpected_exception_falls_back():
    old, new = pricing_pair()
    result = _classify(ChangeClassifier(ExplodingBackend()), old, new)
    assert result.confidence == "low"
    assert result.error == "ZeroDivisionError: boom"


def test_non_dict_payload_falls_back():
    old, new = pricing_pair()
    result = _classify(ChangeClassifier(SpyBackend("not json at all")), old, new)
    assert result.backend == "fallback"
    assert result.confidence == "low"


def test_timeout_falls_back():
    class _Hang(SpyBackend):
        async def analyze(self, prompt):
            await asyncio.sleep(1)

    old, new = pricing_pair()
    classifier = ChangeClassifier(_Hang(), ClassifierConfig(inference_timeout_s=0.01))
    result = _classify(classifier, old, new)
    assert result.backend == "fallback"
    assert result.error.startswith("TimeoutError")


def test_api_key_is_redacted_from_fallback_error(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-secret-123")

    class _Leaky(SpyBackend):
        async def analyze(self, prompt):
            raise RuntimeError("401 for key sk-secret-123")

    old, new = pricing_pair()
    result = _classify(ChangeClassifier(_Leaky()), old, new)
    assert "sk-secret-123" not in result.error
    assert "[REDACTED]" in result.error


# ---------- batch ----------


def test_batch_preserves_order_and_sleeps_between_items():
    old, new = pricing_pair()
    same = make_fingerprint()
    sleep = NoSleep()
    classifier = ChangeClassifier(SpyBackend(PRICING_PAYLOAD), ClassifierConfig(batch_delay_s=1.5), sleep=sleep)

    items = [
        ClassificationRequest(competitor_name="Acme", page_type="pricing", old=old, new=new),
        ClassificationRequest(competitor_name="Rival", page_type="blog", old=same, new=same),
        ClassificationRequest(competitor_name="Other", page_type="pricing", old=old, new=new),
    ]
    results = asyncio.run(classifier.classify_batch(items))

    assert [r.has_significant_change for r in results] == [True, False, True]
    assert sleep.delays == [1.5, 1.5]


def test_batch_with_zero_delay_never_sleeps():
    sleep = NoSleep()
    fp = make_fingerprint()
    classifier = ChangeClassifier(SpyBackend(), ClassifierConfig(batch_delay_s=0), sleep=sleep)
    item = ClassificationRequest(competitor_name="Acme", page_type="other", old=fp, new=fp)
    asyncio.run(classifier.classify_batch([item, item]))
    assert sleep.delays == []


def test_batch_isolates_a_failing_item(monkeypatch):
    old, new = pricing_pair()
    classifier = ChangeClassifier(SpyBackend(), ClassifierConfig(batch_delay_s=0))
    original = classifier.classify_change

    async def _flaky(competitor_name, page_type, o, n):
        if competitor_name == "Broken":
            raise ValueError("bad item")
        return await original(competitor_name, page_type, o, n)

    monkeypatch.setattr(classifier, "classify_change", _flaky)
    items = [
        ClassificationRequest(competitor_name="Broken", page_type="pricing", old=old, new=new),
        ClassificationRequest(competitor_name="Acme", page_type="pricing", old=old, new=new),
    ]
    first, second = asyncio.run(classifier.classify_batch(items))

    assert first.change_summary == "Analysis failed"
    assert first.has_significant_change is False
    assert first.error == "ValueError: bad item"
    assert second.change_type == "pricing"

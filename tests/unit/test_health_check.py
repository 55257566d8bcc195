# tests/unit/test_health_check.py

import asyncio

from rivalwatch.tools.inference.health import HEALTH_CHECK_PROMPT, check_backend
from rivalwatch.tools.inference.mock_provider import MockBackend
from tests.utils import FailingBackend, ManualClock, SpyBackend


def test_mock_backend_is_healthy():
    report = asyncio.run(check_backend(MockBackend()))
    assert report.success is True
    assert report.backend == "mock"
    assert report.error is None


def test_health_prompt_is_sent_verbatim():
    spy = SpyBackend({"hasSignificantChange": True})
    asyncio.run(check_backend(spy))
    assert spy.prompts == [HEALTH_CHECK_PROMPT]


def test_failure_is_reported_not_raised():
    report = asyncio.run(check_backend(FailingBackend()))
    assert report.success is False
    assert "connection reset by peer" in report.error


def test_payload_without_flag_is_invalid():
    report = asyncio.run(check_backend(SpyBackend({"changeType": "pricing"})))
    assert (report.success, report.error) == (False, "Invalid response structure")


def test_response_time_is_measured_with_clock():
    clock = ManualClock()

    class _Slow(SpyBackend):
        async def analyze(self, prompt):
            clock.advance(0.25)
            return {"hasSignificantChange": False}

    report = asyncio.run(check_backend(_Slow(), clock=clock))
    assert report.response_time_ms == 250

# rivalwatch/evaluation/harness.py
"""
Evaluation harness for the Normalizer + Differ/Classifier pipeline.

Purpose
-------
Run fixed, hand-labeled before/after scenarios through `normalize` and
`ChangeClassifier.classify_change`, score each verdict against its label and
aggregate the scores into a report.

Design
------
- Fixtures bypass the fetcher: HTML becomes text with a simplified regex
  conversion (no browser).
- An unknown scenario id is a caller error and raises ScenarioNotFoundError.
  Anything that fails *inside* a scenario becomes a failed TestResult with
  accuracy 0 so the remaining scenarios still run.
- Scoring: 40 points for the change flag; when a change was expected, 30 more
  for the change type and 30 for the impact level. Pass at >= 0.8.

Public API
----------
def html_to_text(html) -> str
def score(actual, expected) -> tuple[float, list[str]]
class EvaluationHarness
def compare_runs(baseline, candidate) -> ComparisonReport
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from rivalwatch.core.detect.classifier import ChangeClassifier, ClassifierConfig
from rivalwatch.core.normalize.fingerprint import normalize
from rivalwatch.inputs.settings import Settings
from rivalwatch.schemas.models import (
    ChangeDetails,
    ClassificationResult,
    ComparisonReport,
    ExpectedChange,
    ScenarioComparison,
    TestReport,
    TestResult,
    TestScenario,
)
from rivalwatch.tools.inference.factory import create_backend
from rivalwatch.tools.inference.mock_provider import MockBackend

from .errors import ScenarioExecutionError, ScenarioNotFoundError
from .scenarios import DEFAULT_SCENARIOS

logger = logging.getLogger(__name__)

PASS_THRESHOLD = 0.8
FLAG_POINTS = 40
TYPE_POINTS = 30
IMPACT_POINTS = 30

_SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def html_to_text(html: str) -> str:
    """Drop script/style blocks, replace every tag with a space, collapse whitespace."""
    out = _SCRIPT_RE.sub("", html or "")
    out = _STYLE_RE.sub("", out)
    out = _TAG_RE.sub(" ", out)
    return _WS_RE.sub(" ", out).strip()


def score(actual: ClassificationResult, expected: ExpectedChange) -> tuple[float, list[str]]:
    """Return (accuracy in [0, 1], mismatch explanations)."""
    points, max_points = 0, FLAG_POINTS
    errors: list[str] = []

    if actual.has_significant_change == expected.has_significant_change:
        points += FLAG_POINTS
    else:
        errors.append(
            f"Expected hasSignificantChange: {str(expected.has_significant_change).lower()}, "
            f"got: {str(actual.has_significant_change).lower()}"
        )

    if expected.has_significant_change:
        max_points += TYPE_POINTS + IMPACT_POINTS
        if actual.change_type == expected.change_type:
            points += TYPE_POINTS
        else:
            errors.append(f"Expected changeType: {expected.change_type}, got: {actual.change_type}")
        if actual.impact_level == expected.impact_level:
            points += IMPACT_POINTS
        else:
            errors.append(f"Expected impactLevel: {expected.impact_level}, got: {actual.impact_level}")

    return points / max_points, errors


class EvaluationHarness:
    def __init__(
        self,
        classifier: ChangeClassifier | None = None,
        scenarios: Iterable[TestScenario] | None = None,
    ) -> None:
        self.classifier = classifier or ChangeClassifier(MockBackend(), ClassifierConfig(test_mode=True))
        self._scenarios: dict[str, TestScenario] = {}
        for s in DEFAULT_SCENARIOS if scenarios is None else scenarios:
            self.add_scenario(s)

    @classmethod
    def from_settings(cls, settings: Settings) -> EvaluationHarness:
        """Mock backend unless `use_real_llm` is set, in which case the configured provider is used."""
        backend = create_backend(settings) if settings.use_real_llm else MockBackend()
        config = ClassifierConfig(
            test_mode=True,
            batch_delay_s=settings.batch_delay_s,
            inference_timeout_s=settings.inference_timeout_s,
        )
        return cls(ChangeClassifier(backend, config))

    # ---------- scenario registry ----------

    def add_scenario(self, scenario: TestScenario) -> None:
        """Register or replace a scenario by id."""
        self._scenarios[scenario.id] = scenario

    def get_scenario(self, scenario_id: str) -> TestScenario:
        try:
            return self._scenarios[scenario_id]
        except KeyError:
            raise ScenarioNotFoundError(scenario_id) from None

    def list_scenarios(self) -> list[TestScenario]:
        return list(self._scenarios.values())

    # ---------- execution ----------

    async def _execute(self, scenario: TestScenario) -> ClassificationResult:
        try:
            old = normalize(scenario.before_html, html_to_text(scenario.before_html))
            new = normalize(scenario.after_html, html_to_text(scenario.after_html))
            return await self.classifier.classify_change(scenario.competitor_name, scenario.page_type, old, new)
        except Exception as e:  # noqa: BLE001
            raise ScenarioExecutionError(scenario.id, f"{type(e).__name__}: {e}") from e

    async def run_scenario(self, scenario_id: str) -> TestResult:
        scenario = self.get_scenario(scenario_id)
        backend = getattr(self.classifier.backend, "name", None)

        try:
            actual = await self._execute(scenario)
        except ScenarioExecutionError as e:
            logger.error("Scenario %s failed: %s", scenario_id, e)
            return TestResult(
                scenario_id=scenario_id,
                passed=False,
                accuracy=0.0,
                actual=ClassificationResult(
                    has_significant_change=True,
                    change_type="other",
                    change_summary="Test execution failed",
                    details=ChangeDetails(impact_level="medium"),
                    confidence="low",
                    error=str(e),
                ),
                expected=scenario.expected,
                errors=(str(e),),
                backend=backend,
            )

        accuracy, errors = score(actual, scenario.expected)
        passed = accuracy >= PASS_THRESHOLD
        logger.info("Scenario %s: %s (accuracy %.1f%%)", scenario_id, "PASSED" if passed else "FAILED", accuracy * 100)
        return TestResult(
            scenario_id=scenario_id,
            passed=passed,
            accuracy=accuracy,
            actual=actual,
            expected=scenario.expected,
            errors=tuple(errors),
            backend=actual.backend or backend,
        )

    async def run_all_scenarios(self, scenario_ids: Sequence[str] | None = None) -> list[TestResult]:
        """Run in registration order (or the given order). Unknown ids raise before anything runs."""
        ids = list(self._scenarios) if scenario_ids is None else list(scenario_ids)
        for sid in ids:
            self.get_scenario(sid)
        return [await self.run_scenario(sid) for sid in ids]

    # ---------- reporting ----------

    @staticmethod
    def generate_report(results: Sequence[TestResult]) -> TestReport:
        total = len(results)
        passed = sum(1 for r in results if r.passed)
        average = sum(r.accuracy for r in results) / total if total else 0.0
        backends = sorted({r.backend for r in results if r.backend})
        return TestReport(
            total=total,
            passed=passed,
            failed=total - passed,
            average_accuracy=round(average, 2),
            backends=tuple(backends),
            details=tuple(results),
        )


def compare_runs(baseline: Sequence[TestResult], candidate: Sequence[TestResult]) -> ComparisonReport:
    """
    Compare two runs of the same scenarios (e.g. mock vs a real provider).

    Results are paired by scenario id, in baseline order; unpaired results are
    ignored. accuracy_difference = mean(candidate) - mean(baseline).
    """
    by_id = {r.scenario_id: r for r in candidate}
    pairs = [(b, by_id[b.scenario_id]) for b in baseline if b.scenario_id in by_id]
    if not pairs:
        return ComparisonReport(accuracy_difference=0.0, agreement_rate=0.0)

    details = tuple(
        ScenarioComparison(
            scenario_id=b.scenario_id,
            baseline_passed=b.passed,
            candidate_passed=c.passed,
            accuracy_diff=c.accuracy - b.accuracy,
            agreement=b.passed == c.passed,
        )
        for b, c in pairs
    )
    n = len(pairs)
    return ComparisonReport(
        accuracy_difference=sum(c.accuracy for _, c in pairs) / n - sum(b.accuracy for b, _ in pairs) / n,
        agreement_rate=sum(1 for d in details if d.agreement) / n,
        details=details,
    )


__all__ = [
    "PASS_THRESHOLD",
    "EvaluationHarness",
    "compare_runs",
    "html_to_text",
    "score",
]

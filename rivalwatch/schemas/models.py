# rivalwatch/schemas/models.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .labels import BrowserEngine, ChangeType, Level, PageType, RunStatus

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Record(BaseModel):
    """
    Base for every record crossing the pipeline boundary.

    Python code uses snake_case attributes; `to_json()` emits the camelCase
    shape (contentHash, hasSignificantChange, ...) that collaborators consume.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class _FrozenRecord(_Record):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)


# =========================
# Fetcher contracts
# =========================


class FetchOptions(_FrozenRecord):
    """
    Per-call options for `PageFetcher.fetch_page`.

    `respect_robots` and `ignore_robots` are both honored: robots.txt is only
    consulted when respect_robots=True and ignore_robots=False.
    """

    timeout_ms: int = Field(30_000, gt=0, description="Navigation timeout in milliseconds.")
    respect_robots: bool = Field(True, description="Consult robots.txt before navigating.")
    ignore_robots: bool = Field(False, description="Force-skip robots.txt even if respect_robots is set.")
    user_agent: str | None = Field(None, description="User-Agent override; defaults to a desktop Chrome UA.")
    viewport: tuple[int, int] = Field((1920, 1080), description="Browser viewport as (width, height).")
    engine: BrowserEngine = Field("chromium", description="Playwright browser engine.")
    wait_for_network_idle: bool = Field(False, description="Wait for 'networkidle' instead of 'domcontentloaded'.")
    wait_for_selector: str | None = Field(None, description="Optional CSS selector to wait for (best-effort).")

    @property
    def effective_user_agent(self) -> str:
        return self.user_agent or DEFAULT_USER_AGENT

    @property
    def checks_robots(self) -> bool:
        return self.respect_robots and not self.ignore_robots


class FetchResult(_FrozenRecord):
    """Outcome of one page fetch. Failures are reported through `error`, never raised."""

    url: str = Field(..., description="Requested URL.")
    html: str = Field("", description="Rendered page markup (empty on failure).")
    extracted_text: str = Field("", description="Visible text with script/style/banner containers removed.")
    status_code: int = Field(0, description="HTTP status of the main navigation (0 when no response).")
    load_time_ms: int = Field(0, ge=0, description="Wall-clock time spent on the fetch.")
    robots_blocked: bool = Field(False, description="True when robots.txt disallowed the URL (no request was issued).")
    robots_compliant: bool = Field(True, description="False when robots.txt checking was disabled for this call.")
    crawl_delay_s: float | None = Field(None, description="Crawl-delay resolved from robots.txt, if any.")
    title: str = Field("", description="Document title.")
    fetched_at: datetime = Field(default_factory=_utcnow, description="UTC timestamp of the fetch.")
    error: str | None = Field(None, description="Error message when the fetch failed.")

    @property
    def ok(self) -> bool:
        return self.error is None and not self.robots_blocked


# =========================
# Normalizer outputs
# =========================


class PricingEntry(_FrozenRecord):
    """One price-like match. Extraction is price-centric, so the plan is rarely known."""

    plan: str = Field("Unknown Plan", description="Plan name, when resolvable.")
    price: str = Field(..., description="Amount without currency symbol, or the matched keyword (e.g. 'Free').")
    billing_period: str = Field("unknown", description="month/year/... as matched, lower-cased.")
    currency: str = Field("USD", description="ISO currency code.")


class FeatureEntry(_FrozenRecord):
    title: str = Field(..., description="Feature label (text before ':' when present).")
    description: str = Field("", description="Feature description (text after ':' or the whole match).")


class ExtractedSignals(_FrozenRecord):
    """Best-effort structured signals derived from cleaned text. Never ground truth."""

    pricing: tuple[PricingEntry, ...] = Field(default_factory=tuple)
    features: tuple[FeatureEntry, ...] = Field(default_factory=tuple)
    headlines: tuple[str, ...] = Field(default_factory=tuple)
    word_count: int = Field(0, ge=0)
    language: str = Field("unknown", description="'en' or 'unknown'.")


class PageFingerprint(_FrozenRecord):
    """Immutable normalized snapshot of one page fetch."""

    content_hash: str = Field(..., description="SHA-256 hex digest of the raw HTML (not of the cleaned text).")
    cleaned_text: str = Field("", description="Visible text after deterministic noise removal.")
    extracted: ExtractedSignals = Field(default_factory=ExtractedSignals)


# =========================
# Classification
# =========================


class ChangeDetails(_FrozenRecord):
    old_value: str | None = Field(None, description="Before-state, when the backend reported one.")
    new_value: str | None = Field(None, description="After-state, when the backend reported one.")
    impact_level: Level = Field("medium")


class ClassificationResult(_FrozenRecord):
    """Verdict of the Differ/Classifier for one (old, new) fingerprint pair."""

    has_significant_change: bool = Field(..., description="Business-relevant change detected.")
    change_type: ChangeType = Field("other")
    change_summary: str = Field("Changes detected", description="Short actionable summary.")
    details: ChangeDetails = Field(default_factory=ChangeDetails)
    confidence: Level = Field("medium", description="high/medium from inference, low from the rule-based fallback.")
    competitive_analysis: str | None = Field(None)
    raw_response: dict[str, Any] | None = Field(None, description="Backend payload, only populated in test mode.")
    backend: str | None = Field(None, description="Name of the backend that produced the verdict ('fallback' for rules).")
    error: str | None = Field(None, description="Per-item failure message in batch mode.")

    @property
    def impact_level(self) -> Level:
        return self.details.impact_level


class ClassificationRequest(_FrozenRecord):
    """One item for `ChangeClassifier.classify_batch`."""

    competitor_name: str
    page_type: str
    old: PageFingerprint
    new: PageFingerprint


class ChangeRecord(_FrozenRecord):
    """A significant change, ready to be persisted/notified by an external collaborator."""

    page_id: str = Field(..., description="Identifier of the monitored page.")
    change_type: ChangeType
    change_summary: str
    old_value: str | None = None
    new_value: str | None = None
    impact_level: Level
    confidence: Level
    competitive_analysis: str | None = None
    detected_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_classification(
        cls,
        page_id: str,
        result: ClassificationResult,
        *,
        detected_at: datetime | None = None,
    ) -> ChangeRecord:
        if not result.has_significant_change:
            raise ValueError("ChangeRecord requires a classification with has_significant_change=True.")
        return cls(
            page_id=page_id,
            change_type=result.change_type,
            change_summary=result.change_summary,
            old_value=result.details.old_value,
            new_value=result.details.new_value,
            impact_level=result.details.impact_level,
            confidence=result.confidence,
            competitive_analysis=result.competitive_analysis,
            detected_at=detected_at or _utcnow(),
        )


# =========================
# Detection runs
# =========================


class PageToCheck(_FrozenRecord):
    """A page handed in by the orchestration layer: URL plus its prior fingerprint."""

    page_id: str
    url: str
    competitor_name: str
    page_type: str = Field("other")
    previous: PageFingerprint | None = Field(None, description="Fingerprint from the previous successful fetch.")


class PageOutcome(_Record):
    page_id: str
    url: str
    fingerprint: PageFingerprint | None = None
    result: ClassificationResult | None = None
    change: ChangeRecord | None = None
    error: str | None = None


class DetectionRun(_Record):
    """
    One sweep over a set of pages.

    Lifecycle: running → completed | partial | failed. Owned by the caller; the
    runner appends per-page outcomes and counters as it goes.
    """

    run_id: str
    status: RunStatus = "running"
    pages_checked: int = 0
    changes_found: int = 0
    errors: int = 0
    error_messages: list[str] = Field(default_factory=list)
    outcomes: list[PageOutcome] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=_utcnow)
    finished_at: datetime | None = None

    def record_outcome(self, outcome: PageOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.error is not None:
            self.record_error(f"Error processing {outcome.url}: {outcome.error}")
            return
        self.pages_checked += 1
        if outcome.change is not None:
            self.changes_found += 1

    def record_error(self, message: str) -> None:
        self.errors += 1
        self.error_messages.append(message)

    def finish(self, status: RunStatus | None = None) -> DetectionRun:
        if status is None:
            if self.errors == 0:
                status = "completed"
            elif self.pages_checked == 0:
                status = "failed"
            else:
                status = "partial"
        self.status = status
        self.finished_at = _utcnow()
        return self


# =========================
# Evaluation harness
# =========================


class ExpectedChange(_FrozenRecord):
    has_significant_change: bool
    change_type: ChangeType = "other"
    impact_level: Level = "medium"


class TestScenario(_FrozenRecord):
    """Hand-labeled before/after pair for regression-testing detection accuracy."""

    __test__: ClassVar[bool] = False

    id: str
    name: str
    description: str = ""
    page_type: PageType
    competitor_name: str
    before_html: str
    after_html: str
    expected: ExpectedChange


class TestResult(_FrozenRecord):
    __test__: ClassVar[bool] = False

    scenario_id: str
    passed: bool
    accuracy: float = Field(..., ge=0.0, le=1.0)
    actual: ClassificationResult
    expected: ExpectedChange
    errors: tuple[str, ...] = Field(default_factory=tuple, description="Mismatch explanations or execution failure.")
    backend: str | None = None


class TestReport(_FrozenRecord):
    __test__: ClassVar[bool] = False

    total: int
    passed: int
    failed: int
    average_accuracy: float
    backends: tuple[str, ...] = Field(default_factory=tuple)
    details: tuple[TestResult, ...] = Field(default_factory=tuple)


class ScenarioComparison(_FrozenRecord):
    scenario_id: str
    baseline_passed: bool
    candidate_passed: bool
    accuracy_diff: float
    agreement: bool


class ComparisonReport(_FrozenRecord):
    accuracy_difference: float
    agreement_rate: float
    details: tuple[ScenarioComparison, ...] = Field(default_factory=tuple)


class HealthReport(_FrozenRecord):
    """Result of a provider self-test."""

    backend: str
    success: bool
    response_time_ms: int = Field(0, ge=0)
    error: str | None = None


__all__ = [
    "DEFAULT_USER_AGENT",
    "FetchOptions",
    "FetchResult",
    "PricingEntry",
    "FeatureEntry",
    "ExtractedSignals",
    "PageFingerprint",
    "ChangeDetails",
    "ClassificationResult",
    "ClassificationRequest",
    "ChangeRecord",
    "PageToCheck",
    "PageOutcome",
    "DetectionRun",
    "ExpectedChange",
    "TestScenario",
    "TestResult",
    "TestReport",
    "ScenarioComparison",
    "ComparisonReport",
    "HealthReport",
]

# rivalwatch/orchestrators/detection_run.py
"""
One detection sweep: fetch -> normalize -> classify -> emit, page by page.

Pages are processed sequentially in the caller's order so per-domain rate
limits hold and browser sessions never overlap. Persistence and notification
delivery stay outside: significant changes are handed to a ChangeSink.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from typing import Protocol

from rivalwatch.core.detect.classifier import ChangeClassifier
from rivalwatch.core.detect.priority import plan_notification
from rivalwatch.core.fetch.page_fetcher import PageFetcher
from rivalwatch.core.normalize.fingerprint import normalize
from rivalwatch.schemas.models import ChangeRecord, DetectionRun, FetchOptions, PageOutcome, PageToCheck

logger = logging.getLogger(__name__)


class ChangeSink(Protocol):
    async def emit(self, record: ChangeRecord) -> None: ...


class LogSink:
    """Sink that only logs each change with its notification routing."""

    def __init__(self) -> None:
        self.records: list[ChangeRecord] = []

    async def emit(self, record: ChangeRecord) -> None:
        plan = plan_notification(record)
        self.records.append(record)
        logger.info(
            "Change on %s: [%s/%s] %s -> %s priority=%d at %s",
            record.page_id,
            record.change_type,
            record.impact_level,
            record.change_summary,
            plan.notification_type,
            plan.priority,
            plan.scheduled_for.isoformat(),
        )


def _new_run_id() -> str:
    return uuid.uuid4().hex


class DetectionRunner:
    def __init__(
        self,
        fetcher: PageFetcher,
        classifier: ChangeClassifier,
        sink: ChangeSink | None = None,
        *,
        run_id_factory: Callable[[], str] = _new_run_id,
    ) -> None:
        self.fetcher = fetcher
        self.classifier = classifier
        self.sink = sink
        self._run_id_factory = run_id_factory

    async def run(self, pages: Sequence[PageToCheck], options: FetchOptions | None = None) -> DetectionRun:
        run = DetectionRun(run_id=self._run_id_factory())
        logger.info("Detection run %s: %d page(s)", run.run_id, len(pages))
        try:
            for page in pages:
                outcome = await self._check_page(page, options)
                run.record_outcome(outcome)
                if outcome.change is not None and self.sink is not None:
                    try:
                        await self.sink.emit(outcome.change)
                    except Exception as e:  # noqa: BLE001
                        logger.warning("Failed to emit change for %s: %s", page.url, e)
                        run.record_error(f"Failed to emit change for {page.url}: {e}")
        except Exception as e:  # noqa: BLE001
            logger.exception("Detection run %s failed", run.run_id)
            run.record_error(f"Detection run failed: {type(e).__name__}: {e}")
            return run.finish("failed")

        run.finish()
        logger.info(
            "Detection run %s %s: checked=%d changes=%d errors=%d",
            run.run_id,
            run.status,
            run.pages_checked,
            run.changes_found,
            run.errors,
        )
        return run

    async def _check_page(self, page: PageToCheck, options: FetchOptions | None) -> PageOutcome:
        fetched = await self.fetcher.fetch_page(page.url, options)
        if fetched.error is not None:
            return PageOutcome(page_id=page.page_id, url=page.url, error=fetched.error)

        fingerprint = normalize(fetched.html, fetched.extracted_text)
        outcome = PageOutcome(page_id=page.page_id, url=page.url, fingerprint=fingerprint)
        if page.previous is None:
            return outcome

        result = await self.classifier.classify_change(page.competitor_name, page.page_type, page.previous, fingerprint)
        outcome.result = result
        if result.has_significant_change:
            outcome.change = ChangeRecord.from_classification(page.page_id, result)
        return outcome


__all__ = ["ChangeSink", "DetectionRunner", "LogSink"]

# main.py
"""
Entry Point: rivalwatch

Purpose
-------
Command-line access to the change-detection pipeline:
  - evaluate : run the built-in scenarios through normalize + classify and
               print an accuracy report (mock backend unless configured).
  - fetch    : fetch one page politely and print the FetchResult summary.
  - run      : one detection sweep over pages listed in a JSON file.
  - health   : self-test the configured inference backend.

Design
------
- Thin: parsing and printing only. Settings come from env (+ optional JSON
  via --settings); the pipeline lives under `rivalwatch/`.

Usage
-----
    python main.py evaluate
    python main.py evaluate --scenario pricing-increase --provider openai --json
    python main.py fetch https://example.com/pricing --no-robots --timeout 20
    python main.py run pages.json --out run.json
    python main.py health --provider anthropic
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from pydantic import TypeAdapter

from rivalwatch.core.detect.classifier import ChangeClassifier, ClassifierConfig
from rivalwatch.core.fetch.page_fetcher import PageFetcher
from rivalwatch.core.fetch.rate_limit import DomainRateLimiter
from rivalwatch.core.fetch.robots import RobotsCache
from rivalwatch.evaluation.errors import ScenarioNotFoundError
from rivalwatch.evaluation.harness import EvaluationHarness
from rivalwatch.inputs.settings import Settings, SettingsLoader
from rivalwatch.logs import configure_logging
from rivalwatch.orchestrators.detection_run import DetectionRunner, LogSink
from rivalwatch.schemas.labels import PROVIDERS
from rivalwatch.schemas.models import FetchOptions, PageToCheck
from rivalwatch.tools.inference.factory import create_backend
from rivalwatch.tools.inference.health import check_backend


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="rivalwatch: competitor page change detection")
    p.add_argument("--settings", type=str, default=None, help="Optional JSON settings file (env overrides apply).")
    p.add_argument("--log-level", type=str, default=None, help="Overrides RIVALWATCH_LOG_LEVEL.")
    sub = p.add_subparsers(dest="command", required=True)

    ev = sub.add_parser("evaluate", help="Run the built-in detection scenarios.")
    ev.add_argument("--scenario", action="append", default=None, help="Scenario id (repeatable). Default: all.")
    ev.add_argument("--provider", choices=PROVIDERS, default=None, help="Use this backend instead of the mock.")
    ev.add_argument("--json", action="store_true", help="Print the full report as JSON.")

    fe = sub.add_parser("fetch", help="Fetch one page.")
    fe.add_argument("url")
    fe.add_argument("--no-robots", action="store_true", help="Skip robots.txt (result is marked non-compliant).")
    fe.add_argument("--timeout", type=float, default=None, help="Navigation timeout in seconds.")

    rn = sub.add_parser("run", help="Detection sweep over a JSON list of pages.")
    rn.add_argument("pages", help="JSON file: list of {pageId, url, competitorName, pageType, previous?}.")
    rn.add_argument("--out", type=str, default=None, help="Write the DetectionRun as JSON here.")

    he = sub.add_parser("health", help="Self-test an inference backend.")
    he.add_argument("--provider", choices=PROVIDERS, default=None)

    return p.parse_args(argv)


def _build_fetcher(settings: Settings) -> PageFetcher:
    return PageFetcher(
        robots=RobotsCache(user_agent=settings.user_agent or "rivalwatch", ttl_s=settings.robots_ttl_s),
        limiter=DomainRateLimiter(settings.min_interval_s),
    )


def _fetch_options(settings: Settings, *, timeout_s: float | None = None, ignore_robots: bool = False) -> FetchOptions:
    return FetchOptions(
        timeout_ms=int((timeout_s or settings.fetch_timeout_s) * 1000),
        ignore_robots=ignore_robots,
        user_agent=settings.user_agent,
    )


# ---------- commands ----------


async def cmd_evaluate(args: argparse.Namespace, settings: Settings) -> int:
    if args.provider:
        settings = settings.model_copy(update={"provider": args.provider, "use_real_llm": True})
    harness = EvaluationHarness.from_settings(settings)
    results = await harness.run_all_scenarios(args.scenario)
    report = harness.generate_report(results)

    if args.json:
        print(json.dumps(report.to_json(), indent=2))
    else:
        for r in report.details:
            status = "PASS" if r.passed else "FAIL"
            print(f"[{status}] {r.scenario_id:<28} accuracy={r.accuracy:.2f}  {'; '.join(r.errors)}")
        print(
            f"\n{report.passed}/{report.total} passed, average accuracy {report.average_accuracy:.2f}"
            f" (backends: {', '.join(report.backends) or 'n/a'})"
        )
    return 0 if report.failed == 0 else 1


async def cmd_fetch(args: argparse.Namespace, settings: Settings) -> int:
    opts = _fetch_options(settings, timeout_s=args.timeout, ignore_robots=args.no_robots)
    async with _build_fetcher(settings) as fetcher:
        result = await fetcher.fetch_page(args.url, opts)
    summary = result.to_json()
    summary.pop("html", None)
    text = summary.pop("extractedText", "")
    summary["extractedTextPreview"] = text[:500]
    print(json.dumps(summary, indent=2))
    return 0 if result.ok else 1


async def cmd_run(args: argparse.Namespace, settings: Settings) -> int:
    raw = json.loads(Path(args.pages).read_text(encoding="utf-8"))
    pages = TypeAdapter(list[PageToCheck]).validate_python(raw)

    classifier = ChangeClassifier(
        create_backend(settings),
        ClassifierConfig(batch_delay_s=settings.batch_delay_s, inference_timeout_s=settings.inference_timeout_s),
    )
    async with _build_fetcher(settings) as fetcher:
        run = await DetectionRunner(fetcher, classifier, LogSink()).run(pages, _fetch_options(settings))

    payload = json.dumps(run.to_json(), indent=2)
    if args.out:
        Path(args.out).write_text(payload, encoding="utf-8")
        print(f"Run {run.run_id} {run.status}: checked={run.pages_checked} changes={run.changes_found} errors={run.errors}")
    else:
        print(payload)
    return 0 if run.status == "completed" else 1


async def cmd_health(args: argparse.Namespace, settings: Settings) -> int:
    backend = create_backend(settings, provider=args.provider)
    report = await check_backend(backend, timeout_s=settings.inference_timeout_s)
    print(json.dumps(report.to_json(), indent=2))
    return 0 if report.success else 1


_COMMANDS = {"evaluate": cmd_evaluate, "fetch": cmd_fetch, "run": cmd_run, "health": cmd_health}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)
    try:
        settings = SettingsLoader().load(args.settings)
    except (ValueError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        return asyncio.run(_COMMANDS[args.command](args, settings))
    except ScenarioNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

# rivalwatch/evaluation/__init__.py
from .errors import ScenarioExecutionError, ScenarioNotFoundError
from .harness import PASS_THRESHOLD, EvaluationHarness, compare_runs, html_to_text, score
from .scenarios import DEFAULT_SCENARIOS

__all__ = [
    "DEFAULT_SCENARIOS",
    "EvaluationHarness",
    "PASS_THRESHOLD",
    "ScenarioExecutionError",
    "ScenarioNotFoundError",
    "compare_runs",
    "html_to_text",
    "score",
]

# rivalwatch/evaluation/errors.py

from __future__ import annotations


class ScenarioNotFoundError(KeyError):
    """Unknown scenario id. Raised at the harness API edge."""

    def __init__(self, scenario_id: str) -> None:
        super().__init__(scenario_id)
        self.scenario_id = scenario_id

    def __str__(self) -> str:
        return f"Test scenario '{self.scenario_id}' not found"


class ScenarioExecutionError(RuntimeError):
    """Normalization or classification blew up inside one scenario. Caught per scenario."""

    def __init__(self, scenario_id: str, message: str) -> None:
        super().__init__(f"Test execution failed: {message}")
        self.scenario_id = scenario_id


__all__ = ["ScenarioNotFoundError", "ScenarioExecutionError"]

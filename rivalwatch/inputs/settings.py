# rivalwatch/inputs/settings.py
"""
Runtime settings for the detection pipeline.

Goals
-----
- One validated, immutable `Settings` object built once per process and passed
  to factories (inference backend, fetcher, classifier).
- File-first (optional JSON) with environment overrides on top.

Environment overrides
---------------------
- LLM_PROVIDER                     -> provider ("openai" | "anthropic" | "mock")
- OPENAI_API_KEY / ANTHROPIC_API_KEY
- LLM_MODEL, LLM_TEMPERATURE, LLM_MAX_TOKENS
- RIVALWATCH_INFERENCE_TIMEOUT_S, RIVALWATCH_FETCH_TIMEOUT_S
- RIVALWATCH_USER_AGENT, RIVALWATCH_MIN_INTERVAL_S, RIVALWATCH_BATCH_DELAY_S
- TEST_USE_REAL_LLM                -> use_real_llm in the evaluation harness

Public API
----------
- class Settings
- class SettingsLoader: load(path) / load_json(text) / from_env(environ)
- load_settings(path=None) -> Settings
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rivalwatch.schemas.labels import ProviderName

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Validated pipeline configuration."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    provider: ProviderName = Field("mock", description="Inference backend to use.")
    openai_api_key: str | None = Field(None, repr=False)
    anthropic_api_key: str | None = Field(None, repr=False)
    model: str | None = Field(None, description="Model override; each backend has its own default.")
    temperature: float | None = Field(None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(None, gt=0)
    inference_timeout_s: float = Field(60.0, gt=0)
    mock_delay_s: float = Field(0.5, ge=0, description="Simulated latency of the mock backend when it stands in for a real one.")

    fetch_timeout_s: float = Field(30.0, gt=0)
    user_agent: str | None = Field(None)
    min_interval_s: float = Field(5.0, ge=0, description="Per-domain floor between two requests.")
    robots_ttl_s: float = Field(3600.0, gt=0, description="How long a parsed robots.txt stays cached.")
    batch_delay_s: float = Field(1.0, ge=0, description="Delay between two inference calls in batch mode.")

    use_real_llm: bool = Field(False, description="Evaluation harness: use the configured provider instead of the mock.")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        return SettingsLoader().from_env(environ)


# ----------------------------
# Loader
# ----------------------------

_ENV_FIELDS: dict[str, tuple[str, Callable[[str], Any]]] = {
    "LLM_PROVIDER": ("provider", lambda s: s.strip().lower()),
    "OPENAI_API_KEY": ("openai_api_key", str),
    "ANTHROPIC_API_KEY": ("anthropic_api_key", str),
    "LLM_MODEL": ("model", str),
    "LLM_TEMPERATURE": ("temperature", float),
    "LLM_MAX_TOKENS": ("max_tokens", int),
    "RIVALWATCH_INFERENCE_TIMEOUT_S": ("inference_timeout_s", float),
    "RIVALWATCH_FETCH_TIMEOUT_S": ("fetch_timeout_s", float),
    "RIVALWATCH_USER_AGENT": ("user_agent", str),
    "RIVALWATCH_MIN_INTERVAL_S": ("min_interval_s", float),
    "RIVALWATCH_BATCH_DELAY_S": ("batch_delay_s", float),
    "TEST_USE_REAL_LLM": ("use_real_llm", lambda s: s.strip().lower() in _TRUTHY),
}


@dataclass(frozen=True)
class SettingsLoader:
    """
    File-first settings loader with env overrides.

    Malformed values (bad JSON, non-numeric env numbers, unknown provider) raise
    ValueError here, at the edge, never mid-pipeline.
    """

    def load(self, path: str | Path | None = None, environ: Mapping[str, str] | None = None) -> Settings:
        raw: dict[str, Any] = {}
        if path is not None:
            p = Path(path)
            if not p.exists():
                raise FileNotFoundError(f"Settings file not found: {p}")
            raw = self._parse_json(p.read_text(encoding="utf-8"), source=str(p))
        return self._build(raw, environ)

    def load_json(self, text: str, environ: Mapping[str, str] | None = None) -> Settings:
        return self._build(self._parse_json(text, source="<string>"), environ)

    def from_env(self, environ: Mapping[str, str] | None = None) -> Settings:
        return self._build({}, environ)

    # ---------- Internals ----------

    def _parse_json(self, text: str, *, source: str) -> dict[str, Any]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {source}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Settings in {source} must be a JSON object.")
        return cast(dict[str, Any], data)

    def _env_overrides(self, environ: Mapping[str, str]) -> dict[str, Any]:
        updates: dict[str, Any] = {}
        for env_key, (field, conv) in _ENV_FIELDS.items():
            val = environ.get(env_key)
            if val is None or val == "":
                continue
            try:
                updates[field] = conv(val)
            except ValueError as e:
                raise ValueError(f"Invalid value for {env_key}: {val!r}") from e
        return updates

    def _build(self, raw: dict[str, Any], environ: Mapping[str, str] | None) -> Settings:
        env = os.environ if environ is None else environ
        data = {**raw, **self._env_overrides(env)}
        try:
            return Settings.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid settings: {e}") from e


def load_settings(path: str | Path | None = None) -> Settings:
    """Convenience wrapper around SettingsLoader().load(path)."""
    return SettingsLoader().load(path)


__all__ = ["Settings", "SettingsLoader", "load_settings"]

# rivalwatch/tools/inference/provider_base.py
"""
Inference Backend Interface

Purpose
-------
Define the minimal contract every analysis backend honors, plus the shared
response-parsing helpers, so the classifier never knows which provider it is
talking to.

Public API
----------
class InferenceBackend(Protocol):
    name: str
    async def analyze(self, prompt: str) -> dict[str, Any]

def strip_code_fences(text: str) -> str
def parse_json_payload(text: str, *, backend: str) -> dict[str, Any]

Invariants & Guardrails
-----------------------
- `analyze` returns a JSON object (dict) or raises an InferenceError subclass.
- Parse failures carry the backend name and the raw completion text.
"""

from __future__ import annotations

import json
import re
from typing import Any, Protocol, runtime_checkable

from .errors import InferenceParseError

SYSTEM_PROMPT = (
    "You are a SaaS competitive intelligence expert. Respond only with raw JSON - "
    "no markdown formatting, no code blocks, no explanations. Return valid JSON only."
)

_FENCE_JSON_OPEN = re.compile(r"^```json\s*", re.IGNORECASE)
_FENCE_OPEN = re.compile(r"^```\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


@runtime_checkable
class InferenceBackend(Protocol):
    name: str

    async def analyze(self, prompt: str) -> dict[str, Any]: ...


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` marker and a trailing ``` marker, then trim."""
    s = text.strip()
    s = _FENCE_JSON_OPEN.sub("", s, count=1)
    s = _FENCE_OPEN.sub("", s, count=1)
    s = _FENCE_CLOSE.sub("", s, count=1)
    return s.strip()


def parse_json_payload(text: str, *, backend: str) -> dict[str, Any]:
    cleaned = strip_code_fences(text)
    try:
        loaded = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise InferenceParseError(f"Invalid JSON response: {e}", backend=backend, raw_text=text) from e
    if not isinstance(loaded, dict):
        raise InferenceParseError(
            f"Expected a JSON object, got {type(loaded).__name__}", backend=backend, raw_text=text
        )
    return loaded


__all__ = ["SYSTEM_PROMPT", "InferenceBackend", "strip_code_fences", "parse_json_payload"]

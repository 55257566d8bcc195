# rivalwatch/tools/inference/errors.py
"""
Typed errors raised by inference backends.

The classifier catches every InferenceError and degrades to the rule-based
fallback; only InferenceConfigError is meant to escape, at construction time.
"""

from __future__ import annotations


class InferenceError(RuntimeError):
    """Base class. `backend` names the backend that failed (openai, anthropic, mock)."""

    def __init__(self, message: str, *, backend: str) -> None:
        super().__init__(message)
        self.backend = backend

    def __str__(self) -> str:
        return f"[{self.backend}] {super().__str__()}"


class InferenceTransportError(InferenceError):
    """HTTP/SDK failure, timeout or empty completion."""


class InferenceParseError(InferenceError):
    """Completion text was not a JSON object. Carries the raw text for diagnosis."""

    def __init__(self, message: str, *, backend: str, raw_text: str) -> None:
        super().__init__(message, backend=backend)
        self.raw_text = raw_text

    @property
    def snippet(self) -> str:
        return self.raw_text[:200]


class InferenceConfigError(InferenceError, ValueError):
    """Unknown provider name or unusable backend configuration."""


__all__ = ["InferenceError", "InferenceTransportError", "InferenceParseError", "InferenceConfigError"]

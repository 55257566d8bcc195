# rivalwatch/tools/inference/__init__.py
"""
Inference tools package

Re-exports the backend protocol, the three backends, the factory and the
self-test so callers can do:

    from rivalwatch.tools.inference import create_backend, check_backend
"""

from __future__ import annotations

from .anthropic_provider import AnthropicBackend
from .errors import InferenceConfigError, InferenceError, InferenceParseError, InferenceTransportError
from .factory import create_backend
from .health import HEALTH_CHECK_PROMPT, check_backend
from .mock_provider import MockBackend, mock_analysis
from .openai_provider import OpenAIBackend
from .provider_base import SYSTEM_PROMPT, InferenceBackend, parse_json_payload, strip_code_fences

__all__ = [
    "InferenceBackend",
    "OpenAIBackend",
    "AnthropicBackend",
    "MockBackend",
    "mock_analysis",
    "create_backend",
    "check_backend",
    "HEALTH_CHECK_PROMPT",
    "SYSTEM_PROMPT",
    "strip_code_fences",
    "parse_json_payload",
    "InferenceError",
    "InferenceTransportError",
    "InferenceParseError",
    "InferenceConfigError",
]

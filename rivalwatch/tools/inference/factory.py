# rivalwatch/tools/inference/factory.py
"""
Backend selection.

create_backend(settings=None, **overrides) -> InferenceBackend

- provider "mock"                 -> MockBackend (no simulated delay)
- provider "openai"/"anthropic"   -> network backend when a key is configured,
                                     otherwise a warning and a MockBackend that
                                     simulates network latency
- anything else                   -> InferenceConfigError
"""

from __future__ import annotations

import logging
from typing import Any

from rivalwatch.inputs.settings import Settings
from rivalwatch.schemas.labels import PROVIDERS

from .anthropic_provider import AnthropicBackend
from .errors import InferenceConfigError
from .mock_provider import MockBackend
from .openai_provider import OpenAIBackend
from .provider_base import InferenceBackend

logger = logging.getLogger(__name__)


def create_backend(settings: Settings | None = None, **overrides: Any) -> InferenceBackend:
    cfg = settings or Settings.from_env()
    if overrides:
        cfg = cfg.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    provider = str(cfg.provider).strip().lower()
    if provider not in PROVIDERS:
        raise InferenceConfigError(f"Unknown inference provider: {cfg.provider!r}", backend=str(cfg.provider))

    if provider == "openai":
        if not cfg.openai_api_key:
            logger.warning("OpenAI API key not found, falling back to mock backend")
            return MockBackend(delay_s=cfg.mock_delay_s)
        return OpenAIBackend(
            cfg.openai_api_key,
            model=cfg.model,
            temperature=cfg.temperature,
            max_tokens=cfg.max_tokens,
            timeout_s=cfg.inference_timeout_s,
        )

    if provider == "anthropic":
        if not cfg.anthropic_api_key:
            logger.warning("Anthropic API key not found, falling back to mock backend")
            return MockBackend(delay_s=cfg.mock_delay_s)
        return AnthropicBackend(
            cfg.anthropic_api_key,
            model=cfg.model,
            max_tokens=cfg.max_tokens,
            timeout_s=cfg.inference_timeout_s,
        )

    return MockBackend()


__all__ = ["create_backend"]

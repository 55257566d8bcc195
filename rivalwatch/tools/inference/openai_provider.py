# rivalwatch/tools/inference/openai_provider.py
"""
OpenAI Inference Backend

Chat-completions backend (bearer auth) with a JSON-only system instruction.

Environment (via Settings)
--------------------------
OPENAI_API_KEY  : required unless a client is injected
LLM_MODEL       : default "gpt-4o-mini"
LLM_TEMPERATURE : default 0.3
LLM_MAX_TOKENS  : default 500
"""

from __future__ import annotations

import asyncio
from typing import Any

from .errors import InferenceConfigError, InferenceTransportError
from .provider_base import SYSTEM_PROMPT, parse_json_payload


class OpenAIBackend:
    name = "openai"

    DEFAULT_MODEL = "gpt-4o-mini"
    DEFAULT_TEMPERATURE = 0.3
    DEFAULT_MAX_TOKENS = 500

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        timeout_s: float = 60.0,
        client: Any = None,
    ) -> None:
        if client is None:
            if not api_key:
                raise InferenceConfigError("OpenAI API key is required", backend=self.name)
            try:
                from openai import AsyncOpenAI
            except ImportError as e:  # pragma: no cover
                raise ImportError("openai not installed. Install `openai>=1.0`.") from e
            client = AsyncOpenAI(api_key=api_key, timeout=timeout_s)

        self._client = client
        self.model = model or self.DEFAULT_MODEL
        self.temperature = self.DEFAULT_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or self.DEFAULT_MAX_TOKENS
        self.timeout_s = timeout_s

    async def analyze(self, prompt: str) -> dict[str, Any]:
        try:
            resp = await asyncio.wait_for(
                self._client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                ),
                timeout=self.timeout_s,
            )
        except Exception as e:  # noqa: BLE001
            raise InferenceTransportError(f"OpenAI API error: {type(e).__name__}: {e}", backend=self.name) from e

        choices = getattr(resp, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content:
            raise InferenceTransportError("No response content from OpenAI", backend=self.name)
        return parse_json_payload(content, backend=self.name)


__all__ = ["OpenAIBackend"]

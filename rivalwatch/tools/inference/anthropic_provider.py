# rivalwatch/tools/inference/anthropic_provider.py
"""
Anthropic Inference Backend

Messages-API backend (x-api-key auth). The API takes no system role in this
call shape, so the JSON-only instruction is prepended to the user turn.
"""

from __future__ import annotations

import asyncio
from typing import Any

from .errors import InferenceConfigError, InferenceTransportError
from .provider_base import SYSTEM_PROMPT, parse_json_payload


class AnthropicBackend:
    name = "anthropic"

    DEFAULT_MODEL = "claude-3-haiku-20240307"
    DEFAULT_MAX_TOKENS = 500

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str | None = None,
        max_tokens: int | None = None,
        timeout_s: float = 60.0,
        client: Any = None,
    ) -> None:
        if client is None:
            if not api_key:
                raise InferenceConfigError("Anthropic API key is required", backend=self.name)
            try:
                from anthropic import AsyncAnthropic
            except ImportError as e:  # pragma: no cover
                raise ImportError("anthropic not installed. Install `anthropic`.") from e
            client = AsyncAnthropic(api_key=api_key, timeout=timeout_s)

        self._client = client
        self.model = model or self.DEFAULT_MODEL
        self.max_tokens = max_tokens or self.DEFAULT_MAX_TOKENS
        self.timeout_s = timeout_s

    async def analyze(self, prompt: str) -> dict[str, Any]:
        try:
            resp = await asyncio.wait_for(
                self._client.messages.create(
                    model=self.model,
                    max_tokens=self.max_tokens,
                    messages=[{"role": "user", "content": f"{SYSTEM_PROMPT}\n\n{prompt}"}],
                ),
                timeout=self.timeout_s,
            )
        except Exception as e:  # noqa: BLE001
            raise InferenceTransportError(f"Anthropic API error: {type(e).__name__}: {e}", backend=self.name) from e

        blocks = getattr(resp, "content", None) or []
        text = getattr(blocks[0], "text", None) if blocks else None
        if not text:
            raise InferenceTransportError("No response content from Anthropic", backend=self.name)
        return parse_json_payload(text, backend=self.name)


__all__ = ["AnthropicBackend"]

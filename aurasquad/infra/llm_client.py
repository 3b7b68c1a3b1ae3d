"""
ClaudeTextClient — text-in / text-out language-model client.

Used for query classification, squad message personalization and
conversational replies.

Multi-key round-robin: supports multiple API keys for higher throughput.
Each request picks the next key in rotation. Rate limits are NOT retried
here; they surface as RateLimitedError so callers decide the retry policy.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import Any, Optional

import anthropic

from aurasquad.core.errors import LLMError, RateLimitedError

logger = logging.getLogger(__name__)


class ClaudeTextClient:
    """Implements the TextLLMClient Protocol on the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str | list[str],
        model: str = "claude-sonnet-4-5-20250929",
        max_tokens: int = 1024,
        base_url: str | None = None,
    ):
        keys = api_key if isinstance(api_key, list) else [api_key]
        if not keys or not all(keys):
            raise LLMError("At least one Anthropic API key is required")
        # retry policy lives in infra/retry.py; the SDK must not retry on its own
        client_kwargs: dict[str, Any] = {"max_retries": 0}
        if base_url:
            client_kwargs["base_url"] = base_url

        self._clients = [
            anthropic.AsyncAnthropic(api_key=k, **client_kwargs)
            for k in keys
        ]
        self._cycle = itertools.cycle(range(len(self._clients)))
        self._model = model
        self._max_tokens = max_tokens

        logger.info(
            "ClaudeTextClient: %d key(s), model=%s, base_url=%s",
            len(keys), model, base_url or "default",
        )

    @property
    def model(self) -> str:
        return self._model

    def _next_client(self) -> tuple[int, anthropic.AsyncAnthropic]:
        idx = next(self._cycle)
        return idx, self._clients[idx]

    def _key_label(self, idx: int) -> str:
        """Return safe label for logging (key index + last 4 chars)."""
        key = self._clients[idx].api_key
        return f"key[{idx}]...{key[-4:]}"

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            kwargs["system"] = system_prompt

        idx, client = self._next_client()
        key_label = self._key_label(idx)
        logger.info("LLM call START | %s | model=%s | prompt_len=%d",
                    key_label, self._model, len(prompt))
        t0 = time.monotonic()

        try:
            response = await client.messages.create(**kwargs)
        except anthropic.RateLimitError as e:
            elapsed_ms = (time.monotonic() - t0) * 1000
            logger.warning("LLM call RATE_LIMITED | %s | %.0fms | %s", key_label, elapsed_ms, e)
            raise RateLimitedError(f"LLM rate limited (429): {e}") from e
        except anthropic.APIError as e:
            elapsed_ms = (time.monotonic() - t0) * 1000
            logger.error("LLM call FAIL  | %s | %.0fms | %s", key_label, elapsed_ms, e)
            raise LLMError(f"LLM call failed: {e}") from e

        text = self._extract_text(response)
        elapsed_ms = (time.monotonic() - t0) * 1000
        logger.info("LLM call OK    | %s | %.0fms | stop=%s | text_len=%d",
                    key_label, elapsed_ms, response.stop_reason, len(text))
        return text

    @staticmethod
    def _extract_text(response: Any) -> str:
        return "".join(block.text for block in response.content if block.type == "text")

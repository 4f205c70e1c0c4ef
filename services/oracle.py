from __future__ import annotations

import logging
import math
from typing import Protocol

from openai import AsyncOpenAI

from app.core.config import Settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a professional news editor. Return only valid JSON."""

# Rough size of one output token, used to turn a character budget into max_tokens.
CHARS_PER_TOKEN = 3
MIN_OUTPUT_TOKENS = 256


class OracleError(RuntimeError):
    """Raised when the text-generation service cannot produce a reply."""


class GenerativeOracle(Protocol):
    async def complete(self, prompt: str, *, max_output_chars: int | None = None) -> str: ...


class OpenAICompatibleOracle:
    """Gemini chat completions through its OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: str | None = None,
        timeout: float = 30.0,
        temperature: float = 0.3,
        max_output_tokens: int = 8192,
    ) -> None:
        # One attempt per call; failures go to the caller's fallback path.
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )
        self._model = model
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens

    def _token_budget(self, max_output_chars: int | None) -> int:
        if not max_output_chars:
            return self._max_output_tokens
        wanted = math.ceil(max_output_chars / CHARS_PER_TOKEN)
        return max(MIN_OUTPUT_TOKENS, min(self._max_output_tokens, wanted))

    async def complete(self, prompt: str, *, max_output_chars: int | None = None) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
                temperature=self._temperature,
                max_tokens=self._token_budget(max_output_chars),
            )
        except Exception as exc:  # noqa: BLE001 - any SDK/transport error means no reply
            raise OracleError(f"Oracle request failed: {type(exc).__name__}") from exc

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content:
            raise OracleError("Oracle returned empty response.")
        return content


def build_oracle(settings: Settings) -> GenerativeOracle | None:
    """Return a configured oracle, or ``None`` when no credential is set."""
    if not settings.oracle_configured:
        logger.warning("Gemini API key not configured; AI generation runs in fallback mode")
        return None
    return OpenAICompatibleOracle(
        api_key=settings.gemini_api_key.strip(),
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout=settings.oracle_timeout_seconds,
        temperature=settings.oracle_temperature,
        max_output_tokens=settings.oracle_max_output_tokens,
    )

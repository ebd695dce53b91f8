"""Model invocation with timeout and single fallback.

The invoker never raises for upstream problems: every failure mode (SDK
error, network error, timeout, empty completion) is logged and the caller
gets ``None``, which the pipeline turns into an empty result.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol

from anthropic import AsyncAnthropic
from anthropic.types import TextBlock
from openai import AsyncOpenAI

from syllabug.extraction.prompts import SYSTEM_PROMPT

if TYPE_CHECKING:
    from syllabug.config import Settings

logger = logging.getLogger(__name__)

# Structured extraction, so favour determinism over creativity
TEMPERATURE = 0.3
MAX_OUTPUT_TOKENS = 4000
DEFAULT_TIMEOUT_SECONDS = 45.0


class EmptyCompletionError(Exception):
    """The model answered but the response carried no usable text."""


class ChatBackend(Protocol):
    async def complete(self, model: str, prompt: str) -> str: ...


class OpenAIChatBackend:
    """Chat completions in JSON mode."""

    def __init__(self, client: AsyncOpenAI) -> None:
        self._client = client

    async def complete(self, model: str, prompt: str) -> str:
        response = await self._client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=TEMPERATURE,
            max_tokens=MAX_OUTPUT_TOKENS,
            response_format={"type": "json_object"},
        )
        if not response.choices or not response.choices[0].message.content:
            raise EmptyCompletionError(f"{model} returned no message content")
        return response.choices[0].message.content


class AnthropicChatBackend:
    """Messages API. JSON output is enforced by prefilling the opening brace.

    Only works with models that accept an assistant prefill; models that reject
    a trailing assistant turn fail the attempt, which counts as a model failure.
    """

    def __init__(self, client: AsyncAnthropic) -> None:
        self._client = client

    async def complete(self, model: str, prompt: str) -> str:
        response = await self._client.messages.create(
            model=model,
            max_tokens=MAX_OUTPUT_TOKENS,
            temperature=TEMPERATURE,
            system=SYSTEM_PROMPT,
            messages=[
                {"role": "user", "content": prompt},
                {"role": "assistant", "content": "{"},
            ],
        )
        # Narrow the content block type; we only ever ask for plain text.
        for block in response.content:
            if isinstance(block, TextBlock):
                return "{" + block.text
        raise EmptyCompletionError(f"{model} returned no text block")


class ModelInvoker:
    """Calls the primary model, then the fallback model once on failure.

    Args:
        backend: Chat backend wrapping a configured SDK client.
        primary_model: High-quality model tried first.
        fallback_model: Cheaper/faster model tried once if the primary fails.
        timeout_seconds: Wall-clock budget for each attempt.
    """

    def __init__(
        self,
        backend: ChatBackend,
        primary_model: str,
        fallback_model: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.backend = backend
        self.primary_model = primary_model
        self.fallback_model = fallback_model
        self.timeout_seconds = timeout_seconds

    async def _attempt(self, model: str, prompt: str) -> str:
        # wait_for cancels the pending call on timeout, so a stuck connection is abandoned.
        return await asyncio.wait_for(
            self.backend.complete(model, prompt), timeout=self.timeout_seconds
        )

    async def invoke(self, prompt: str) -> str | None:
        """Return the raw model text, or ``None`` if both models failed."""
        try:
            logger.info("Calling primary model %s", self.primary_model)
            content = await self._attempt(self.primary_model, prompt)
            logger.info("Received %d chars from %s", len(content), self.primary_model)
            return content
        except asyncio.TimeoutError:
            logger.warning(
                "%s timed out after %.0fs, trying %s",
                self.primary_model,
                self.timeout_seconds,
                self.fallback_model,
            )
        except Exception as exc:
            logger.warning(
                "%s failed (%s), trying %s", self.primary_model, exc, self.fallback_model
            )

        try:
            content = await self._attempt(self.fallback_model, prompt)
            logger.info("Received %d chars from %s", len(content), self.fallback_model)
            return content
        except asyncio.TimeoutError:
            logger.error(
                "Both %s and %s failed: fallback timed out after %.0fs",
                self.primary_model,
                self.fallback_model,
                self.timeout_seconds,
            )
        except Exception as exc:
            logger.error(
                "Both %s and %s failed: %s", self.primary_model, self.fallback_model, exc
            )
        return None


def build_invoker(settings: Settings) -> ModelInvoker | None:
    """Construct a ModelInvoker for the configured provider.

    Returns ``None`` when the provider's API key is not set; the pipeline
    then degrades to an empty result instead of calling out.
    """
    provider = settings.llm_provider.lower()
    if provider == "anthropic":
        if not settings.anthropic_api_key:
            logger.error("ANTHROPIC_API_KEY is missing - check your environment variables")
            return None
        backend: ChatBackend = AnthropicChatBackend(
            AsyncAnthropic(api_key=settings.anthropic_api_key, max_retries=0)
        )
        primary, fallback = settings.anthropic_primary_model, settings.anthropic_fallback_model
    elif provider == "openai":
        if not settings.openai_api_key:
            logger.error("OPENAI_API_KEY is missing - check your environment variables")
            return None
        backend = OpenAIChatBackend(AsyncOpenAI(api_key=settings.openai_api_key, max_retries=0))
        primary, fallback = settings.primary_model, settings.fallback_model
    else:
        raise ValueError(f"Unknown LLM provider: {settings.llm_provider!r}")

    return ModelInvoker(
        backend,
        primary_model=primary,
        fallback_model=fallback,
        timeout_seconds=settings.llm_timeout_seconds,
    )

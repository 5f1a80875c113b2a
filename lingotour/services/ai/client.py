"""
Text-generation providers used by the translator.

OpenAI is called directly in JSON mode. Gemini and Anthropic go through
DSPy's LiteLLM-backed LM with the same JSON response format.
"""

from __future__ import annotations

import asyncio
import os
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any

import dspy
from openai import AsyncOpenAI

from lingotour.config import Settings, get_settings


JSON_RESPONSE_FORMAT = {"type": "json_object"}


class ProviderConfigError(ValueError):
    """Raised when a provider is used without credentials."""
    pass


# =============================================================================
# Provider Interface
# =============================================================================


class CompletionProvider(ABC):
    """
    A single request/response call to a text-generation model.

    Implementations raise on transport errors, timeouts and rate limits.
    They never retry.
    """

    @abstractmethod
    async def complete_json(self, system: str, prompt: str) -> str | None:
        """Run one prompt in strict JSON mode and return the raw text body."""
        pass


class OpenAIProvider(CompletionProvider):
    """Chat completions with response_format=json_object."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        temperature: float = 0.3,
        timeout: float = 60.0,
    ):
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._client: AsyncOpenAI | None = None

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy-load OpenAI client."""
        if self._client is None:
            if not self._api_key:
                raise ProviderConfigError("OPENAI_API_KEY not set")
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def complete_json(self, system: str, prompt: str) -> str | None:
        response = await self.client.chat.completions.create(
            model=self.model,
            response_format=JSON_RESPONSE_FORMAT,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content


class LMProvider(CompletionProvider):
    """Any DSPy LM (Gemini, Anthropic, ...) asked for a JSON object."""

    def __init__(self, lm: dspy.LM, temperature: float = 0.3):
        self.lm = lm
        self.temperature = temperature

    async def complete_json(self, system: str, prompt: str) -> str | None:
        # dspy.LM calls are blocking
        outputs = await asyncio.to_thread(
            self.lm,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            response_format=JSON_RESPONSE_FORMAT,
            temperature=self.temperature,
        )
        if not outputs:
            return None
        return _output_text(outputs[0])


def _output_text(output: Any) -> str | None:
    # Newer DSPy versions return dicts when extra metadata is attached
    if isinstance(output, dict):
        return output.get("text")
    return output


# =============================================================================
# LM Configuration
# =============================================================================


@lru_cache
def get_lm(
    provider: str | None = None,
    model: str | None = None,
    api_key: str | None = None,
) -> dspy.LM:
    """
    Get configured language model.

    Args:
        provider: 'gemini', 'openai', or 'anthropic'. Defaults to env LLM_PROVIDER.
        model: Model name. Defaults to provider-specific env var.
        api_key: Provider key. Defaults to provider-specific env var.

    Returns:
        Configured DSPy LM instance.
    """
    provider = provider or os.getenv("LLM_PROVIDER", "gemini")

    if provider == "gemini":
        model = model or os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        # Accept both GOOGLE_API_KEY and GEMINI_API_KEY
        api_key = api_key or os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")
        if not api_key:
            raise ProviderConfigError("GOOGLE_API_KEY or GEMINI_API_KEY not set")

        # Use gemini/ prefix for litellm
        return dspy.LM(
            model=f"gemini/{model}",
            api_key=api_key,
        )

    elif provider == "openai":
        model = model or os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ProviderConfigError("OPENAI_API_KEY not set")

        return dspy.LM(
            model=f"openai/{model}",
            api_key=api_key,
        )

    elif provider == "anthropic":
        model = model or os.getenv("ANTHROPIC_MODEL", "claude-3-5-haiku-latest")
        api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ProviderConfigError("ANTHROPIC_API_KEY not set")

        return dspy.LM(
            model=f"anthropic/{model}",
            api_key=api_key,
        )

    else:
        raise ProviderConfigError(f"Unknown provider: {provider}")


def get_provider(settings: Settings | None = None) -> CompletionProvider:
    """Build the provider selected by LLM_PROVIDER."""
    settings = settings or get_settings()

    if settings.llm_provider == "openai":
        return OpenAIProvider(
            api_key=settings.openai_api_key or None,
            model=settings.openai_model,
            temperature=settings.translation_temperature,
            timeout=settings.provider_timeout,
        )

    return _LazyLMProvider(settings)


class _LazyLMProvider(LMProvider):
    """Defers LM construction (and the credential check) to the first call."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._lm: dspy.LM | None = None
        self.temperature = settings.translation_temperature

    @property
    def lm(self) -> dspy.LM:
        if self._lm is None:
            s = self._settings
            model, api_key = {
                "gemini": (s.gemini_model, s.google_api_key or s.gemini_api_key),
                "anthropic": (s.anthropic_model, s.anthropic_api_key),
            }.get(s.llm_provider, (None, None))
            self._lm = get_lm(s.llm_provider, model, api_key or None)
        return self._lm

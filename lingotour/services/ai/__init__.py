"""
Text-generation providers.

OpenAI in JSON mode is the default; other vendors are reached through
DSPy's LiteLLM-backed LM.
"""

from lingotour.services.ai.client import (
    CompletionProvider,
    OpenAIProvider,
    LMProvider,
    ProviderConfigError,
    get_lm,
    get_provider,
)

__all__ = [
    "CompletionProvider",
    "OpenAIProvider",
    "LMProvider",
    "ProviderConfigError",
    "get_lm",
    "get_provider",
]

"""
genforge.integrations.llm.factory - Provider Factory
======================================================

Maps ``LLMConfig.provider`` to a concrete BaseLLMProvider.

Usage:
    >>> provider = create_llm_provider(LLMConfig(provider="mock"))
    >>> type(provider)  # MockLLMProvider
"""

from __future__ import annotations

from genforge.core.config import LLMConfig
from genforge.core.exceptions import ConfigurationError
from genforge.integrations.llm.base import BaseLLMProvider


AVAILABLE_PROVIDERS = ("mock", "openai", "gemini")


def create_llm_provider(config: LLMConfig) -> BaseLLMProvider:
    """Create a provider instance based on configuration.

        - "mock"   → MockLLMProvider (no API key needed)
        - "openai" → OpenAICompatibleProvider (httpx, SSE streaming)
        - "gemini" → GeminiProvider (google-genai SDK)

    Args:
        config: LLM configuration with provider name, model, API key, etc.

    Returns:
        A concrete BaseLLMProvider ready for stream()/generate() calls.

    Raises:
        ConfigurationError: If the provider name is not recognized.
    """
    provider_name = config.provider.lower()

    if provider_name == "mock":
        from genforge.integrations.llm.mock import MockLLMProvider
        return MockLLMProvider(config)

    if provider_name == "openai":
        from genforge.integrations.llm.openai_compatible import OpenAICompatibleProvider
        return OpenAICompatibleProvider(config)

    if provider_name == "gemini":
        from genforge.integrations.llm.gemini import GeminiProvider
        return GeminiProvider(config)

    raise ConfigurationError(
        message=(
            f"Unknown LLM provider: '{provider_name}'. "
            f"Available providers: {', '.join(AVAILABLE_PROVIDERS)}."
        ),
        error_code="UNKNOWN_PROVIDER",
        details={"provider": provider_name},
    )

"""
genforge.integrations.llm - Text-Generation Providers
=======================================================

Agents and sessions call providers through the BaseLLMProvider interface, so
the backend can be swapped without touching them.

Available Providers:
    - MockLLMProvider:          Scripted / role-aware responses (testing, offline use)
    - OpenAICompatibleProvider: Streaming chat completions over httpx
    - GeminiProvider:           Google Gemini through the google-genai SDK

Usage:
    >>> from genforge.integrations.llm import ChatMessage, create_llm_provider
    >>> provider = create_llm_provider(config.llm)
    >>> async for fragment in provider.stream([ChatMessage.user("Build a todo app")]):
    ...     print(fragment, end="")
"""

from genforge.integrations.llm.base import (
    BaseLLMProvider,
    ChatMessage,
    LLMResponse,
    LLMUsage,
)
from genforge.integrations.llm.factory import create_llm_provider
from genforge.integrations.llm.gemini import GeminiProvider
from genforge.integrations.llm.mock import MockLLMProvider
from genforge.integrations.llm.openai_compatible import OpenAICompatibleProvider

__all__ = [
    "BaseLLMProvider",
    "ChatMessage",
    "GeminiProvider",
    "LLMResponse",
    "LLMUsage",
    "MockLLMProvider",
    "OpenAICompatibleProvider",
    "create_llm_provider",
]

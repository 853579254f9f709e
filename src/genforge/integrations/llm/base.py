"""
genforge.integrations.llm.base - Abstract Text-Generation Provider
===================================================================

This module defines the contract every text-generation provider implements.
Agents and sessions never talk to an HTTP API directly; they submit a chat
history and consume an asynchronous sequence of text fragments.

Architecture Context:

    ┌──────────────────┐   stream(messages)   ┌──────────────────┐
    │ Agent /          │ ───────────────────→ │ BaseLLMProvider  │
    │ GenerationSession│ ←── "frag" "frag" ── │ (abstract)       │
    └──────────────────┘                      └────────┬─────────┘
                                                       │
                              ┌────────────────────────┼────────────────────┐
                         ┌────▼───┐           ┌────────▼─────────┐  ┌───────▼────────┐
                         │  Mock  │           │ OpenAICompatible │  │ Gemini         │
                         │Provider│           │ (httpx + SSE)    │  │ (google-genai) │
                         └────────┘           └──────────────────┘  └────────────────┘

Failure Modes:
    A provider can fail in two ways, both surfaced as ProviderError:
        1. Rejected before the first fragment (auth, bad config, HTTP 4xx/5xx)
        2. Stream terminated early (network drop, server error mid-stream)

Usage:
    >>> async for fragment in provider.stream([ChatMessage.user("Build a todo app")]):
    ...     buffer += fragment
    >>> response = await provider.generate([ChatMessage.user("Hello")])
    >>> response.content
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Optional

from pydantic import BaseModel, Field

from genforge.core.config import LLMConfig
from genforge.core.enums import ChatRole


# =============================================================================
# Chat Messages
# =============================================================================
class ChatMessage(BaseModel):
    """One entry of a chat history submitted to a provider.

    Attributes:
        role: Who produced the message (user or model).
        content: The message text.
    """

    role: ChatRole = Field(description="Author of the message")
    content: str = Field(description="Message text")

    @classmethod
    def user(cls, content: str) -> ChatMessage:
        return cls(role=ChatRole.USER, content=content)

    @classmethod
    def model(cls, content: str) -> ChatMessage:
        return cls(role=ChatRole.MODEL, content=content)


# =============================================================================
# LLM Response Model
# =============================================================================
class LLMUsage(BaseModel):
    """Token usage of one generation call (estimated when the API omits it).

    Attributes:
        prompt_tokens: Number of tokens in the submitted history.
        completion_tokens: Number of tokens in the generated output.
        total_tokens: Sum of prompt + completion tokens.
    """

    prompt_tokens: int = Field(default=0, ge=0, description="Tokens in the input prompt")
    completion_tokens: int = Field(default=0, ge=0, description="Tokens in the output")
    total_tokens: int = Field(default=0, ge=0, description="Total tokens consumed")


class LLMResponse(BaseModel):
    """A fully drained generation, as returned by ``generate()``.

    Attributes:
        content: The concatenated fragments.
        model: The model identifier that produced this response.
        usage: Token counts (estimated from text length).
        fragment_count: How many fragments the stream delivered.
        metadata: Provider-specific extras (latency, etc.).
        created_at: When this response was completed (UTC).
    """

    content: str = Field(description="The generated text content")
    model: str = Field(description="Model identifier that produced this response")
    usage: LLMUsage = Field(
        default_factory=LLMUsage,
        description="Token usage for cost tracking",
    )
    fragment_count: int = Field(default=0, ge=0, description="Number of streamed fragments")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific metadata (latency, etc.)",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Response creation timestamp (UTC)",
    )


def estimate_usage(prompt: str, completion: str) -> LLMUsage:
    """Estimate token usage at roughly four characters per token."""
    prompt_tokens = len(prompt) // 4
    completion_tokens = len(completion) // 4
    return LLMUsage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
    )


# =============================================================================
# Abstract Base LLM Provider
# =============================================================================
class BaseLLMProvider(ABC):
    """Abstract base class for all text-generation providers.

    What the base class provides:
        - Configuration storage and accessors (model, temperature, max_tokens)
        - generate(): drains stream() into an LLMResponse

    What subclasses must implement:
        - stream(): submit a history and yield text fragments

    What subclasses can optionally implement:
        - aclose(): release network resources
    """

    def __init__(self, config: LLMConfig) -> None:
        """Initialize the provider with configuration.

        Args:
            config: LLM configuration containing provider name, model,
                API key, temperature, max_tokens and optional base URL.
        """
        self._config = config

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def provider_name(self) -> str:
        """The name of this provider (e.g., 'openai', 'mock')."""
        return self._config.provider

    @property
    def model(self) -> str:
        """The model identifier (e.g., 'gpt-4o-mini')."""
        return self._config.model

    @property
    def temperature(self) -> float:
        """Default sampling temperature, 0.0 to 2.0."""
        return self._config.temperature

    @property
    def max_tokens(self) -> int:
        """Default maximum number of generated tokens per call."""
        return self._config.max_tokens

    @property
    def config(self) -> LLMConfig:
        """Access the full LLM configuration."""
        return self._config

    # =========================================================================
    # Abstract Methods (Subclasses MUST implement)
    # =========================================================================

    @abstractmethod
    def stream(
        self,
        messages: list[ChatMessage],
        *,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> AsyncIterator[str]:
        """Submit a chat history and yield text fragments as they arrive.

        Implementations are async generators.

        Args:
            messages: The conversation so far, oldest first.
            system_instruction: Optional instruction sent ahead of the history.
            temperature: Override the configured temperature for this call.
            max_tokens: Override the configured max_tokens for this call.

        Yields:
            Non-empty text fragments in generation order.

        Raises:
            ProviderError: If the request is rejected or the stream breaks.
        """
        ...

    # =========================================================================
    # Shared Behaviour
    # =========================================================================

    async def generate(
        self,
        messages: list[ChatMessage],
        *,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """Drain ``stream()`` into a single LLMResponse.

        Args:
            messages: The conversation so far, oldest first.
            system_instruction: Optional instruction sent ahead of the history.
            temperature: Override the configured temperature for this call.
            max_tokens: Override the configured max_tokens for this call.

        Returns:
            LLMResponse with the concatenated content.

        Raises:
            ProviderError: Propagated from stream().
        """
        started = time.monotonic()
        fragments: list[str] = []
        async for fragment in self.stream(
            messages,
            system_instruction=system_instruction,
            temperature=temperature,
            max_tokens=max_tokens,
        ):
            fragments.append(fragment)

        content = "".join(fragments)
        prompt_text = (system_instruction or "") + "".join(m.content for m in messages)
        return LLMResponse(
            content=content,
            model=self.model,
            usage=estimate_usage(prompt_text, content),
            fragment_count=len(fragments),
            metadata={"latency_seconds": round(time.monotonic() - started, 4)},
        )

    async def aclose(self) -> None:
        """Release any resources held by the provider. No-op by default."""
        return None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"provider={self.provider_name!r}, "
            f"model={self.model!r})"
        )

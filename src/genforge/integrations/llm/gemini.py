"""
genforge.integrations.llm.gemini - Google Gemini Streaming Provider
=====================================================================

Streams content from the Gemini API through the official ``google-genai``
SDK. The whole history is sent on every call; the SDK's async client yields
response chunks whose ``text`` attribute carries the next fragment.

Role Mapping:
    ChatRole.USER  → "user"
    ChatRole.MODEL → "model"
    system_instruction → GenerateContentConfig.system_instruction

The history must end with a user message; Gemini answers the last user turn.

Errors:
    - No API key configured           → ConfigurationError (on first use)
    - History not ending with a user  → ProviderError (INVALID_HISTORY)
    - SDK APIError (4xx/5xx)          → ProviderError (PROVIDER_HTTP_ERROR)
    - Transport failure mid-stream    → ProviderError (PROVIDER_STREAM_ERROR)
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Optional

import httpx
import structlog
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from genforge.core.config import LLMConfig
from genforge.core.enums import ChatRole
from genforge.core.exceptions import ConfigurationError, ProviderError
from genforge.integrations.llm.base import BaseLLMProvider, ChatMessage


logger = structlog.get_logger()

_ROLE_MAP: dict[ChatRole, str] = {
    ChatRole.USER: "user",
    ChatRole.MODEL: "model",
}


class GeminiProvider(BaseLLMProvider):
    """Streaming provider for Google's Gemini models.

    Args:
        config: LLM configuration (api_key required; api_base_url optional).
        client: Optional pre-built ``genai.Client``. Tests pass a stand-in
            exposing ``aio.models.generate_content_stream``.
    """

    def __init__(self, config: LLMConfig, *, client: Optional[Any] = None) -> None:
        super().__init__(config)
        self._client = client
        self._logger = logger.bind(component="gemini_provider", model=config.model)

    def _get_client(self) -> Any:
        if self._client is None:
            http_options = types.HttpOptions(
                base_url=self._config.api_base_url,
                timeout=int(self._config.request_timeout_seconds * 1000),
            )
            self._client = genai.Client(api_key=self._config.api_key, http_options=http_options)
        return self._client

    def build_contents(self, messages: list[ChatMessage]) -> list[types.Content]:
        """Map the chat history to Gemini ``Content`` entries."""
        return [
            types.Content(role=_ROLE_MAP[message.role], parts=[types.Part(text=message.content)])
            for message in messages
        ]

    def build_config(
        self,
        *,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=system_instruction or None,
            temperature=self.temperature if temperature is None else temperature,
            max_output_tokens=self.max_tokens if max_tokens is None else max_tokens,
        )

    async def stream(
        self,
        messages: list[ChatMessage],
        *,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> AsyncIterator[str]:
        if not self._config.api_key:
            raise ConfigurationError(
                message="An API key is required for the 'gemini' provider. "
                        "Set GENFORGE_LLM__API_KEY or llm.api_key.",
                error_code="MISSING_API_KEY",
            )
        if not messages or messages[-1].role != ChatRole.USER:
            raise ProviderError(
                message="Gemini history must end with a user message",
                provider="gemini",
                error_code="INVALID_HISTORY",
            )

        contents = self.build_contents(messages)
        config = self.build_config(
            system_instruction=system_instruction,
            temperature=temperature,
            max_tokens=max_tokens,
        )

        self._logger.debug("gemini_stream_starting", message_count=len(contents))

        fragment_count = 0
        try:
            response = await self._get_client().aio.models.generate_content_stream(
                model=self.model,
                contents=contents,
                config=config,
            )
            async for chunk in response:
                text = chunk.text
                if text:
                    fragment_count += 1
                    yield text
        except genai_errors.APIError as e:
            raise ProviderError(
                message=f"Gemini API error: {e.code} - {e.message}",
                provider="gemini",
                error_code="PROVIDER_HTTP_ERROR",
                details={"status_code": e.code, "fragments_received": fragment_count},
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(
                message=f"Gemini stream failed: {e}",
                provider="gemini",
                error_code="PROVIDER_STREAM_ERROR",
                details={"fragments_received": fragment_count},
            ) from e

        self._logger.debug("gemini_stream_completed", fragment_count=fragment_count)

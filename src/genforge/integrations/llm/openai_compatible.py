"""
genforge.integrations.llm.openai_compatible - OpenAI-Compatible Streaming Provider
===================================================================================

Streams chat completions from any endpoint speaking the OpenAI
``/chat/completions`` protocol (OpenAI itself, proxies, local servers).

Wire Format:
    Request:  POST {base_url}/chat/completions   {"model", "messages", "stream": true, ...}
    Response: text/event-stream, one JSON chunk per ``data:`` line:

        data: {"choices":[{"delta":{"content":"<div"}}]}
        data: {"choices":[{"delta":{"content":">Hello"}}]}
        data: [DONE]

Role Mapping:
    ChatRole.USER  → "user"
    ChatRole.MODEL → "assistant"
    system_instruction (if any) → a leading "system" message

Errors:
    - No API key configured       → ConfigurationError (on first use)
    - Non-200 HTTP status         → ProviderError ("OpenAI API error: <status> - <body>")
    - Transport failure mid-stream → ProviderError
    - Malformed SSE chunk          → logged and skipped
"""

from __future__ import annotations

import json
from typing import Any, AsyncIterator, Optional

import httpx
import structlog

from genforge.core.config import LLMConfig
from genforge.core.enums import ChatRole
from genforge.core.exceptions import ConfigurationError, ProviderError
from genforge.integrations.llm.base import BaseLLMProvider, ChatMessage


logger = structlog.get_logger()

DEFAULT_BASE_URL = "https://api.openai.com/v1"

_ROLE_MAP: dict[ChatRole, str] = {
    ChatRole.USER: "user",
    ChatRole.MODEL: "assistant",
}


class OpenAICompatibleProvider(BaseLLMProvider):
    """Streaming provider for OpenAI-compatible chat completion APIs.

    Args:
        config: LLM configuration (api_key required, api_base_url optional).
        client: Optional pre-built ``httpx.AsyncClient``. Tests pass one with
            an ``httpx.MockTransport``. A client created here is owned by the
            provider and closed by ``aclose()``.
    """

    def __init__(self, config: LLMConfig, *, client: Optional[httpx.AsyncClient] = None) -> None:
        super().__init__(config)
        self._client = client
        self._owns_client = client is None
        self._logger = logger.bind(component="openai_provider", model=config.model)

    @property
    def base_url(self) -> str:
        """Configured base URL without a trailing slash."""
        return (self._config.api_base_url or DEFAULT_BASE_URL).rstrip("/")

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._config.request_timeout_seconds)
        return self._client

    def build_payload(
        self,
        messages: list[ChatMessage],
        *,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> dict[str, Any]:
        """Build the JSON body of a streaming chat completion request."""
        api_messages: list[dict[str, str]] = []
        if system_instruction:
            api_messages.append({"role": "system", "content": system_instruction})
        api_messages.extend(
            {"role": _ROLE_MAP[message.role], "content": message.content}
            for message in messages
        )
        return {
            "model": self.model,
            "messages": api_messages,
            "stream": True,
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": self.max_tokens if max_tokens is None else max_tokens,
        }

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
                message="An API key is required for the 'openai' provider. "
                        "Set GENFORGE_LLM__API_KEY or llm.api_key.",
                error_code="MISSING_API_KEY",
            )

        payload = self.build_payload(
            messages,
            system_instruction=system_instruction,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        headers = {
            "Content-Type": "application/json",
            "Accept": "text/event-stream",
            "Authorization": f"Bearer {self._config.api_key}",
        }

        self._logger.debug("openai_stream_starting", message_count=len(payload["messages"]))

        fragment_count = 0
        try:
            async with self._get_client().stream(
                "POST", self.completions_url, json=payload, headers=headers
            ) as response:
                if response.status_code != 200:
                    error_text = (await response.aread()).decode("utf-8", errors="replace")
                    raise ProviderError(
                        message=f"OpenAI API error: {response.status_code} - {error_text}",
                        provider="openai",
                        error_code="PROVIDER_HTTP_ERROR",
                        details={"status_code": response.status_code},
                    )

                async for line in response.aiter_lines():
                    data = _sse_data(line)
                    if data is None:
                        continue
                    if data == "[DONE]":
                        break
                    content = self._parse_chunk(data)
                    if content:
                        fragment_count += 1
                        yield content
        except httpx.HTTPError as e:
            raise ProviderError(
                message=f"OpenAI stream failed: {e}",
                provider="openai",
                error_code="PROVIDER_STREAM_ERROR",
                details={"fragments_received": fragment_count},
            ) from e

        self._logger.debug("openai_stream_completed", fragment_count=fragment_count)

    def _parse_chunk(self, data: str) -> Optional[str]:
        try:
            chunk = json.loads(data)
        except ValueError:
            self._logger.warning("openai_sse_chunk_malformed", data=data[:200])
            return None
        try:
            return chunk["choices"][0]["delta"].get("content")
        except (KeyError, IndexError, TypeError, AttributeError):
            return None

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


def _sse_data(line: str) -> Optional[str]:
    """Return the payload of an SSE ``data:`` line, or None for other lines."""
    stripped = line.strip()
    if not stripped.startswith("data:"):
        return None
    return stripped[len("data:"):].strip()

"""
genforge.integrations.llm.mock - Mock Provider for Testing
============================================================

A provider that streams configurable responses without any network traffic.
It is the default provider, so the whole five-stage pipeline runs with zero
configuration.

How It Works:
    The mock keeps a FIFO queue of scripted replies. When stream() is called:
    1. The call is recorded in call_history.
    2. If persistent failure is switched on, ProviderError is raised.
    3. If the queue has an entry, it is replayed: a scripted failure raises
       (optionally after yielding some fragments), a scripted response is
       streamed fragment by fragment.
    4. Otherwise a role-aware default is streamed. The role is recognised
       from the agent prompt ("You are the Architect Agent...").

Usage:
    >>> provider = MockLLMProvider()
    >>> provider.queue_response('{"plan": "Todo app"}')
    >>> provider.queue_failure("connection reset", after_fragments=2)
    >>> response = await provider.generate([ChatMessage.user("plan this")])
    >>> response.content
    '{"plan": "Todo app"}'
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any, AsyncIterator, NamedTuple, Optional

import structlog

from genforge.core.config import LLMConfig
from genforge.core.exceptions import ProviderError
from genforge.integrations.llm.base import BaseLLMProvider, ChatMessage


# =============================================================================
# Logger
# =============================================================================
logger = structlog.get_logger()


class _ScriptedReply(NamedTuple):
    fragments: list[str]
    error: Optional[str] = None
    # For scripted failures: how many fragments to yield before raising.
    after_fragments: int = 0


class MockLLMProvider(BaseLLMProvider):
    """Mock text-generation provider for tests and offline development.

    Features:
        - **Reply Queue**: Script responses and failures in FIFO order.
        - **Fragmenting**: Responses are streamed in ``fragment_size`` chunks
          (or explicit fragments) so streaming consumers are exercised.
        - **Smart Defaults**: Role-aware canned answers when the queue is empty.
        - **Call History**: Every stream() call is recorded for assertions.
        - **Error Simulation**: Persistent or one-shot ProviderError.

    Example:
        >>> provider = MockLLMProvider()
        >>> provider.queue_response("Hello, World!")
        >>> response = await provider.generate([ChatMessage.user("Say hello")])
        >>> assert response.content == "Hello, World!"
        >>> assert provider.call_count == 1
    """

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        *,
        fragment_size: int = 24,
        default_response: Optional[str] = None,
    ) -> None:
        """Initialize the mock provider.

        Args:
            config: LLM configuration. Defaults to a mock config if None.
            fragment_size: Characters per streamed fragment for queued
                responses given as a single string.
            default_response: Overrides the role-aware smart defaults when set.
        """
        if config is None:
            config = LLMConfig(provider="mock", model="mock-model")
        super().__init__(config)

        if fragment_size < 1:
            raise ValueError("fragment_size must be >= 1")
        self._fragment_size = fragment_size
        self._default_response = default_response

        self._reply_queue: deque[_ScriptedReply] = deque()
        self._call_history: list[dict[str, Any]] = []

        self._should_fail: bool = False
        self._failure_message: str = "Mock LLM API error"

        self._logger = logger.bind(component="mock_llm_provider")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """All recorded stream() calls.

        Each entry contains "messages", "system_instruction", "temperature"
        and "max_tokens".
        """
        return self._call_history

    @property
    def call_count(self) -> int:
        return len(self._call_history)

    @property
    def queue_size(self) -> int:
        return len(self._reply_queue)

    # =========================================================================
    # Queue Management
    # =========================================================================

    def queue_response(self, content: str, *, fragments: Optional[list[str]] = None) -> None:
        """Script the next response.

        Args:
            content: Full response text. Split into ``fragment_size`` chunks
                unless ``fragments`` is given.
            fragments: Explicit fragments to stream instead. Their
                concatenation should equal ``content``.
        """
        if fragments is None:
            fragments = self._split(content)
        self._reply_queue.append(_ScriptedReply(fragments=list(fragments)))

    def queue_failure(
        self,
        message: str = "Mock LLM API error",
        *,
        after_fragments: int = 0,
        partial_content: str = "",
    ) -> None:
        """Script a one-shot failure for the next call.

        Args:
            message: ProviderError message.
            after_fragments: 0 fails before the first fragment ("rejected");
                N > 0 yields N fragments of ``partial_content`` first
                ("stream terminated early").
            partial_content: Text streamed before a mid-stream failure.
        """
        fragments = self._split(partial_content)[:after_fragments] if after_fragments else []
        self._reply_queue.append(
            _ScriptedReply(fragments=fragments, error=message, after_fragments=len(fragments))
        )

    def clear_queue(self) -> None:
        self._reply_queue.clear()

    def clear_history(self) -> None:
        self._call_history.clear()

    # =========================================================================
    # Error Simulation
    # =========================================================================

    def set_should_fail(self, should_fail: bool, message: str = "Mock LLM API error") -> None:
        """Make every following call fail before its first fragment.

        Args:
            should_fail: True to simulate failures, False for normal operation.
            message: The ProviderError message.
        """
        self._should_fail = should_fail
        self._failure_message = message

    # =========================================================================
    # Provider Interface
    # =========================================================================

    async def stream(
        self,
        messages: list[ChatMessage],
        *,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> AsyncIterator[str]:
        """Stream a scripted or default response.

        Raises:
            ProviderError: On persistent or scripted failure.
        """
        self._call_history.append({
            "messages": list(messages),
            "system_instruction": system_instruction,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })

        self._logger.debug(
            "mock_stream_called",
            message_count=len(messages),
            queue_size=len(self._reply_queue),
        )

        if self._should_fail:
            raise ProviderError(
                message=self._failure_message,
                provider="mock",
                error_code="PROVIDER_REJECTED",
            )

        if self._reply_queue:
            reply = self._reply_queue.popleft()
        else:
            reply = _ScriptedReply(
                fragments=self._split(self._smart_default(messages, system_instruction)),
            )

        for fragment in reply.fragments:
            # Yield control like a real network stream would.
            await asyncio.sleep(0)
            yield fragment

        if reply.error is not None:
            raise ProviderError(
                message=reply.error,
                provider="mock",
                error_code="PROVIDER_STREAM_ERROR" if reply.after_fragments else "PROVIDER_REJECTED",
                details={"fragments_sent": reply.after_fragments},
            )

    # =========================================================================
    # Smart Default Generation
    # =========================================================================

    def _smart_default(self, messages: list[ChatMessage], system_instruction: Optional[str]) -> str:
        """Pick a canned answer matching the role found in the prompt."""
        if self._default_response is not None:
            return self._default_response

        prompt = messages[-1].content if messages else ""
        head = prompt[:200].lower()

        if "you are the coordinator agent" in head:
            return _MOCK_PLAN
        if "you are the architect agent" in head:
            return _MOCK_ARCHITECTURE
        if "you are the frontend agent" in head:
            return _MOCK_FRONTEND
        if "you are the backend agent" in head:
            return _MOCK_BACKEND
        if "you are the reviewer agent" in head:
            return _MOCK_REVIEW
        return _MOCK_SINGLE_PAGE

    def _split(self, text: str) -> list[str]:
        size = self._fragment_size
        return [text[i:i + size] for i in range(0, len(text), size)]


# =============================================================================
# Mock Response Templates
# =============================================================================
_MOCK_PLAN = """```json
{
  "plan": "Build a single-page counter app with a styled layout",
  "tasks": [
    {"agent": "architect", "description": "Design the component tree"},
    {"agent": "frontend", "description": "Build the App component"},
    {"agent": "backend", "description": "Decide whether helpers are needed"}
  ]
}
```"""

_MOCK_ARCHITECTURE = """{
  "structure": {
    "components": ["App: root component holding the counter state"],
    "state": "useState in App",
    "dataFlow": "Props down, callbacks up"
  },
  "files": ["public/index.html", "src/App.jsx"]
}"""

_MOCK_FRONTEND = """Here are the files.
FILE-BOUNDARY: public/index.html
```html
<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><title>Counter</title></head>
<body><div id="root"></div></body>
</html>
```
FILE-BOUNDARY: src/App.jsx
```jsx
export default function App() {
  const [count, setCount] = React.useState(0);
  return <button onClick={() => setCount(count + 1)}>Clicked {count} times</button>;
}
```"""

_MOCK_BACKEND = "No backend logic required for this project."

_MOCK_REVIEW = """{"issues": [], "improvements": ["Add keyboard shortcuts"], "approved": true}"""

_MOCK_SINGLE_PAGE = """Here is your app!
```html
<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><title>Mock App</title></head>
<body><div id="root">Hello from the mock provider</div></body>
</html>
```"""
